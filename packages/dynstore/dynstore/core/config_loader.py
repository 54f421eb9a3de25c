"""Configuration loading utilities.

Loads ``DynStoreConfig`` from YAML files through an override chain and turns
the configured routes into registry entries, so bootstrap code can build a
ready resolver from a single file.
"""

from __future__ import annotations

import importlib.resources as ilr
import os
from pathlib import Path

from pydantic import ValidationError

from .config import DynStoreConfig
from .errors import DynStoreConfigError, DynStoreIOError, get_logger
from .protocols import DefaultResolver
from .registry import PatternRegistry
from .resolver import Resolver
from .utils import deep_merge_dicts, load_yaml_file

__all__ = [
    "CONFIG_ENV_VAR",
    "load_config",
    "register_routes",
    "build_resolver",
]

logger = get_logger()

CONFIG_ENV_VAR = "DYNSTORE_CONFIG"

# Cache for the implicit (path-less) configuration
_CONFIG_CACHE: DynStoreConfig | None = None


def load_config(
    config_path: str | Path | None = None, *, force_reload: bool = False
) -> DynStoreConfig:
    """Load configuration with override chain.

    Search order (later overrides earlier):
    1. Package default (dynstore.core/config.yaml)
    2. ~/.dynstore/config.yaml (User-specific)
    3. DYNSTORE_CONFIG environment variable
    4. Explicitly provided config_path

    Mappings are merged recursively; lists such as ``routes`` are replaced by
    the later source.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to a specific config file overriding everything else
    force_reload : bool
        If True, ignore cache and reload

    Returns
    -------
    DynStoreConfig
        Validated configuration

    Raises
    ------
    DynStoreIOError
        The explicit config_path does not exist.
    DynStoreConfigError
        A file cannot be parsed or the merged result is invalid.

    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE is not None and not force_reload and config_path is None:
        return _CONFIG_CACHE

    # 1. Package default
    default_path = Path(str(ilr.files("dynstore.core").joinpath("config.yaml")))
    config_dict = load_yaml_file(default_path)

    # 2. User config
    user_path = Path.home() / ".dynstore" / "config.yaml"
    if user_path.exists():
        try:
            config_dict = deep_merge_dicts(config_dict, load_yaml_file(user_path))
        except DynStoreConfigError as e:
            logger.warning(f"Failed to load user config {user_path}: {e}")

    # 3. Environment variable
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if path.exists():
            try:
                config_dict = deep_merge_dicts(config_dict, load_yaml_file(path))
            except DynStoreConfigError as e:
                logger.warning(f"Failed to load env config {path}: {e}")
        else:
            logger.warning(f"{CONFIG_ENV_VAR} points to a missing file: {path}")

    # 4. Explicit path
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise DynStoreIOError(f"[101] Config file not found: {path}")
        config_dict = deep_merge_dicts(config_dict, load_yaml_file(path))

    try:
        config = DynStoreConfig(**config_dict)
    except ValidationError as e:
        raise DynStoreConfigError(f"[500] Invalid configuration: {e}") from e

    if config_path is None:
        _CONFIG_CACHE = config
    return config


def register_routes(config: DynStoreConfig, registry: PatternRegistry) -> int:
    """Register every configured route, in file order, as a lazy entry.

    Returns
    -------
    int
        Number of routes registered.

    """
    for route in config.routes:
        registry.register_lazy(route.pattern, route.target, tags=list(route.tags), source="config")
    if config.routes:
        logger.info(f"Registered {len(config.routes)} route(s) from configuration")
    return len(config.routes)


def build_resolver(
    config: DynStoreConfig | None = None,
    fallback: DefaultResolver | None = None,
    registry: PatternRegistry | None = None,
) -> Resolver:
    """Create a registry from the configured routes and a resolver over it.

    Parameters
    ----------
    config : DynStoreConfig, optional
        Loaded configuration; ``load_config()`` is used when omitted.
    fallback : Callable, optional
        Default resolver for unmatched names.
    registry : PatternRegistry, optional
        Registry to extend. A fresh one is created when omitted, so routes
        registered here never leak into the process-wide registry.

    """
    config = config or load_config()
    registry = registry if registry is not None else PatternRegistry()
    register_routes(config, registry)
    return Resolver.from_config(config.resolver, registry=registry, fallback=fallback)
