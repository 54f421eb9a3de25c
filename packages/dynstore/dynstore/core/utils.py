"""dynstore: Core Utilities
---------------------------------------------------------
Shared helpers for configuration handling and lazy constructor loading.

Public API
----------
``load_yaml_file`` : Load a YAML mapping with error handling
``deep_merge_dicts`` : Recursive dictionary merge for override chains
``import_target`` : Import ``module:attr`` or ``module.attr`` dotted paths
``pattern_text`` : Printable form of a registered pattern
"""

from __future__ import annotations

import re
from importlib import import_module
from pathlib import Path
from typing import Any

import yaml

from .errors import DynStoreConfigError, DynStoreIOError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file into a dictionary.

    Parameters
    ----------
    path : Path
        Path to the YAML file

    Returns
    -------
    Dict[str, Any]
        Loaded YAML data; an empty file yields an empty dict

    Raises
    ------
    DynStoreIOError
        If the file doesn't exist
    DynStoreConfigError
        If the file can't be parsed or its top level is not a mapping

    """
    if not path.exists():
        raise DynStoreIOError(f"[100] File not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise DynStoreConfigError(f"[501] Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DynStoreConfigError(
            f"[502] Expected a mapping at the top of {path}, got {type(data).__name__}"
        )
    return data


def deep_merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override values taking precedence.

    Lists are replaced, not concatenated.
    """
    result = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def import_target(target: str) -> Any:
    """Import a dotted target supporting ``module:attr`` or ``module.attr``.

    Parameters
    ----------
    target : str
        Dotted path such as ``"pkg.mod:build"`` or ``"pkg.mod.build"``.
        A path without any separator imports the module itself.

    Returns
    -------
    Any
        The imported attribute (or module).

    Raises
    ------
    ImportError
        When the module cannot be imported; callers decide how to report it.
    DynStoreConfigError
        - [403] Target not found in the imported module.

    """
    attr_name: str | None
    if ":" in target:
        module_name, attr_name = target.split(":", 1)
    elif "." in target:
        module_name, attr_name = target.rsplit(".", 1)
    else:
        module_name, attr_name = target, None

    mod = import_module(module_name)
    if attr_name is None:
        return mod
    if not hasattr(mod, attr_name):
        raise DynStoreConfigError(f"[403] Target '{target}' not found")
    return getattr(mod, attr_name)


def pattern_text(pattern: Any) -> str:
    """Return the source text of a pattern for display."""
    if isinstance(pattern, re.Pattern):
        return pattern.pattern
    return str(pattern)
