"""dynstore: Core
---------------------------------------------------------
Registry, caches, resolver, configuration and error types.

Public API
----------
``PatternRegistry``, ``RegistryEntry``, ``default_registry``, ``register``, ``register_lazy``
``Resolver``, ``Found``, ``NotFound``
``MemoryCache``, ``LRUCache``, ``make_cache``
``DynStoreConfig``, ``load_config``, ``build_resolver``
"""

from .cache import LRUCache, MemoryCache, make_cache
from .config import CacheConfig, DynStoreConfig, ResolverConfig, RouteConfig
from .config_loader import build_resolver, load_config, register_routes
from .errors import (
    DynStoreConfigError,
    DynStoreError,
    DynStoreIOError,
    DynStoreRegistryError,
    DynStoreWarning,
    UnknownStorageError,
    configure_logging,
    get_logger,
)
from .protocols import ResolutionCache
from .registry import PatternRegistry, RegistryEntry, register, register_lazy
from .registry import registry as default_registry
from .resolver import NOT_FOUND, Found, MatchResult, NotFound, Resolver

__all__ = [
    "PatternRegistry",
    "RegistryEntry",
    "default_registry",
    "register",
    "register_lazy",
    "Resolver",
    "Found",
    "NotFound",
    "NOT_FOUND",
    "MatchResult",
    "ResolutionCache",
    "MemoryCache",
    "LRUCache",
    "make_cache",
    "CacheConfig",
    "ResolverConfig",
    "RouteConfig",
    "DynStoreConfig",
    "load_config",
    "register_routes",
    "build_resolver",
    "DynStoreError",
    "DynStoreIOError",
    "DynStoreRegistryError",
    "DynStoreConfigError",
    "UnknownStorageError",
    "DynStoreWarning",
    "get_logger",
    "configure_logging",
]
