"""Pattern-Based Backend Registry
=============================

Register naming patterns with backend constructors and resolve backends by
name: the first registered pattern that matches builds the backend once, the
result is memoized per name, and unmatched names go to a default resolver.

Public API
----------
PatternRegistry
    Ordered ``(pattern, constructor)`` table.
Resolver
    Match-and-construct resolution with caching and fallback.
DynamicStorageCatalog
    Storage catalog with pattern-registered storages.
build_resolver
    Resolver built from a YAML configuration.
"""

from .core import (
    DynStoreConfig,
    DynStoreConfigError,
    DynStoreError,
    DynStoreIOError,
    DynStoreRegistryError,
    LRUCache,
    MemoryCache,
    PatternRegistry,
    Resolver,
    UnknownStorageError,
    build_resolver,
    configure_logging,
    default_registry,
    get_logger,
    load_config,
    register,
    register_lazy,
)
from .storage import DynamicStorageCatalog, StorageCatalog

# Public version string
__version__ = "0.1.0"

__all__ = [
    "PatternRegistry",
    "Resolver",
    "default_registry",
    "register",
    "register_lazy",
    "MemoryCache",
    "LRUCache",
    "DynStoreConfig",
    "load_config",
    "build_resolver",
    "StorageCatalog",
    "DynamicStorageCatalog",
    "DynStoreError",
    "DynStoreIOError",
    "DynStoreRegistryError",
    "DynStoreConfigError",
    "UnknownStorageError",
    "get_logger",
    "configure_logging",
    "__version__",
]
