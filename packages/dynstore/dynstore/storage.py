"""dynstore: Storage Catalogs
---------------------------------------------------------
Host-side integration of the resolver. ``StorageCatalog`` is the plain
name -> storage lookup an application already has; ``DynamicStorageCatalog``
adds pattern-registered storages in front of it.

Public API
----------
``StorageCatalog`` : Static named storages, raising ``UnknownStorageError``
``DynamicStorageCatalog`` : Pattern-based storages with a static fallback

Examples
--------
>>> catalog = DynamicStorageCatalog({"cache": {"bucket": "tmp"}})
>>> @catalog.storage(r"^store_(\\w+)$")
... def build_store(match):
...     return {"bucket": match[1]}
>>> catalog.find_storage("store_foo")
{'bucket': 'foo'}
>>> catalog.find_storage("cache")
{'bucket': 'tmp'}
"""

from collections.abc import Callable, Mapping
from typing import Any

from .core.config import ResolverConfig
from .core.errors import UnknownStorageError
from .core.protocols import Backend, Constructor, Pattern
from .core.registry import PatternRegistry
from .core.resolver import Resolver

__all__ = ["StorageCatalog", "DynamicStorageCatalog"]


class StorageCatalog:
    """Storages registered under fixed names."""

    def __init__(self, storages: Mapping[str, Backend] | None = None) -> None:
        self.storages: dict[str, Backend] = dict(storages or {})

    def find_storage(self, name: Any) -> Backend:
        """Return the storage named ``name``.

        Raises
        ------
        UnknownStorageError
            - [404] No storage has that name.
        """
        try:
            return self.storages[name]
        except KeyError:
            raise UnknownStorageError(name) from None

    def __getitem__(self, name: Any) -> Backend:
        return self.find_storage(name)


class DynamicStorageCatalog(StorageCatalog):
    """Storage catalog that resolves names through registered patterns first.

    Unmatched names fall through to ``StorageCatalog.find_storage``, so an
    unknown name raises exactly the error the static catalog raises.

    Parameters
    ----------
    storages : Mapping[str, Any], optional
        Statically named storages used as the fallback.
    registry : PatternRegistry, optional
        Registry holding the dynamic storages; a private one by default.
    config : ResolverConfig, optional
        Cache policy and single-flight settings.

    """

    def __init__(
        self,
        storages: Mapping[str, Backend] | None = None,
        *,
        registry: PatternRegistry | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        super().__init__(storages)
        self.registry = registry if registry is not None else PatternRegistry()
        self.resolver = Resolver.from_config(
            config, registry=self.registry, fallback=super().find_storage
        )

    def storage(self, pattern: Pattern, **meta: Any) -> Callable[[Constructor], Constructor]:
        """Decorator registering a dynamic storage for names matching ``pattern``."""
        return self.registry.decorator(pattern, **meta)

    def find_storage(self, name: Any) -> Backend:
        return self.resolver.resolve(name)
