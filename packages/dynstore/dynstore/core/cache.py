"""dynstore: Resolution Caches
---------------------------
Thread-safe name -> backend tables used by the resolver.

Public API
----------
``MemoryCache`` : Unbounded cache; entries live for the process lifetime
``LRUCache`` : Bounded cache evicting the least recently used name
``make_cache`` : Build a cache from a ``CacheConfig``

Notes
-----
- Every read and write happens under a lock. Insertion has ``setdefault``
  semantics: when two threads construct a backend for the same name, the
  first stored backend is kept and returned to both.
- ``MemoryCache`` never evicts, which keeps the identity guarantee of
  pattern-resolved backends. ``LRUCache`` trades that guarantee for bounded
  memory: an evicted name is reconstructed on its next resolution.
"""

import threading
from collections import OrderedDict
from collections.abc import Hashable

from .config import CacheConfig
from .errors import DynStoreConfigError
from .protocols import Backend, ResolutionCache

__all__ = ["MemoryCache", "LRUCache", "make_cache"]


class MemoryCache:
    """Unbounded, never-evicting cache."""

    __slots__ = ("_lock", "_data")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[Hashable, Backend] = {}

    def lookup(self, name: Hashable) -> tuple[bool, Backend]:
        with self._lock:
            if name in self._data:
                return True, self._data[name]
            return False, None

    def setdefault(self, name: Hashable, backend: Backend) -> Backend:
        with self._lock:
            return self._data.setdefault(name, backend)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"MemoryCache(size={len(self)})"


class LRUCache:
    """Bounded cache keeping at most ``max_size`` names.

    A hit marks the name as most recently used; inserting into a full cache
    evicts the least recently used name.
    """

    __slots__ = ("_lock", "_data", "max_size")

    def __init__(self, max_size: int | None) -> None:
        if max_size is None or max_size <= 0:
            raise DynStoreConfigError(f"[510] LRU cache max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._lock = threading.Lock()
        self._data: OrderedDict[Hashable, Backend] = OrderedDict()

    def lookup(self, name: Hashable) -> tuple[bool, Backend]:
        with self._lock:
            if name not in self._data:
                return False, None
            self._data.move_to_end(name)
            return True, self._data[name]

    def setdefault(self, name: Hashable, backend: Backend) -> Backend:
        with self._lock:
            if name in self._data:
                self._data.move_to_end(name)
                return self._data[name]
            self._data[name] = backend
            while len(self._data) > self.max_size:
                self._data.popitem(last=False)
            return backend

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"LRUCache(size={len(self)}, max_size={self.max_size})"


def make_cache(config: CacheConfig | None = None) -> ResolutionCache:
    """Build the cache described by ``config`` (unbounded by default)."""
    config = config or CacheConfig()
    if config.policy == "lru":
        return LRUCache(config.max_size)
    return MemoryCache()
