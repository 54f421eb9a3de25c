"""dynstore: Protocol Definitions
---------------------------------------------------------
Structural contracts shared by the registry, the caches and the resolver.

Public API
----------
``Backend`` : Opaque object produced by a constructor
``Pattern`` : Regular expression text or compiled pattern
``Constructor`` : Callable building a backend from a ``re.Match``
``DefaultResolver`` : Fallback callable used when no pattern matches
``ResolutionCache`` : Protocol for the per-name memoization table

Notes
-----
- The core never inspects backends; any object is accepted.
- Caches are duck typed; ``ResolutionCache`` is runtime checkable so custom
  implementations can be validated with ``isinstance``.

"""

import re
from collections.abc import Callable, Hashable
from typing import Any, Protocol, TypeAlias, runtime_checkable

__all__ = [
    "Backend",
    "Pattern",
    "Constructor",
    "DefaultResolver",
    "ResolutionCache",
]

Backend: TypeAlias = Any
Pattern: TypeAlias = str | re.Pattern[str]
Constructor: TypeAlias = Callable[[re.Match[str]], Backend]
DefaultResolver: TypeAlias = Callable[[Any], Backend]


@runtime_checkable
class ResolutionCache(Protocol):
    """Protocol for concurrency-safe name -> backend caches.

    Implementations must be safe to call from several threads at once. The
    resolver only relies on the operations below, so a stricter policy
    (bounded size, expiry) can be substituted without touching resolution.
    """

    def lookup(self, name: Hashable) -> tuple[bool, Backend]:
        """Return ``(True, backend)`` on a hit and ``(False, None)`` on a miss."""
        ...

    def setdefault(self, name: Hashable, backend: Backend) -> Backend:
        """Store ``backend`` unless ``name`` is cached; return the cached value."""
        ...

    def __contains__(self, name: object) -> bool: ...

    def __len__(self) -> int: ...
