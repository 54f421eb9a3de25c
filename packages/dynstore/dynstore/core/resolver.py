"""dynstore: Resolver
-------------------
Resolve a requested name to a backend through the pattern registry, with
per-name memoization and a fallback to a default resolver.

Behavior
--------
- Cache hit: return the cached backend without scanning the registry.
- Miss: scan registry entries in registration order; on the first pattern
  that matches, call its constructor with the ``re.Match``, cache the result
  under the exact requested name and return it.
- No match: leave the cache untouched and return whatever the default
  resolver returns for the unchanged name (its exceptions propagate as is).
- Constructor exceptions propagate unwrapped and nothing is cached, so the
  next resolution of that name tries again from scratch.

Concurrency
-----------
By default two threads resolving the same uncached name may both construct a
backend; the cache keeps the first one stored and both callers receive it.
With ``single_flight=True`` construction is serialized per name, so a
successful constructor runs at most once per name. A constructor that
resolves its own name again (directly or through another resolution) is
rejected with [420] under single-flight; without it the recursion is
unbounded and ends in ``RecursionError``.
"""

import re
import threading
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from .cache import MemoryCache, make_cache
from .config import ResolverConfig
from .errors import DynStoreRegistryError, UnknownStorageError, get_logger
from .protocols import Backend, DefaultResolver, ResolutionCache
from .registry import PatternRegistry, RegistryEntry
from .registry import registry as default_registry

__all__ = ["Found", "NotFound", "NOT_FOUND", "MatchResult", "Resolver"]

logger = get_logger()


@dataclass(frozen=True)
class Found:
    """A pattern matched and its constructor produced ``backend``."""

    backend: Backend


@dataclass(frozen=True)
class NotFound:
    """No registered pattern matched the name."""


NOT_FOUND = NotFound()

MatchResult = Found | NotFound


@dataclass
class _Flight:
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0
    owner: int | None = None  # thread ident holding ``lock``


class Resolver:
    """Pattern-based backend resolver.

    Parameters
    ----------
    registry : PatternRegistry, optional
        Registry to scan. Defaults to the process-wide ``registry``.
    fallback : Callable[[Any], Any], optional
        Default resolver called with the unchanged name when no pattern
        matches. Without one, unmatched names raise ``UnknownStorageError``.
    cache : ResolutionCache, optional
        Memoization table. Defaults to an unbounded ``MemoryCache``.
    single_flight : bool, default False
        Serialize construction per name.

    Examples
    --------
    >>> reg = PatternRegistry()
    >>> reg.register(r"^cache_(\\w+)$", lambda m: {"bucket": m[1]})
    >>> resolver = Resolver(reg, fallback=lambda name: None)
    >>> resolver.resolve("cache_foo")
    {'bucket': 'foo'}
    >>> resolver.resolve("cache_foo") is resolver.resolve("cache_foo")
    True
    """

    def __init__(
        self,
        registry: PatternRegistry | None = None,
        fallback: DefaultResolver | None = None,
        *,
        cache: ResolutionCache | None = None,
        single_flight: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.fallback = fallback
        self.cache = cache if cache is not None else MemoryCache()
        self.single_flight = single_flight
        self._flights_lock = threading.Lock()
        self._flights: dict[Hashable, _Flight] = {}

    @classmethod
    def from_config(
        cls,
        config: ResolverConfig | None = None,
        registry: PatternRegistry | None = None,
        fallback: DefaultResolver | None = None,
    ) -> "Resolver":
        """Build a resolver whose cache and flight mode follow ``config``."""
        config = config or ResolverConfig()
        return cls(
            registry,
            fallback,
            cache=make_cache(config.cache),
            single_flight=config.single_flight,
        )

    # --------------------------- resolution ---------------------------
    def resolve(self, name: Any) -> Backend:
        """Return the backend for ``name``.

        Raises
        ------
        Exception
            Whatever the matching constructor or the default resolver raises,
            unchanged.
        DynStoreRegistryError
            - [402] A lazily registered constructor cannot be imported.
            - [410] A pattern scanned before the match is malformed.
            - [420] With single-flight, a constructor re-resolved its own name.
        UnknownStorageError
            - [404] No pattern matched and no default resolver is set.
        """
        hit, backend = self.cache.lookup(name)
        if hit:
            logger.debug(f"Cache hit for {name!r}")
            return backend

        if self.single_flight:
            result = self._resolve_single_flight(name)
        else:
            result = self._match_and_store(name)

        if isinstance(result, Found):
            return result.backend
        return self._fallback(name)

    __call__ = resolve

    def _match_and_store(self, name: Any) -> MatchResult:
        result = self._match(name)
        if isinstance(result, Found):
            return Found(self.cache.setdefault(name, result.backend))
        return result

    def _match(self, name: Any) -> MatchResult:
        """Construct a backend from the first matching entry, if any."""
        text = str(name)
        for position, entry in enumerate(self.registry.entries()):
            match = entry.search(text)
            if match is None:
                continue
            logger.debug(f"{name!r} matched entry #{position} {entry.pattern_text!r}; constructing")
            return Found(entry.build(match))
        return NOT_FOUND

    def _resolve_single_flight(self, name: Any) -> MatchResult:
        with self._flights_lock:
            flight = self._flights.get(name)
            if flight is None:
                flight = self._flights[name] = _Flight()
            flight.waiters += 1
        me = threading.get_ident()
        try:
            # only this thread can have stored its own ident here
            if flight.owner == me:
                raise DynStoreRegistryError(
                    f"[420] Recursive resolution of {name!r} while its backend is being constructed"
                )
            with flight.lock:
                flight.owner = me
                try:
                    # another caller may have finished while this one waited
                    hit, backend = self.cache.lookup(name)
                    if hit:
                        return Found(backend)
                    return self._match_and_store(name)
                finally:
                    flight.owner = None
        finally:
            with self._flights_lock:
                flight.waiters -= 1
                if flight.waiters == 0:
                    del self._flights[name]

    def _fallback(self, name: Any) -> Backend:
        if self.fallback is None:
            raise UnknownStorageError(name)
        logger.debug(f"No pattern matched {name!r}; delegating to default resolver")
        return self.fallback(name)

    # --------------------------- introspection ---------------------------
    def find(self, name: Any) -> tuple[RegistryEntry, re.Match[str]] | None:
        """Return the entry and match that would serve ``name``, without constructing."""
        text = str(name)
        for entry in self.registry.entries():
            match = entry.search(text)
            if match is not None:
                return entry, match
        return None

    def cached(self, name: Any) -> bool:
        """Whether ``name`` currently has a cached backend."""
        return name in self.cache

    def __repr__(self) -> str:
        return (
            f"Resolver(entries={len(self.registry)}, cache={self.cache!r}, "
            f"single_flight={self.single_flight})"
        )
