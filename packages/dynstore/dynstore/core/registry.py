"""dynstore: Pattern Registry
--------------------------
Ordered table of ``(pattern, constructor)`` entries consulted by the resolver.

Behavior
--------
- Entries are appended in registration order and that order is the only match
  priority: the first registered pattern that matches a name wins, however
  specific a later pattern may be.
- Patterns are not validated at registration time. String patterns are
  compiled by ``re`` on first use, so a malformed expression surfaces while
  resolving ([410]), not while registering.
- Constructors are registered eagerly as callables or lazily as dotted import
  paths that are only imported when their pattern first matches.
- There is no removal or reordering. ``freeze()`` marks the end of the setup
  phase; later registrations raise [400].

Notes
-----
- Readers iterate an immutable snapshot (``entries()``), so a scan in progress
  never observes a half-appended table.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import DynStoreRegistryError, get_logger
from .protocols import Backend, Constructor, Pattern
from .utils import import_target, pattern_text

__all__ = [
    "RegistryEntry",
    "PatternRegistry",
    "registry",
    "register",
    "register_lazy",
]

logger = get_logger()


@dataclass
class RegistryEntry:
    """A single ``(pattern, constructor)`` pair plus metadata.

    Either ``constructor`` (kind ``"callable"``) or ``target`` (kind
    ``"dotted"``) is set. A dotted target is imported once and the resulting
    callable is kept in ``constructor``.
    """

    pattern: Pattern
    kind: str  # "callable" | "dotted"
    constructor: Constructor | None = None
    target: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def pattern_text(self) -> str:
        return pattern_text(self.pattern)

    def search(self, name: str) -> re.Match[str] | None:
        """Test ``name`` against the pattern (unanchored search).

        Raises
        ------
        DynStoreRegistryError
            - [410] The pattern is not a valid regular expression.
        """
        try:
            return re.search(self.pattern, name)
        except re.error as e:
            raise DynStoreRegistryError(
                f"[410] Malformed pattern {self.pattern_text!r}: {e}"
            ) from e

    def load(self) -> Constructor:
        """Return the constructor, importing a dotted target on first use.

        Raises
        ------
        DynStoreRegistryError
            - [402] The dotted target's module cannot be imported.
        DynStoreConfigError
            - [403] The module has no such attribute.
        """
        if self.constructor is not None:
            return self.constructor
        assert self.target is not None
        try:
            obj = import_target(self.target)
        except ImportError as e:
            raise DynStoreRegistryError(
                f"[402] Failed to import constructor for {self.pattern_text!r} "
                f"from '{self.target}': {e}"
            ) from e
        logger.debug(f"Imported constructor '{self.target}' for {self.pattern_text!r}")
        self.constructor = obj
        return obj

    def build(self, match: re.Match[str]) -> Backend:
        """Invoke the constructor with ``match``; its exceptions propagate."""
        return self.load()(match)


class PatternRegistry:
    """Ordered registry mapping naming patterns to backend constructors.

    Methods
    -------
    register(pattern, constructor, **meta) -> None
        Append an eager entry.
    register_lazy(pattern, target, **meta) -> None
        Append an entry whose constructor is imported on first match.
    decorator(pattern, **meta) -> Callable
        Decorator form of ``register``.
    entries() -> tuple[RegistryEntry, ...]
        Snapshot of the entries in registration order.
    freeze() -> None
        Refuse further registrations ([400]).
    list() -> list[dict[str, Any]]
        Introspection rows with position, pattern, kind and metadata.

    Examples
    --------
    >>> reg = PatternRegistry()
    >>> reg.register(r"^cache_(\\w+)$", lambda m: {"bucket": m[1]})
    >>> len(reg)
    1
    >>> reg.entries()[0].pattern_text
    '^cache_(\\\\w+)$'
    """

    def __init__(self) -> None:
        self._entries: tuple[RegistryEntry, ...] = ()
        self._frozen = False

    # --------------------------- registration ---------------------------
    def register(self, pattern: Pattern, constructor: Constructor, **meta: Any) -> None:
        """Append ``(pattern, constructor)`` to the registry.

        Parameters
        ----------
        pattern : str or re.Pattern
            Regular expression tested against requested names with
            ``re.search``. Not validated here.
        constructor : Callable[[re.Match], Any]
            Called with the match object on the first successful match.
        **meta : Any
            Optional metadata stored with the entry (e.g. ``tags``). The fields
            ``registered_at``, ``builder_type`` and ``delayed_import`` are
            filled in automatically.

        Raises
        ------
        DynStoreRegistryError
            - [400] The registry has been frozen.
        """
        full_meta = self._base_meta(meta)
        full_meta.setdefault("builder_type", self._infer_builder_type(constructor))
        full_meta.setdefault("delayed_import", False)
        self._append(
            RegistryEntry(pattern=pattern, kind="callable", constructor=constructor, meta=full_meta)
        )

    def register_lazy(self, pattern: Pattern, target: str, **meta: Any) -> None:
        """Append an entry whose constructor is given as a dotted path.

        Parameters
        ----------
        pattern : str or re.Pattern
            Regular expression tested against requested names.
        target : str
            ``"pkg.module:function"`` or ``"pkg.module.function"``. Imported
            only when ``pattern`` first matches a name.
        **meta : Any
            Optional metadata; ``delayed_import=True`` is implied.

        Raises
        ------
        DynStoreRegistryError
            - [400] The registry has been frozen.
        """
        full_meta = self._base_meta(meta)
        full_meta.setdefault("builder_type", "dotted")
        full_meta.setdefault("delayed_import", True)
        full_meta.setdefault("module_path", str(target))
        self._append(RegistryEntry(pattern=pattern, kind="dotted", target=str(target), meta=full_meta))

    def decorator(self, pattern: Pattern, **meta: Any) -> Callable[[Constructor], Constructor]:
        """Return a decorator that registers the decorated constructor."""

        def _wrap(constructor: Constructor) -> Constructor:
            self.register(pattern, constructor, **meta)
            return constructor

        return _wrap

    def freeze(self) -> None:
        """End the setup phase; later registrations raise [400]."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --------------------------- lookup ---------------------------
    def entries(self) -> tuple[RegistryEntry, ...]:
        """Return the entries in registration order."""
        return self._entries

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        patterns = [e.pattern_text for e in self._entries]
        return f"PatternRegistry(patterns={patterns!r})"

    # --------------------------- introspection ---------------------------
    def list(self) -> list[dict[str, Any]]:
        """List entries with metadata, in priority order."""
        return [
            {"position": i, "pattern": e.pattern_text, "kind": e.kind, **e.meta}
            for i, e in enumerate(self._entries)
        ]

    # --------------------------- helpers ---------------------------
    def _append(self, entry: RegistryEntry) -> None:
        if self._frozen:
            raise DynStoreRegistryError(
                f"[400] Registry is frozen; cannot register {entry.pattern_text!r}"
            )
        # readers hold the previous tuple; never mutate in place
        self._entries = (*self._entries, entry)
        logger.debug(f"Registered {entry.kind} entry #{len(self._entries) - 1}: {entry.pattern_text!r}")

    @staticmethod
    def _base_meta(meta: dict[str, Any]) -> dict[str, Any]:
        full_meta = dict(meta or {})
        full_meta.setdefault("registered_at", datetime.now(UTC).isoformat())
        return full_meta

    @staticmethod
    def _infer_builder_type(obj: Any) -> str:
        """Return "class" for classes, "function" for other callables."""
        if callable(obj):
            return "class" if isinstance(obj, type) else "function"
        return type(obj).__name__.lower()


# Process-wide default registry for application bootstrap code
registry = PatternRegistry()


def register(pattern: Pattern, **meta: Any) -> Callable[[Constructor], Constructor]:
    """Decorator registering a constructor in the default registry.

    Examples
    --------
    >>> @register(r"^store_(\\w+)$")  # doctest: +SKIP
    ... def build_store(match):
    ...     return S3Storage(bucket=match[1])

    See Also
    --------
    PatternRegistry.register
        Immediate registration of a constructor.
    """
    return registry.decorator(pattern, **meta)


def register_lazy(pattern: Pattern, target: str, **meta: Any) -> None:
    """Register a dotted-path constructor in the default registry.

    Examples
    --------
    >>> register_lazy(r"^store_(\\w+)$", "myapp.storages:build_store")  # doctest: +SKIP
    """
    registry.register_lazy(pattern, target, **meta)
