"""dynstore: Configuration Models
---------------------------------------------------------
Pydantic models for the resolver and for routes declared in configuration
files (``config.yaml``).

Public API
----------
``DynStoreConfig`` : Root model with resolver settings and routes
``ResolverConfig`` : Single-flight switch and cache settings
``CacheConfig`` : Cache policy (``unbounded`` or ``lru``) and size bound
``RouteConfig`` : One pattern -> dotted constructor target pair

Notes
-----
- Route patterns are kept as text and are not compiled during validation;
  a malformed pattern fails when a name is first resolved.
- Route order in the file is registration order, hence match priority.

"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = ["DynStoreConfig", "ResolverConfig", "CacheConfig", "RouteConfig"]


class CacheConfig(BaseModel):
    """Resolution cache settings."""

    model_config = ConfigDict(extra="forbid")

    policy: Literal["unbounded", "lru"] = Field(
        default="unbounded",
        description="'unbounded' keeps every resolved backend for the process "
        "lifetime; 'lru' keeps at most max_size names.",
    )
    max_size: int | None = Field(
        default=None,
        description="Maximum number of cached names for the 'lru' policy.",
    )

    @model_validator(mode="after")
    def validate_max_size(self) -> "CacheConfig":
        if self.policy == "lru" and (self.max_size is None or self.max_size <= 0):
            raise ValueError("cache.max_size must be a positive integer for the 'lru' policy")
        return self


class ResolverConfig(BaseModel):
    """Resolver behavior.

    Attributes
    ----------
    single_flight : bool
        When True, concurrent first resolutions of the same name wait for a
        single construction. When False (default), each may construct a
        backend and the first one stored in the cache is returned to all.
    cache : CacheConfig
        Cache policy settings.

    """

    model_config = ConfigDict(extra="forbid")

    single_flight: bool = Field(
        default=False,
        description="Serialize construction per name.",
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)


class RouteConfig(BaseModel):
    """A pattern and the dotted path of the constructor it maps to."""

    model_config = ConfigDict(extra="forbid")

    pattern: str = Field(description="Regular expression searched in requested names.")
    target: str = Field(
        description="Constructor as 'package.module:function' or 'package.module.function'."
    )
    tags: list[str] = Field(default_factory=list)

    @field_validator("pattern", "target")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate that pattern and target are not empty or just whitespace."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v


class DynStoreConfig(BaseModel):
    """Root configuration.

    Example
    -------
    .. code-block:: yaml

        resolver:
          single_flight: true
          cache:
            policy: lru
            max_size: 128
        routes:
          - pattern: '^store_(\\w+)$'
            target: myapp.storages:build_store

    """

    model_config = ConfigDict(extra="forbid")

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    routes: list[RouteConfig] = Field(default_factory=list)
