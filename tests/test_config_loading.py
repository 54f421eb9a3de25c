"""Tests for configuration models and the loading chain."""

import pytest
from pydantic import ValidationError

from dynstore.core import config_loader
from dynstore.core.config import CacheConfig, DynStoreConfig, RouteConfig
from dynstore.core.config_loader import build_resolver, load_config, register_routes
from dynstore.core.errors import DynStoreConfigError, DynStoreIOError
from dynstore.core.registry import PatternRegistry

ROUTES = [
    {"pattern": r"^store_(\w+)$", "target": "tests.plugins.dummy_backend:build_backend"},
    {"pattern": r"^store_prod$", "target": "tests.plugins.dummy_backend:build_broken"},
]


def test_package_defaults():
    config = load_config(force_reload=True)
    assert isinstance(config, DynStoreConfig)
    assert config.resolver.single_flight is False
    assert config.resolver.cache.policy == "unbounded"
    assert config.routes == []


def test_implicit_config_is_cached():
    assert load_config() is load_config()
    assert load_config(force_reload=True) is not None


def test_explicit_file_overrides_defaults(write_config):
    path = write_config({"resolver": {"cache": {"policy": "lru", "max_size": 8}}, "routes": ROUTES})
    config = load_config(path)
    assert config.resolver.cache.policy == "lru"
    assert config.resolver.cache.max_size == 8
    assert config.resolver.single_flight is False  # merged from defaults
    assert [r.pattern for r in config.routes] == [r["pattern"] for r in ROUTES]


def test_override_chain_order(isolated_config, write_config, monkeypatch):
    user_dir = isolated_config / ".dynstore"
    user_dir.mkdir()
    (user_dir / "config.yaml").write_text("resolver:\n  single_flight: true\n", encoding="utf-8")

    env_path = write_config({"resolver": {"cache": {"policy": "lru", "max_size": 2}}}, "env.yaml")
    monkeypatch.setenv(config_loader.CONFIG_ENV_VAR, str(env_path))

    config = load_config(force_reload=True)
    assert config.resolver.single_flight is True
    assert config.resolver.cache.policy == "lru"

    explicit = write_config({"resolver": {"single_flight": False}}, "explicit.yaml")
    config = load_config(explicit)
    assert config.resolver.single_flight is False
    assert config.resolver.cache.max_size == 2


def test_missing_explicit_file(tmp_path):
    with pytest.raises(DynStoreIOError, match=r"\[101\]"):
        load_config(tmp_path / "nope.yaml")


def test_invalid_config_is_reported(write_config):
    path = write_config({"resolver": {"cache": {"policy": "lru"}}})
    with pytest.raises(DynStoreConfigError, match=r"\[500\]"):
        load_config(path)


def test_unknown_keys_are_rejected(write_config):
    path = write_config({"resolvers": {}})
    with pytest.raises(DynStoreConfigError):
        load_config(path)


def test_non_mapping_file(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(DynStoreConfigError, match=r"\[502\]"):
        load_config(path)


def test_route_pattern_not_compiled_during_validation():
    route = RouteConfig(pattern=r"^(unclosed", target="pkg.mod:build")
    assert route.pattern == r"^(unclosed"


def test_route_rejects_blank_fields():
    with pytest.raises(ValidationError):
        RouteConfig(pattern="  ", target="pkg.mod:build")


def test_lru_requires_positive_size():
    with pytest.raises(ValidationError):
        CacheConfig(policy="lru", max_size=0)


def test_register_routes_keeps_file_order():
    registry = PatternRegistry()
    config = DynStoreConfig(routes=[RouteConfig(**r, tags=["cfg"]) for r in ROUTES])
    assert register_routes(config, registry) == 2
    rows = registry.list()
    assert [row["pattern"] for row in rows] == [r["pattern"] for r in ROUTES]
    assert all(row["kind"] == "dotted" and row["source"] == "config" for row in rows)
    assert rows[0]["tags"] == ["cfg"]


def test_build_resolver_from_config(write_config):
    path = write_config({"routes": ROUTES})
    resolver = build_resolver(load_config(path), fallback=lambda name: f"default:{name}")

    # the general route is first, so the broken constructor is never used
    backend = resolver.resolve("store_prod")
    assert backend.bucket == "prod"
    assert resolver.resolve("store_prod") is backend
    assert resolver.resolve("other") == "default:other"


def test_build_resolver_uses_private_registry():
    from dynstore.core.registry import registry as process_registry

    before = len(process_registry)
    build_resolver(DynStoreConfig(routes=[RouteConfig(**ROUTES[0])]))
    assert len(process_registry) == before
