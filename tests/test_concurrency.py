"""Tests for concurrent first resolution of the same name."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from dynstore.core.errors import DynStoreRegistryError
from dynstore.core.resolver import Resolver

N_THREADS = 8


def _race(resolver, name):
    barrier = threading.Barrier(N_THREADS)

    def _worker():
        barrier.wait()
        return resolver.resolve(name)

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        futures = [pool.submit(_worker) for _ in range(N_THREADS)]
        return [f.result() for f in futures]


def _slow_constructor(calls, lock):
    def build(match):
        with lock:
            calls.append(match[0])
        # keep the construction window open so callers overlap
        time.sleep(0.05)
        return object()

    return build


@pytest.mark.parametrize("single_flight", [False, True])
def test_concurrent_callers_share_one_cached_backend(registry, single_flight):
    calls, lock = [], threading.Lock()
    registry.register(r"^hot$", _slow_constructor(calls, lock))
    resolver = Resolver(registry, single_flight=single_flight)

    results = _race(resolver, "hot")

    cached = resolver.resolve("hot")
    assert all(r is cached for r in results)
    assert len(resolver.cache) == 1
    assert 1 <= len(calls) <= N_THREADS


def test_single_flight_constructs_once(registry):
    calls, lock = [], threading.Lock()
    registry.register(r"^hot$", _slow_constructor(calls, lock))
    resolver = Resolver(registry, single_flight=True)

    _race(resolver, "hot")
    assert calls == ["hot"]
    assert resolver._flights == {}


def test_single_flight_retries_after_failure(registry):
    attempts = []

    def build(match):
        attempts.append(match[0])
        if len(attempts) == 1:
            raise RuntimeError("first attempt fails")
        return "ok"

    registry.register(r"^x$", build)
    resolver = Resolver(registry, single_flight=True)
    with pytest.raises(RuntimeError):
        resolver.resolve("x")
    assert resolver._flights == {}
    assert resolver.resolve("x") == "ok"
    assert attempts == ["x", "x"]


def test_distinct_names_resolve_in_parallel(registry, recorder):
    build = recorder()
    registry.register(r"^n(\d+)$", build)
    resolver = Resolver(registry, single_flight=True)

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        names = [f"n{i}" for i in range(32)]
        results = list(pool.map(resolver.resolve, names))

    assert len(build.calls) == 32
    assert len(resolver.cache) == 32
    assert [r["name"] for r in results] == names


def test_single_flight_rejects_reentrant_resolution(registry):
    resolver = Resolver(registry, single_flight=True)

    def build(match):
        # resolving the same name from inside its own constructor
        return resolver.resolve(match[0])

    registry.register(r"^loop$", build)
    with pytest.raises(DynStoreRegistryError, match=r"\[420\]"):
        resolver.resolve("loop")
    assert resolver._flights == {}
    assert not resolver.cached("loop")


def test_single_flight_allows_nested_resolution_of_other_names(registry, recorder):
    inner = recorder("inner")
    resolver = Resolver(registry, single_flight=True)
    registry.register(r"^inner$", inner)
    registry.register(r"^outer$", lambda m: {"wraps": resolver.resolve("inner")})

    outer = resolver.resolve("outer")
    assert outer["wraps"] is resolver.resolve("inner")
    assert inner.calls == [("inner",)]
    assert resolver._flights == {}
