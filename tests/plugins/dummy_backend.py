"""Importable constructors used as lazy route targets in tests."""

import re

BUILT: list[str] = []


class DummyBackend:
    def __init__(self, bucket: str, **options):
        self.bucket = bucket
        self.options = options

    def __repr__(self) -> str:
        return f"DummyBackend(bucket={self.bucket!r})"


def build_backend(match: re.Match[str]) -> DummyBackend:
    BUILT.append(match[0])
    return DummyBackend(bucket=match[1])


def build_named(match: re.Match[str]) -> DummyBackend:
    return DummyBackend(bucket=match["bucket"], region=match["region"])


def build_broken(match: re.Match[str]) -> DummyBackend:
    raise RuntimeError(f"cannot build {match[0]}")


not_callable = "just a string"
