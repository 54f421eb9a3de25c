"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
import yaml

from dynstore.core import config_loader, errors
from dynstore.core.registry import PatternRegistry
from tests.plugins import dummy_backend


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and environment configuration out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.delenv(config_loader.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(config_loader, "_CONFIG_CACHE", None)
    dummy_backend.BUILT.clear()
    yield home


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers bound to streams captured during a test."""
    yield
    logger = errors.get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    errors._logger = None


@pytest.fixture
def registry():
    """A fresh registry so tests never touch the process-wide one."""
    return PatternRegistry()


class Recorder:
    """Constructor that records its calls and builds a new object each time."""

    def __init__(self, label: str = "backend"):
        self.label = label
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, match):
        self.calls.append((match[0], *match.groups()))
        return {"label": self.label, "name": match[0], "groups": match.groups()}


@pytest.fixture
def recorder():
    """Factory for recording constructors."""
    return Recorder


class DefaultResolver:
    """Stand-in for the host's own name -> backend lookup."""

    def __init__(self, known=None):
        self.known = dict(known or {})
        self.calls: list[object] = []

    def __call__(self, name):
        self.calls.append(name)
        if name not in self.known:
            raise KeyError(name)
        return self.known[name]


@pytest.fixture
def default_resolver():
    return DefaultResolver({"anything": "default-backend", "local": "local-backend"})


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config file and return its path."""

    def _write(data, name="dynstore.yaml"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)
        return path

    return _write
