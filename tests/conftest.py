"""Test configuration and helper fixtures."""

from __future__ import annotations

import os

import pytest

from proxyspec.config import Settings
from proxyspec.core.registry import StaticRegistry


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``GOST_*`` variables of the host out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("GOST_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def registry() -> StaticRegistry:
    """The built-in component type table."""
    return StaticRegistry()


class FakeRegistry:
    """Registry that knows only the names it was given."""

    def __init__(self, **kinds):
        self.kinds = {kind: set(names) for kind, names in kinds.items()}
        self.calls = []

    def exists(self, kind: str, name: str) -> bool:
        self.calls.append((kind, name))
        return name in self.kinds.get(kind, ())


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry(
        handler={"http", "socks5", "relay", "ssu", "tcp", "rtcp"},
        listener={"tcp", "udp", "tls", "rtcp", "ssh"},
        connector={"http", "socks5", "relay", "ssu"},
        dialer={"tcp", "udp", "tls", "ssh"},
    )


@pytest.fixture
def settings() -> Settings:
    """Settings with no environment-derived sections."""
    return Settings()
