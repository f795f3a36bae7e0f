"""Shared fixtures: fresh settings and captured log output for every test."""

from __future__ import annotations

import pytest

from flowcase.foundation.config import clear_settings_cache
from flowcase.runtime.observability import MemoryRenderer, configure_logging


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Reload settings from the environment before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def logs() -> MemoryRenderer:
    """Capture structured log entries at DEBUG level."""
    renderer = MemoryRenderer()
    configure_logging(level="DEBUG", renderer=renderer)
    return renderer


@pytest.fixture
def lenient(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ignore duplicate task callbacks instead of raising."""
    monkeypatch.setenv("FLOWCASE_FLOW_STRICT_CALLBACKS", "false")
    clear_settings_cache()


class Deferred:
    """Collects task callbacks so a test can complete them in any order."""

    def __init__(self) -> None:
        self.callbacks: list[object] = []
        self.items: list[object] = []

    def task(self, next: object) -> None:  # noqa: A002
        self.callbacks.append(next)

    def iteratee(self, item: object, next: object) -> None:  # noqa: A002
        self.items.append(item)
        self.callbacks.append(next)

    def complete(self, index: int, error: object = None, value: object = None) -> None:
        self.callbacks[index](error, value)  # type: ignore[operator]


@pytest.fixture
def deferred() -> Deferred:
    return Deferred()
