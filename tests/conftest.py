"""Pytest configuration and shared fixtures for klaw-iter tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from typing import Any

import anyio
import pytest
import structlog

from klaw_iter.runtime import _logging, clear_log_hooks, reset

_ENV_VARS = ('KLAW_ITER_BACKEND', 'KLAW_ITER_LOG_LEVEL', 'KLAW_ITER_ANNOTATE_ERRORS')


@pytest.fixture(autouse=True)
def clean_runtime(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Start every test from an unconfigured, silent runtime."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(_logging, '_configured', False)
    reset()
    clear_log_hooks()
    yield
    reset()
    clear_log_hooks()
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)


@pytest.fixture(params=['asyncio', 'trio'])
def anyio_backend(request: pytest.FixtureRequest) -> str:
    """Run anyio-marked tests on both event loop backends."""
    return request.param

class Recorder:
    """Async element operation that records every call it receives."""

    def __init__(
        self,
        result: Callable[[Any], Any] = lambda item: item,
        *,
        delays: dict[Any, float] | None = None,
        fail_on: dict[Any, Exception] | None = None,
    ) -> None:
        self.calls: list[Any] = []
        self.finished: list[Any] = []
        self._result = result
        self._delays = delays or {}
        self._fail_on = fail_on or {}

    async def __call__(self, item: Any) -> Any:
        self.calls.append(item)
        await anyio.sleep(self._delays.get(item, 0))
        if item in self._fail_on:
            raise self._fail_on[item]
        self.finished.append(item)
        return self._result(item)


@pytest.fixture
def recorder() -> type[Recorder]:
    """Factory for call-recording element operations."""
    return Recorder
