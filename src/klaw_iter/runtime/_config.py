"""Runtime configuration: Backend enum, IterConfig, and initialization."""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import anyio

from klaw_iter.runtime._logging import configure_logging
from klaw_iter.runtime.errors import ConfigError

__all__ = [
    'Backend',
    'IterConfig',
    'get_config',
    'init',
    'reset',
    'run',
]

_LOG_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})
_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})


class Backend(Enum):
    """anyio event loop backend used by run()."""

    ASYNCIO = 'asyncio'
    TRIO = 'trio'


@dataclass(frozen=True)
class IterConfig:
    """Configuration for klaw-iter.

    Attributes:
        backend: Event loop backend for run().
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
        annotate_errors: Attach a note naming the failing element to propagated errors.
    """

    backend: Backend = Backend.ASYNCIO
    log_level: str | None = None
    annotate_errors: bool = True


# Global configuration (set by init(), or lazily from the environment)
_config: IterConfig | None = None


def _resolve_backend(value: Backend | str) -> Backend:
    if isinstance(value, Backend):
        return value
    try:
        return Backend(value.lower())
    except ValueError:
        raise ConfigError('backend', value) from None


def _resolve_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    level = value.upper()
    if level not in _LOG_LEVELS:
        raise ConfigError('log_level', value)
    return level


def _detect_backend() -> Backend:
    """Read KLAW_ITER_BACKEND ("asyncio" or "trio"), defaulting to asyncio."""
    env_backend = os.environ.get('KLAW_ITER_BACKEND', '').lower()
    if not env_backend:
        return Backend.ASYNCIO
    try:
        return Backend(env_backend)
    except ValueError:
        logging.warning("Unknown KLAW_ITER_BACKEND value '%s', defaulting to asyncio", env_backend)
        return Backend.ASYNCIO


def _detect_log_level() -> str | None:
    """Read KLAW_ITER_LOG_LEVEL. Unset, empty or unknown means silent."""
    env_level = os.environ.get('KLAW_ITER_LOG_LEVEL', '').upper()
    if not env_level:
        return None
    if env_level not in _LOG_LEVELS:
        logging.warning("Unknown KLAW_ITER_LOG_LEVEL value '%s', logging stays silent", env_level)
        return None
    return env_level


def _detect_annotate_errors() -> bool:
    """Read KLAW_ITER_ANNOTATE_ERRORS, defaulting to True."""
    raw = os.environ.get('KLAW_ITER_ANNOTATE_ERRORS', '').strip().lower()
    if raw in _FALSE_VALUES:
        return False
    if raw and raw not in _TRUE_VALUES:
        logging.warning("Unknown KLAW_ITER_ANNOTATE_ERRORS value '%s', defaulting to true", raw)
    return True


def _from_environment() -> IterConfig:
    return IterConfig(
        backend=_detect_backend(),
        log_level=_detect_log_level(),
        annotate_errors=_detect_annotate_errors(),
    )


def init(
    backend: Backend | str | None = None,
    log_level: str | None = None,
    annotate_errors: bool | None = None,
) -> IterConfig:
    """Initialize klaw-iter with the given configuration.

    Any argument left as None is read from the environment
    (KLAW_ITER_BACKEND, KLAW_ITER_LOG_LEVEL, KLAW_ITER_ANNOTATE_ERRORS).
    Unknown environment values fall back to the defaults with a warning.
    A log level, from either source, configures logging.

    Args:
        backend: Event loop backend for run(). Backend enum or "asyncio"/"trio".
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.
        annotate_errors: Attach element notes to propagated errors.

    Returns:
        The IterConfig that was set.

    Raises:
        ConfigError: If an argument is not recognized.

    Example:
        ```python
        from klaw_iter.runtime import init

        init(log_level='DEBUG', annotate_errors=False)
        ```
    """
    global _config  # noqa: PLW0603

    _config = IterConfig(
        backend=_detect_backend() if backend is None else _resolve_backend(backend),
        log_level=_detect_log_level() if log_level is None else _resolve_log_level(log_level),
        annotate_errors=_detect_annotate_errors() if annotate_errors is None else annotate_errors,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> IterConfig:
    """Get the current configuration, reading the environment if init() was never called.

    The lazy path never raises and never touches logging: unknown environment
    values fall back to the defaults, and KLAW_ITER_LOG_LEVEL only takes effect
    through an explicit init().

    Returns:
        The current IterConfig.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _from_environment()
    return _config


def reset() -> None:
    """Forget the current configuration; the next get_config() re-reads the environment."""
    global _config  # noqa: PLW0603
    _config = None


def run[T](func: Callable[..., Awaitable[T]], *args: Any) -> T:
    """Run an async entry point on the configured backend.

    Args:
        func: Async callable to run.
        *args: Positional arguments for func.

    Returns:
        Whatever func returns.

    Example:
        ```python
        from klaw_iter import concurrent_map
        from klaw_iter.runtime import run

        async def main() -> list[str]:
            return await concurrent_map(fetch, urls)

        pages = run(main)
        ```
    """
    return anyio.run(func, *args, backend=get_config().backend.value)
