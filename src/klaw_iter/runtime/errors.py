"""Engine error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'ConfigError',
    'ConfigInvalid',
    'ElementFailed',
    'NotAwaitable',
    'NotAwaitableError',
]


# --- Element Errors ---


class NotAwaitable(msgspec.Struct, frozen=True, gc=False):
    """Element operation returned a non-awaitable - struct variant."""

    index: int
    type_name: str

    def to_exception(self) -> NotAwaitableError:
        """Convert to exception for raise-based code."""
        return NotAwaitableError(self.index, self.type_name)


class NotAwaitableError(TypeError):
    """Element operation returned a non-awaitable - exception variant."""

    def __init__(self, index: int, type_name: str) -> None:
        self.index = index
        self.type_name = type_name
        super().__init__(f'Operation for element {index} returned {type_name}, expected an awaitable')

    def to_struct(self) -> NotAwaitable:
        """Convert to struct for Result-based code."""
        return NotAwaitable(self.index, self.type_name)


# --- Configuration Errors ---


class ConfigInvalid(msgspec.Struct, frozen=True, gc=False):
    """Invalid configuration value - struct variant for Result[T, ConfigInvalid]."""

    key: str
    value: str

    def to_exception(self) -> ConfigError:
        """Convert to exception for raise-based code."""
        return ConfigError(self.key, self.value)


class ConfigError(ValueError):
    """Invalid configuration value - exception variant."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f'Invalid value for {key}: {value!r}')

    def to_struct(self) -> ConfigInvalid:
        """Convert to struct for Result-based code."""
        return ConfigInvalid(self.key, self.value)


# --- Iteration Failures ---


class ElementFailed(msgspec.Struct, frozen=True, gc=False):
    """Where an aborted iteration failed: operation, element and input size.

    Recorded for the error an operation surfaces and attached to Err outcomes
    produced by safe_async. size is None for unsized sequential input.
    """

    operation: str
    discipline: str
    index: int
    size: int | None
    error_type: str
