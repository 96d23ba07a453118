"""Tests for engine error types (struct and exception variants)."""

from __future__ import annotations

import msgspec
import pytest

from klaw_iter.runtime import ConfigError, ConfigInvalid, ElementFailed, NotAwaitable, NotAwaitableError


class TestNotAwaitable:
    def test_exception_message(self) -> None:
        exc = NotAwaitableError(3, 'int')
        assert str(exc) == 'Operation for element 3 returned int, expected an awaitable'
        assert isinstance(exc, TypeError)

    def test_round_trip(self) -> None:
        struct = NotAwaitable(index=3, type_name='int')
        exc = struct.to_exception()
        assert exc.index == 3
        assert exc.to_struct() == struct

    def test_struct_encodes(self) -> None:
        """Struct variants serialize with msgspec for logging or transport."""
        encoded = msgspec.json.encode(NotAwaitable(index=0, type_name='str'))
        assert msgspec.json.decode(encoded, type=NotAwaitable) == NotAwaitable(0, 'str')

    def test_struct_is_frozen(self) -> None:
        struct = NotAwaitable(index=0, type_name='str')
        with pytest.raises(AttributeError):
            struct.index = 1  # type: ignore[misc]


class TestConfigError:
    def test_exception_message(self) -> None:
        exc = ConfigError('backend', 'gevent')
        assert str(exc) == "Invalid value for backend: 'gevent'"
        assert isinstance(exc, ValueError)

    def test_round_trip(self) -> None:
        struct = ConfigInvalid(key='log_level', value='LOUD')
        assert struct.to_exception().to_struct() == struct


class TestElementFailed:
    def test_unsized_input_encodes_null_size(self) -> None:
        failure = ElementFailed('sequential_map', 'sequential', 4, None, 'KeyError')
        assert msgspec.json.encode(failure) == (
            b'{"operation":"sequential_map","discipline":"sequential","index":4,"size":null,"error_type":"KeyError"}'
        )
