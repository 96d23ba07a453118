"""Tests for Ok/Err outcome types and the safe_async decorator."""

from __future__ import annotations

import pytest

from klaw_iter import Err, Ok, concurrent_map, safe_async, sequential_filter, sequential_map
from klaw_iter.runtime.errors import ElementFailed


class TestOk:
    """Tests for the Ok variant."""

    def test_predicates(self):
        assert Ok([1]).is_ok() is True
        assert Ok([1]).is_err() is False

    def test_unwrap(self):
        assert Ok([1, 2]).unwrap() == [1, 2]
        assert Ok(3).unwrap_or(0) == 3

    def test_map(self):
        assert Ok([1, 2]).map(len) == Ok(2)

    def test_unwrap_err_raises(self):
        with pytest.raises(RuntimeError):
            Ok(1).unwrap_err()

    def test_ok_err_accessors(self):
        assert Ok(1).ok() == 1
        assert Ok(1).err() is None

    def test_repr_and_match(self):
        assert repr(Ok([1])) == 'Ok([1])'
        match Ok(5):
            case Ok(value):
                assert value == 5
            case _:
                pytest.fail('Ok did not match')


class TestErr:
    """Tests for the Err variant."""

    def test_predicates(self):
        err = Err(ValueError('x'))
        assert err.is_err() is True
        assert err.is_ok() is False

    def test_unwrap_reraises(self):
        error = ValueError('x')
        with pytest.raises(ValueError) as exc_info:
            Err(error).unwrap()
        assert exc_info.value is error

    def test_map_is_noop(self):
        err = Err(ValueError('x'))
        assert err.map(len) is err

    def test_match_and_repr_with_failure(self):
        error = KeyError('k')
        failure = ElementFailed('concurrent_map', 'concurrent', 2, 3, 'KeyError')
        err = Err(error, failure)
        match err:
            case Err(raised, where):
                assert raised is error
                assert where.index == 2
            case _:
                pytest.fail('Err did not match')
        assert repr(err) == f'Err({error!r}, failure={failure!r})'

    def test_accessors(self):
        error = KeyError('k')
        assert Err(error).unwrap_err() is error
        assert Err(error).err() is error
        assert Err(error).ok() is None
        assert Err(error).unwrap_or([]) == []


class TestSafeAsync:
    """Tests for @safe_async."""

    @pytest.mark.anyio
    async def test_wraps_success(self):
        @safe_async
        async def load(n: int) -> int:
            return n + 1

        assert await load(1) == Ok(2)

    @pytest.mark.anyio
    async def test_wraps_failure(self):
        @safe_async
        async def load(n: int) -> int:
            raise ValueError(n)

        result = await load(1)
        assert result.is_err()
        assert isinstance(result.unwrap_err(), ValueError)
        assert result.failure is None

    @pytest.mark.anyio
    async def test_exceptions_filter(self):
        """Exceptions outside the filter propagate."""

        @safe_async(exceptions=(KeyError,))
        async def load() -> int:
            raise ValueError('not caught')

        with pytest.raises(ValueError):
            await load()

    @pytest.mark.anyio
    async def test_concurrent_map_outcome_ok(self):
        async def double(n: int) -> int:
            return n * 2

        assert await safe_async(concurrent_map)(double, [1, 2, 3]) == Ok([2, 4, 6])

    @pytest.mark.anyio
    async def test_sequential_filter_outcome_err(self):
        """A failing iteration yields Err with the single element error and no partial output."""
        error = ValueError('bad element')

        async def check(n: int) -> bool:
            if n == 2:
                raise error
            return True

        outcome = await safe_async(sequential_filter)(check, [1, 2, 3])
        assert outcome == Err(error, ElementFailed('sequential_filter', 'sequential', 1, 3, 'ValueError'))
        assert outcome.ok() is None

    @pytest.mark.anyio
    async def test_concurrent_map_outcome_names_element(self):
        """The Err names the concurrent element that raised and the input size."""

        async def parse(text: str) -> int:
            return int(text)

        outcome = await safe_async(concurrent_map)(parse, ['1', 'x', '3', '4'])
        match outcome:
            case Err(error):
                assert isinstance(error, ValueError)
            case _:
                pytest.fail('expected Err')
        assert outcome.failure == ElementFailed('concurrent_map', 'concurrent', 1, 4, 'ValueError')

    @pytest.mark.anyio
    async def test_outer_operation_is_named_for_nested_failure(self):
        """When an inner operation fails inside an outer one, the outer element is named."""

        async def inner(n: int) -> int:
            if n == 5:
                raise KeyError(n)
            return n

        async def row(start: int) -> list[int]:
            return await sequential_map(inner, range(start, start + 3))

        outcome = await safe_async(concurrent_map)(row, [0, 3, 6])
        assert isinstance(outcome.unwrap_err(), KeyError)
        assert outcome.failure == ElementFailed('concurrent_map', 'concurrent', 1, 3, 'KeyError')

    @pytest.mark.anyio
    async def test_replaced_error_has_no_failure(self):
        """An error translated by the caller is not attributed to an element."""

        async def fail(n: int) -> int:
            raise ValueError(n)

        @safe_async
        async def load() -> list[int]:
            try:
                return await concurrent_map(fail, [1])
            except ValueError as exc:
                raise LookupError('load failed') from exc

        outcome = await load()
        assert isinstance(outcome.unwrap_err(), LookupError)
        assert outcome.failure is None
