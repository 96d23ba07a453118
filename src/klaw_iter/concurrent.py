"""Concurrent iteration: one task per element, results kept in input order.

Every operation here materializes its input, starts one anyio task per
element (in input order, with no cap on how many run at once) and waits for
the whole group. Results are written to per-index slots, so output order is
input order no matter which task finishes first.

Failure is all-or-nothing. The first exception observed cancels the
remaining tasks and is re-raised as-is (not wrapped in an ExceptionGroup);
no partial output is returned. When several elements fail in the same
scheduler step, which error is surfaced is not specified.

Example:
    ```python
    async def fetch(url: str) -> bytes: ...

    pages = await concurrent_map(fetch, urls)
    ```
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from klaw_iter._group import Discipline, Iteration, run_indexed

__all__ = [
    'concurrent_compact_map',
    'concurrent_filter',
    'concurrent_flat_map',
    'concurrent_for_each',
    'concurrent_map',
]


async def concurrent_for_each[T](
    func: Callable[[T], Awaitable[Any]],
    items: Iterable[T],
) -> None:
    """Run an async operation on every item concurrently and wait for all of them.

    Args:
        func: Async function called once per item. Its return value is ignored.
        items: Items to process. Eagerly materialized into a list.

    Raises:
        Exception: The first exception raised by any call to func.

    Example:
        ```python
        async def notify(user: User) -> None:
            await mailer.send(user.email, body)

        await concurrent_for_each(notify, users)
        ```
    """
    item_list = list(items)
    with Iteration('concurrent_for_each', Discipline.CONCURRENT, item_list) as iteration:
        await run_indexed(func, item_list, iteration)


async def concurrent_map[T, R](
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
) -> list[R]:
    """Apply an async function to every item concurrently and collect the results.

    Note:
        The items iterable is eagerly materialized into a list before any
        task starts.

    Args:
        func: Async function that takes T and returns R.
        items: Items to process.

    Returns:
        list[R] with one result per item, in input order (not completion order).

    Raises:
        Exception: The first exception raised by any call to func.

    Example:
        ```python
        async def double(n: int) -> int:
            await anyio.sleep(0.01 if n == 1 else 0)
            return n * 2

        assert await concurrent_map(double, [1, 2, 3]) == [2, 4, 6]
        ```
    """
    item_list = list(items)
    with Iteration('concurrent_map', Discipline.CONCURRENT, item_list) as iteration:
        return await run_indexed(func, item_list, iteration)


async def concurrent_compact_map[T, R](
    func: Callable[[T], Awaitable[R | None]],
    items: Iterable[T],
) -> list[R]:
    """Like concurrent_map, but drop every None result.

    Surviving results keep input order. Other falsy results (0, "", False) are kept.
    """
    item_list = list(items)
    with Iteration('concurrent_compact_map', Discipline.CONCURRENT, item_list) as iteration:
        results = await run_indexed(func, item_list, iteration)
        return [result for result in results if result is not None]


async def concurrent_filter[T](
    func: Callable[[T], Awaitable[object]],
    items: Iterable[T],
) -> list[T]:
    """Run an async predicate on every item concurrently and keep those it accepts.

    Args:
        func: Async predicate; its result is tested for truthiness.
        items: Items to test.

    Returns:
        The original items (not the predicate results) that passed, in input order.

    Example:
        ```python
        async def is_even(n: int) -> bool:
            return n % 2 == 0

        assert await concurrent_filter(is_even, [1, 2, 3, 4]) == [2, 4]
        ```
    """
    item_list = list(items)
    with Iteration('concurrent_filter', Discipline.CONCURRENT, item_list) as iteration:
        keep = await run_indexed(func, item_list, iteration)
        return [item for item, passed in zip(item_list, keep, strict=True) if passed]


async def concurrent_flat_map[T, R](
    func: Callable[[T], Awaitable[Iterable[R]]],
    items: Iterable[T],
) -> list[R]:
    """Apply an async function returning an iterable to every item concurrently.

    Returns:
        The concatenation of every returned iterable, in input order.
    """
    item_list = list(items)
    with Iteration('concurrent_flat_map', Discipline.CONCURRENT, item_list) as iteration:
        segments = await run_indexed(func, item_list, iteration)
        return [value for segment in segments for value in segment]
