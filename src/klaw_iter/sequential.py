"""Sequential iteration: one element operation at a time, in input order.

Each operation awaits func(item) before starting the next element, exactly
like a plain ``for`` loop with an ``await`` in its body. The first exception
aborts the loop; no later element is pulled from the input or started.

Example:
    ```python
    async def upload(path: Path) -> None: ...

    await sequential_for_each(upload, paths)
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import Any

from klaw_iter._group import Discipline, Iteration, invoke

__all__ = [
    'sequential_compact_map',
    'sequential_filter',
    'sequential_flat_map',
    'sequential_for_each',
    'sequential_map',
]


async def _each[T, R](
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    iteration: Iteration,
) -> AsyncIterator[tuple[T, R]]:
    for index, item in enumerate(items):
        try:
            result = await invoke(func, item, index)
        except Exception as exc:
            iteration.element_failed(index, exc)
            raise
        yield item, result


async def sequential_for_each[T](
    func: Callable[[T], Awaitable[Any]],
    items: Iterable[T],
) -> None:
    """Run an async operation on each item, one after another.

    Args:
        func: Async function called once per item. Its return value is ignored.
        items: Items to process, consumed lazily in order.

    Raises:
        Exception: The first exception raised by func; later items are never started.

    Example:
        ```python
        seen: list[int] = []

        async def record(n: int) -> None:
            seen.append(n)

        await sequential_for_each(record, [1, 2, 3])
        assert seen == [1, 2, 3]
        ```
    """
    with Iteration('sequential_for_each', Discipline.SEQUENTIAL, items) as iteration:
        async for _ in _each(func, items, iteration):
            pass


async def sequential_map[T, R](
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
) -> list[R]:
    """Apply an async function to each item, one after another, and collect the results.

    Args:
        func: Async function that takes T and returns R.
        items: Items to process, consumed lazily in order.

    Returns:
        list[R] with one result per item, in input order.

    Raises:
        Exception: The first exception raised by func; later items are never started.

    Example:
        ```python
        async def double(n: int) -> int:
            return n * 2

        assert await sequential_map(double, [1, 2, 3]) == [2, 4, 6]
        ```
    """
    with Iteration('sequential_map', Discipline.SEQUENTIAL, items) as iteration:
        return [result async for _, result in _each(func, items, iteration)]


async def sequential_compact_map[T, R](
    func: Callable[[T], Awaitable[R | None]],
    items: Iterable[T],
) -> list[R]:
    """Like sequential_map, but drop every None result.

    Other falsy results (0, "", False) are kept.
    """
    with Iteration('sequential_compact_map', Discipline.SEQUENTIAL, items) as iteration:
        return [result async for _, result in _each(func, items, iteration) if result is not None]


async def sequential_filter[T](
    func: Callable[[T], Awaitable[object]],
    items: Iterable[T],
) -> list[T]:
    """Keep the items whose async predicate returns a truthy value.

    Args:
        func: Async predicate.
        items: Items to test, consumed lazily in order.

    Returns:
        The original items (not the predicate results) that passed, in input order.
    """
    with Iteration('sequential_filter', Discipline.SEQUENTIAL, items) as iteration:
        return [item async for item, keep in _each(func, items, iteration) if keep]


async def sequential_flat_map[T, R](
    func: Callable[[T], Awaitable[Iterable[R]]],
    items: Iterable[T],
) -> list[R]:
    """Apply an async function returning an iterable to each item and concatenate the results."""
    with Iteration('sequential_flat_map', Discipline.SEQUENTIAL, items) as iteration:
        return [value async for _, segment in _each(func, items, iteration) for value in segment]
