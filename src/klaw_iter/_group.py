"""Indexed task group and per-call bookkeeping shared by every operation.

run_indexed() is the single primitive under all concurrent operations: one
anyio task per element, each writing only its own slot, with the slots read
back in index order once the group has joined.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable, Sized
from contextvars import ContextVar
from enum import Enum
from types import TracebackType
from typing import Any

import anyio

from klaw_iter.runtime._config import get_config
from klaw_iter.runtime._logging import get_logger
from klaw_iter.runtime.errors import ElementFailed, NotAwaitableError

__all__ = [
    'Discipline',
    'Iteration',
    'IterationState',
    'failure_of',
    'invoke',
    'run_indexed',
]

# Marks a slot whose task has not written a result.
_EMPTY: Any = object()

# Surfaced error and its ElementFailed record, set as a failed operation exits.
_last_failure: ContextVar[tuple[BaseException, ElementFailed] | None] = ContextVar(
    'klaw_iter_last_failure', default=None
)


class Discipline(Enum):
    """How element operations are scheduled."""

    SEQUENTIAL = 'sequential'
    CONCURRENT = 'concurrent'


class IterationState(Enum):
    """Lifecycle of a single operation call."""

    NOT_STARTED = 'not_started'
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'


class Iteration:
    """Tracks one operation call: state, logging and error annotation.

    Used as a context manager around the body of every operation. Exiting
    with an exception moves the call to FAILED, a clean exit to COMPLETED.
    Configuration and the logger are looked up on entry.
    """

    __slots__ = ('_annotate', '_log', 'discipline', 'failure', 'operation', 'size', 'state')

    def __init__(self, operation: str, discipline: Discipline, items: Iterable[Any]) -> None:
        self.operation = operation
        self.discipline = discipline
        self.size = len(items) if isinstance(items, Sized) else None
        self.state = IterationState.NOT_STARTED
        self.failure: ElementFailed | None = None
        self._annotate = True
        self._log: Any = None

    def __enter__(self) -> Iteration:
        self._annotate = get_config().annotate_errors
        self._log = get_logger('klaw_iter').bind(
            operation=self.operation,
            discipline=self.discipline.value,
            size=self.size,
        )
        self.state = IterationState.RUNNING
        self._log.debug('iteration.started', state=self.state.value)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_val is None:
            self.state = IterationState.COMPLETED
            self._log.debug('iteration.completed', state=self.state.value)
            return
        self.state = IterationState.FAILED
        self._log.debug(
            'iteration.failed',
            state=self.state.value,
            error_type=type(exc_val).__name__,
        )
        if self.failure is not None:
            _last_failure.set((exc_val, self.failure))

    def element_failed(self, index: int, exc: Exception) -> None:
        """Record the error that will be surfaced for this call."""
        self.failure = ElementFailed(
            operation=self.operation,
            discipline=self.discipline.value,
            index=index,
            size=self.size,
            error_type=type(exc).__name__,
        )
        self._log.debug('iteration.element_failed', index=index, error_type=self.failure.error_type)
        if self._annotate:
            position = f'{index}' if self.size is None else f'{index} of {self.size}'
            exc.add_note(f'klaw-iter: raised by element {position} in {self.operation}')

    def error_discarded(self, index: int, exc: Exception) -> None:
        """Record an error raised after the first one; it is not surfaced."""
        self._log.debug('iteration.error_discarded', index=index, error_type=type(exc).__name__)


def failure_of(exc: BaseException) -> ElementFailed | None:
    """Return where exc aborted the most recent failed operation in this context.

    Only the operation whose exit the caller's task observed is visible, and
    only while exc is the very object that operation raised.
    """
    last = _last_failure.get()
    if last is None or last[0] is not exc:
        return None
    return last[1]


def invoke[T, R](func: Callable[[T], Awaitable[R]], item: T, index: int) -> Awaitable[R]:
    """Call the element operation and check that it produced an awaitable.

    Raises:
        NotAwaitableError: If func(item) returned something that cannot be awaited.
    """
    awaitable = func(item)
    if not inspect.isawaitable(awaitable):
        raise NotAwaitableError(index, type(awaitable).__name__)
    return awaitable


async def run_indexed[T, R](
    func: Callable[[T], Awaitable[R]],
    items: list[T],
    iteration: Iteration,
) -> list[R]:
    """Run func on every item concurrently and return the results in input order.

    One task is started per item, in input order, with no limit on how many
    run at once. The first exception raised by any task is recorded, the
    group is cancelled, and that exception is re-raised after every task has
    been joined or cancelled. Which error wins when several tasks fail in the
    same scheduler step depends on the backend's scheduling order.

    Args:
        func: Async element operation.
        items: Materialized input.
        iteration: Bookkeeping for the enclosing call.

    Returns:
        Results, where result i belongs to items[i].
    """
    slots: list[Any] = [_EMPTY] * len(items)
    first_error: Exception | None = None

    async with anyio.create_task_group() as tg:

        async def run_one(index: int, item: T) -> None:
            nonlocal first_error
            try:
                slots[index] = await invoke(func, item, index)
            except Exception as exc:  # noqa: BLE001
                if first_error is None:
                    first_error = exc
                    iteration.element_failed(index, exc)
                    tg.cancel_scope.cancel()
                else:
                    iteration.error_discarded(index, exc)

        for index, item in enumerate(items):
            tg.start_soon(run_one, index, item)

    if first_error is not None:
        raise first_error

    assert all(slot is not _EMPTY for slot in slots)
    return slots
