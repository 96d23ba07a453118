"""@safe_async decorator: turn a raising iteration into an Ok/Err outcome.

An operation either returns its whole ordered output or raises one error.
safe_async reifies that as Ok(output) or Err(error, failure), where failure is
the ElementFailed record naming the operation and element that raised.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from klaw_iter._group import failure_of
from klaw_iter.result import Err, Ok
from klaw_iter.runtime._logging import get_logger

__all__ = ['safe_async']


@overload
def safe_async[**P, T](
    operation: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Ok[T] | Err[Exception]]]: ...


@overload
def safe_async[**P, T, E: BaseException](
    operation: None = None,
    *,
    exceptions: tuple[type[E], ...],
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Ok[T] | Err[E]]]]: ...


def safe_async(
    operation: Callable[..., Awaitable[Any]] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
) -> Any:
    """Wrap an iteration so it returns an outcome instead of raising.

    The Err carries the element error itself, unwrapped, and, when the error
    surfaced from a klaw-iter operation awaited directly by the wrapped call,
    an ElementFailed record (operation, discipline, index, size). Errors raised
    elsewhere, or replaced on the way out, get failure=None. Exceptions outside
    ``exceptions`` propagate unchanged.

    Works on the operations themselves or on any coroutine function built on them:
        outcome = await safe_async(concurrent_map)(fetch, urls)

        @safe_async(exceptions=(OSError,))
        async def sync_dir(paths: list[Path]) -> None:
            await concurrent_for_each(upload, paths)

    Args:
        operation: The async callable to wrap (when used without parentheses).
        exceptions: Exception types turned into Err. Defaults to (Exception,).

    Returns:
        A wrapped async callable returning Ok[T] | Err[E].
    """

    @wrapt.decorator
    async def to_outcome(
        wrapped: Callable[..., Awaitable[Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[Any] | Err[Any]:
        try:
            output = await wrapped(*args, **kwargs)
        except exceptions as exc:
            failure = failure_of(exc)
            get_logger('klaw_iter').debug(
                'iteration.outcome_err',
                error_type=type(exc).__name__,
                operation=None if failure is None else failure.operation,
                index=None if failure is None else failure.index,
            )
            return Err(exc, failure)
        return Ok(output)

    if operation is not None:
        return to_outcome(operation)
    return to_outcome
