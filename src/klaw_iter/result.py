"""Ok / Err outcome types for iteration results.

Every klaw-iter operation is all-or-nothing: it either returns the complete,
ordered output or raises exactly one error. Wrapping an operation with
``safe_async`` reifies that outcome as a value.

Example:
    ```python
    from klaw_iter import concurrent_map, safe_async

    outcome = await safe_async(concurrent_map)(fetch, urls)
    match outcome:
        case Ok(pages):
            ...
        case Err(error):
            ...
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from klaw_iter.runtime.errors import ElementFailed

__all__ = ['Err', 'Ok', 'Result']


@dataclass(slots=True, frozen=True)
class Ok[T]:
    """A completed iteration carrying its aggregated output.

    Attributes:
        value: The output (a list, or None for for-each operations).
    """

    value: T
    __match_args__ = ('value',)

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value using a function."""
        return Ok(f(self.value))

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> BaseException:
        """Raise, since an Ok holds no error.

        Raises:
            RuntimeError: Always.
        """
        msg = f'Called unwrap_err on Ok: {self.value!r}'
        raise RuntimeError(msg)

    def ok(self) -> T | None:
        return self.value

    def err(self) -> BaseException | None:
        return None

    def __repr__(self) -> str:
        """Return a string representation of the Ok instance."""
        return f'Ok({self.value!r})'


@dataclass(slots=True, frozen=True)
class Err[E: BaseException]:
    """A failed iteration carrying the first error raised by an element.

    Attributes:
        error: The exception that aborted the iteration.
        failure: Which operation and element raised it, when known.
    """

    error: E
    failure: ElementFailed | None = None
    __match_args__ = ('error', 'failure')

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map[U](self, f: Callable[[Any], U]) -> Err[E]:
        """Return self unchanged."""
        return self

    def unwrap(self) -> Any:
        """Re-raise the contained error.

        Raises:
            E: The contained error.
        """
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        return default

    def unwrap_err(self) -> E:
        """Return the contained error."""
        return self.error

    def ok(self) -> Any | None:
        return None

    def err(self) -> E | None:
        return self.error

    def __repr__(self) -> str:
        """Return a string representation of the Err instance."""
        if self.failure is None:
            return f'Err({self.error!r})'
        return f'Err({self.error!r}, failure={self.failure!r})'


type Result[T, E: BaseException] = Ok[T] | Err[E]
