"""Free-function pattern matching over settled containers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hybrid_result.option import Option
    from hybrid_result.result import Result

__all__ = ['match_option', 'match_result']


def match_result[T, E, U](result: Result[T, E], *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
    """Call `ok` with the Ok value or `err` with the Err payload.

    Raises:
        PendingStateError: If the result is still pending.

    Example:
        ```python
        match_result(Err('boom'), ok=str, err=len)  # 4
        ```
    """
    if result.tag == 'Ok':
        return ok(result.unwrap())  # type: ignore[arg-type]
    return err(result.unwrap_err())  # type: ignore[arg-type]


def match_option[T, U](option: Option[T], *, some: Callable[[T], U], none: Callable[[], U]) -> U:
    """Call `some` with the value or `none` with no arguments."""
    if option.tag == 'Some':
        return some(option.unwrap())  # type: ignore[arg-type]
    return none()
