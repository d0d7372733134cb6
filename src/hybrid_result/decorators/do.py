"""@do and @do_async decorators for generator-based do-notation."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any

import wrapt

from hybrid_result.result import Result

__all__ = ['do', 'do_async']


def do[**P, T](
    func: Callable[P, Generator[Any, Any, T]],
) -> Callable[P, Result[T, Any]]:
    """Decorator running a generator function through `Result.gen`.

    Yield (or ``yield from``) Result values to extract their Ok values; the
    first Err short-circuits and is returned. The generator's return value
    is wrapped in Ok.

    Args:
        func: A generator function yielding Results.

    Returns:
        A function returning Result[T, E].

    Example:
        ```python
        @do
        def compute(key: str):
            x = yield from lookup(key)   # returns Err early if lookup fails
            y = yield from parse(x)
            return y * 2
        compute('a')
        # Ok(...) or the first Err
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Generator[Any, Any, T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        return Result.gen(wrapped, *args, **kwargs)

    return wrapper(func)  # type: ignore[return-value]


def do_async[**P](
    func: Callable[P, AsyncGenerator[Any, Any]],
) -> Callable[P, Awaitable[Result[Any, Any]]]:
    """Async decorator running an async generator function through `Result.async_gen`.

    Note: Async generators cannot have a return value in Python, so the last
    value sent back into the generator is used as the final Ok value.

    Example:
        ```python
        @do_async
        async def compute():
            x = yield fetch_x()    # awaitable of a Result
            y = yield fetch_y()
            yield Ok(x + y)        # final result
        ```
    """

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, AsyncGenerator[Any, Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[Any, Any]:
        return await Result.async_gen(wrapped, *args, **kwargs)

    return wrapper(func)
