"""@safe and @safe_async decorators for catching exceptions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from hybrid_result.config import map_error
from hybrid_result.result import Err, Ok, Result

__all__ = ['safe', 'safe_async']


@overload
def safe[**P, T](
    func: Callable[P, T],
) -> Callable[P, Result[T, Any]]: ...


@overload
def safe[**P, T](
    func: None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, Result[T, Any]]]: ...


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Any:
    """Decorator that catches exceptions and returns Err.

    Wraps a function so that it returns Ok(value) on success and
    Err(mapped exception) if a caught exception is raised. The active error
    mapper is applied to the exception; exceptions outside `exceptions`
    propagate.

    Can be used with or without arguments:
        @safe
        def risky(): ...

        @safe(exceptions=(ValueError, TypeError))
        def specific(): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).

    Returns:
        A wrapped function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b
        divide(10, 2)
        # Ok(5.0)
        divide(10, 0)
        # Err(ZeroDivisionError('division by zero'))
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            return Ok(wrapped(*args, **kwargs))
        except catch as e:
            return Err(map_error(e))

    if func is not None:
        return wrapper(func)
    return wrapper


@overload
def safe_async[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Result[T, Any]]]: ...


@overload
def safe_async[**P, T](
    func: None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T, Any]]]]: ...


def safe_async[**P, T](
    func: Callable[P, Awaitable[T]] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Any:
    """Async decorator that catches exceptions and returns Err.

    Can be used with or without arguments, like `safe`.

    Example:
        ```python
        @safe_async(exceptions=(TimeoutError,))
        async def fetch(url: str) -> str:
            return await http_get(url)
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            return Ok(await wrapped(*args, **kwargs))
        except catch as e:
            return Err(map_error(e))

    if func is not None:
        return wrapper(func)
    return wrapper
