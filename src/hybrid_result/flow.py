"""Flow: do-notation over Options and Results in one generator.

A yielded Result contributes its Ok value or stops the flow with its Err; a
yielded Option contributes its value or stops the flow with
``Err(UnwrappedNone())``. The outcome is always a Result.

Example:
    ```python
    def order_total(order_id):
        order = yield from find_order(order_id)   # Option[Order]
        price = yield from price_of(order)        # Result[int, PriceError]
        return price * order.quantity

    Flow.gen(order_total, 7)  # Ok(...), Err(PriceError(...)) or Err(UnwrappedNone())
    ```
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any, final

from hybrid_result._internal.interpreter import drive, drive_async
from hybrid_result._internal.trace import adapt
from hybrid_result.result import Result

__all__ = ['Flow']


@final
class Flow:
    """Generator entry points accepting both container kinds."""

    __slots__ = ()

    @staticmethod
    def gen[V](fn: Callable[..., Generator[Any, Any, V]], *args: Any, **kwargs: Any) -> Result[V, Any]:
        """Run a generator yielding Results and Options."""
        return Result._from_state(drive(fn(*args, **kwargs)))  # noqa: SLF001

    @staticmethod
    def gen_adapter[V](fn: Callable[..., Generator[Any, Any, V]], *args: Any, **kwargs: Any) -> Result[V, Any]:
        """Like `gen`, but `fn` receives an adapter as its first argument."""
        return Result._from_state(drive(fn(adapt, *args, **kwargs)))  # noqa: SLF001

    @staticmethod
    async def async_gen(
        fn: Callable[..., AsyncGenerator[Any, Any] | Generator[Any, Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Result[Any, Any]:
        """Run an async generator yielding Results, Options or awaitables of them."""
        return Result._from_state(await drive_async(fn(*args, **kwargs)))  # noqa: SLF001

    @staticmethod
    async def async_gen_adapter(
        fn: Callable[..., AsyncGenerator[Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Result[Any, Any]:
        """`async_gen` with an adapter as the generator's first argument."""
        return Result._from_state(await drive_async(fn(adapt, *args, **kwargs)))  # noqa: SLF001
