"""Generator interpreter behind ``gen`` and friends.

A user generator yields containers; the interpreter unwraps each one and
sends its success value back in, or stops at the first failure. Both drivers
are plain loops over ``send``/``asend``, so the number of yields is bounded
only by the user's generator, never by the Python stack.

Every container is unwrapped through its lifted state, whatever kind the
caller builds: a Nothing yielded in a Result generator fails it with
``UnwrappedNone``, and an Err yielded in an Option generator ends it as
Nothing once the caller rebuilds its own container from the failure.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncGenerator, Generator
from typing import Any

from hybrid_result._internal.hybrid import Hybrid
from hybrid_result._internal.state import Failure, Pending, Settled, Success
from hybrid_result._internal.trace import splice, strip
from hybrid_result.errors import PendingStateError

__all__ = ['drive', 'drive_async']


def _discard(awaitable: Any) -> None:
    # silences "coroutine was never awaited" for rejected coroutines
    if inspect.iscoroutine(awaitable):
        awaitable.close()


def drive(iterator: Generator[Any, Any, Any]) -> Settled:
    """Run a synchronous generator to completion or first failure.

    Args:
        iterator: The started (or fresh) generator. Containers it yields are
            unwrapped; anything else is sent back unchanged.

    Returns:
        ``Success(return_value)`` or the failure of the first failing yield.

    Raises:
        PendingStateError: A pending container or an awaitable was yielded.
    """
    sent: Any = None
    while True:
        try:
            item = iterator.send(sent)
        except StopIteration as stop:
            return Success(stop.value)

        target, site = strip(item)
        if isinstance(target, Hybrid):
            state = target._lift()  # noqa: SLF001
            if isinstance(state, Pending):
                iterator.close()
                raise PendingStateError('yielding from a synchronous generator')
            if isinstance(state, Failure):
                iterator.close()
                splice(state.error, site)
                return state
            sent = state.value
        elif inspect.isawaitable(target):
            iterator.close()
            _discard(target)
            raise PendingStateError('yielding an awaitable from a synchronous generator')
        else:
            sent = target


async def drive_async(iterator: AsyncGenerator[Any, Any] | Generator[Any, Any, Any]) -> Settled:
    """Run an async (or plain) generator to completion or first failure.

    Awaitables and pending containers are awaited before being unwrapped. An
    async generator cannot return a value, so a completed run succeeds with
    the last value sent back into it (None if it never yielded). A plain
    generator succeeds with its return value.
    """
    is_async = inspect.isasyncgen(iterator)
    sent: Any = None
    while True:
        try:
            if is_async:
                item = await iterator.asend(sent)  # type: ignore[union-attr]
            else:
                item = iterator.send(sent)  # type: ignore[union-attr]
        except StopAsyncIteration:
            return Success(sent)
        except StopIteration as stop:
            return Success(stop.value)

        target, site = strip(item)
        if not isinstance(target, Hybrid) and inspect.isawaitable(target):
            target = await target
        if not isinstance(target, Hybrid):
            sent = target
            continue

        state = target._lift()  # noqa: SLF001
        if isinstance(state, Pending):
            state = await state.resolve()
        if isinstance(state, Failure):
            if is_async:
                await iterator.aclose()  # type: ignore[union-attr]
            else:
                iterator.close()  # type: ignore[union-attr]
            splice(state.error, site)
            return state
        sent = state.value
