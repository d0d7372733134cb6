"""Hybrid sync/async engine shared by Result and Option.

Every combinator is expressed as a step: a function from a settled outcome
to the next state. `bind` applies a step immediately when the state is
settled and chains it onto the computation when the state is pending, so a
chain stays synchronous until some transform returns an awaitable and is
pending from then on.

Transforms run under `invoke`, which turns raised exceptions into failures
(passed through the active error mapper) and awaitable returns into a
`Pending` source. `lift` additionally flattens one container level for
flat_map-style transforms.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Generator, Iterable, Sequence
from typing import Any, Never, Self

import anyio

from hybrid_result._internal.state import Failure, Pending, Settled, State, Step, Success
from hybrid_result._internal.trace import Traced, capture
from hybrid_result.config import ErrorMapper, map_error
from hybrid_result.errors import NotASequenceError

__all__ = [
    'Hybrid',
    'bind',
    'combine',
    'flat_map_step',
    'flat_zip_step',
    'gather',
    'inner_map_step',
    'invoke',
    'lift',
    'map_step',
    'on_failure',
    'on_success',
    'settle_awaitable',
    'tap_step',
    'then',
    'validate_step',
    'zip_err_step',
    'zip_step',
]


def _caught(exc: Exception, mapper: ErrorMapper | None = None) -> Failure[Any]:
    return Failure(mapper(exc) if mapper is not None else map_error(exc))


def bind(state: State, step: Step) -> State:
    """Apply `step` now if `state` is settled, otherwise chain it."""
    if isinstance(state, Pending):
        return Pending(parent=state, step=step)
    return step(state)


def on_success(f: Callable[[Any], State]) -> Step:
    """Step that runs `f` on success values and passes failures through."""

    def step(settled: Settled) -> State:
        if isinstance(settled, Success):
            return f(settled.value)
        return settled

    return step


def on_failure(f: Callable[[Any], State]) -> Step:
    """Step that runs `f` on errors and passes successes through."""

    def step(settled: Settled) -> State:
        if isinstance(settled, Failure):
            return f(settled.error)
        return settled

    return step


def then(state: State, f: Callable[[Any], State]) -> State:
    """Continue `state` with `f` on success."""
    return bind(state, on_success(f))


async def settle_awaitable(awaitable: Awaitable[Any], mapper: ErrorMapper | None = None) -> Settled:
    """Await `awaitable`, converting its outcome into a settled state."""
    try:
        value = await awaitable
    except Exception as exc:  # noqa: BLE001
        return _caught(exc, mapper)
    return Success(value)


def invoke(fn: Callable[..., Any], *args: Any, mapper: ErrorMapper | None = None) -> State:
    """Call a plain transform.

    Returns Success for a plain return, Failure for a raised exception and a
    pending state for an awaitable return. A returned container is a plain
    value here: map does not flatten.
    """
    try:
        out = fn(*args)
    except Exception as exc:  # noqa: BLE001
        return _caught(exc, mapper)
    if not isinstance(out, Hybrid) and inspect.isawaitable(out):
        return Pending(settle_awaitable(out, mapper))
    return Success(out)


async def _lift_awaitable(awaitable: Awaitable[Any]) -> Settled:
    try:
        out = await awaitable
    except Exception as exc:  # noqa: BLE001
        return _caught(exc)
    if isinstance(out, Hybrid):
        state = out._lift()  # noqa: SLF001
        if isinstance(state, Pending):
            return await state.resolve()
        return state
    return Success(out)


def lift(fn: Callable[..., Any], *args: Any) -> State:
    """Call a container-returning transform and flatten one level.

    Accepts a plain value, an awaitable, a container, or an awaitable of a
    container as the transform's return.
    """
    try:
        out = fn(*args)
    except Exception as exc:  # noqa: BLE001
        return _caught(exc)
    if isinstance(out, Hybrid):
        return out._lift()  # noqa: SLF001
    if inspect.isawaitable(out):
        return Pending(_lift_awaitable(out))
    return Success(out)


async def gather(states: Sequence[State]) -> list[Settled]:
    """Settle every state, awaiting pending ones concurrently.

    The returned list keeps the order of `states`.
    """
    settled: list[Settled | None] = [None if isinstance(s, Pending) else s for s in states]

    async def settle_at(index: int, pending: Pending) -> None:
        settled[index] = await pending.resolve()

    async with anyio.create_task_group() as tg:
        for index, state in enumerate(states):
            if isinstance(state, Pending):
                tg.start_soon(settle_at, index, state)

    return settled  # type: ignore[return-value]


def combine(states: Sequence[State], f: Callable[[list[Settled]], Settled]) -> State:
    """Combine several states, going pending if any of them is pending."""
    if any(isinstance(s, Pending) for s in states):

        async def combined() -> Settled:
            return f(await gather(states))

        return Pending(combined())
    return f(list(states))  # type: ignore[arg-type]


# --- Step factories shared by Result and Option ---


def map_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: invoke(fn, value))


def flat_map_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: lift(fn, value))


def zip_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: then(invoke(fn, value), lambda other: Success((value, other))))


def flat_zip_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: then(lift(fn, value), lambda other: Success((value, other))))


def zip_err_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: then(lift(fn, value), lambda _: Success(value)))


def tap_step(fn: Callable[[Any], Any]) -> Step:
    return on_success(lambda value: then(invoke(fn, value), lambda _: Success(value)))


def inner_map_step(fn: Callable[[Any], Any]) -> Step:
    """Map `fn` over a list or tuple success value.

    A non-sequence value raises NotASequenceError out of the step itself, so
    the misuse surfaces even when the step runs inside a pending chain.
    """

    def mapped(value: Any) -> State:
        if not isinstance(value, list | tuple):
            raise NotASequenceError(value)
        return invoke(lambda: [fn(item) for item in value])

    return on_success(mapped)


def validate_step(validators: Iterable[Callable[[Any], Any]], failed: Callable[[list[Any]], Settled]) -> Step:
    """Run every validator on the success value and collect the failures.

    Args:
        validators: Callables returning a container (or an awaitable of one).
            A raising validator counts as a failure carrying the mapped
            exception.
        failed: Builds the outcome from the errors of the failing
            validators, in call order.
    """
    checks = list(validators)

    def run(value: Any) -> State:
        states = [lift(check, value) for check in checks]

        def collect(settled: list[Settled]) -> Settled:
            errors = [s.error for s in settled if isinstance(s, Failure)]
            return failed(errors) if errors else Success(value)

        return combine(states, collect)

    return on_success(run)


class Hybrid:
    """Immutable container backed by a settled or pending state."""

    __slots__ = ('_state',)

    _state: State

    def __init__(self, state: State) -> None:
        object.__setattr__(self, '_state', state)

    @classmethod
    def _adopt(cls, state: State) -> Self:
        instance = object.__new__(cls)
        object.__setattr__(instance, '_state', state)
        return instance

    @classmethod
    def _from_state(cls, state: State) -> Any:
        raise NotImplementedError

    def _lift(self) -> State:
        """State seen by a flat_map-style transform that returned self."""
        return self._state

    def _derive(self, step: Step) -> Any:
        return self._from_state(bind(self._state, step))

    def __setattr__(self, name: str, value: Any) -> Never:
        raise AttributeError(f'{type(self).__name__} is immutable')

    def __delattr__(self, name: str) -> Never:
        raise AttributeError(f'{type(self).__name__} is immutable')

    def __bool__(self) -> Never:
        raise TypeError(f'{type(self).__name__} has no truth value; use its predicates instead.')

    def __eq__(self, other: object) -> bool:
        """Settled containers of the same kind compare by payload; pending ones by identity."""
        if self is other:
            return True
        if type(self) is not type(other) or not isinstance(other, Hybrid):
            return False
        if isinstance(self._state, Pending) or isinstance(other._state, Pending):
            return False
        return self._state == other._state

    def __hash__(self) -> int:
        """Hash a settled container by its payload, which must itself be hashable.

        ``hash(Ok([1]))`` raises TypeError like ``hash([1])`` does. A pending
        container hashes by identity.
        """
        if isinstance(self._state, Pending):
            return id(self)
        return hash((type(self).__name__, self._state))

    def is_pending(self) -> bool:
        """Return True while the container waits on an asynchronous computation."""
        return isinstance(self._state, Pending)

    async def to_awaitable(self) -> Self:
        """Return the settled container, awaiting the computation if pending."""
        if isinstance(self._state, Pending):
            return self._from_state(await self._state.resolve())
        return self

    async def _when_settled(self, method: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return method(await self.to_awaitable(), *args, **kwargs)

    def __await__(self) -> Generator[Any, Any, Self]:
        return self.to_awaitable().__await__()

    def __iter__(self) -> Generator[Traced, Any, Any]:
        """Support ``value = yield from container`` inside interpreter generators."""
        return (yield Traced(self, capture(1)))
