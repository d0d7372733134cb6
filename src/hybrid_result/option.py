"""Option[T]: a value that may be absent, settled or pending.

``Some(v)`` holds a value; ``Nothing`` is the single absent Option. Options
share the hybrid engine with Result: a transform returning an awaitable
makes the Option pending, and awaiting it gives back ``Some(...)`` or
``Nothing``. An exception raised by a transform makes the Option absent.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Final, Never, final

from hybrid_result._internal.hybrid import (
    Hybrid,
    bind,
    combine,
    flat_map_step,
    flat_zip_step,
    inner_map_step,
    invoke,
    lift,
    map_step,
    on_failure,
    on_success,
    settle_awaitable,
    tap_step,
    then,
    validate_step,
    zip_step,
)
from hybrid_result._internal.interpreter import drive, drive_async
from hybrid_result._internal.state import Failure, Pending, Settled, State, Success
from hybrid_result._internal.trace import adapt
from hybrid_result.errors import PendingStateError, UnwrappedNone
from hybrid_result.unit import UNIT, UnitType

if TYPE_CHECKING:
    from hybrid_result.result import Result

__all__ = ['Nothing', 'NothingType', 'Option', 'Some']

_ABSENT: Final = Failure(None)


def _absent(_: Any = None) -> Settled:
    return _ABSENT


def _as_unwrapped_none(settled: Settled) -> Settled:
    if isinstance(settled, Failure):
        return Failure(UnwrappedNone())
    return settled


def _collect_all(settled: list[Settled]) -> Settled:
    if any(isinstance(s, Failure) for s in settled):
        return _ABSENT
    return Success(tuple(s.value for s in settled))  # type: ignore[union-attr]


def _first_some(settled: list[Settled]) -> Settled:
    for outcome in settled:
        if isinstance(outcome, Success):
            return outcome
    return _ABSENT


class Option[T](Hybrid):
    """A value of type T, or `Nothing`.

    Settled options are `Some` instances or the `Nothing` singleton; pending
    options are plain `Option` instances until awaited.
    """

    __slots__ = ()

    @classmethod
    def _from_state(cls, state: State) -> Option[Any]:
        if isinstance(state, Success):
            return Some._adopt(state)
        if isinstance(state, Failure):
            return Nothing
        return Option._adopt(state)

    def _lift(self) -> State:
        # absence seen from a Result context
        return bind(self._state, _as_unwrapped_none)

    def __repr__(self) -> str:
        state = self._state
        if isinstance(state, Success):
            return f'Some({state.value!r})'
        if isinstance(state, Failure):
            return 'Nothing'
        return 'Option(<pending>)'

    # --- Predicates ---

    def is_some(self) -> bool:
        """Return True for a settled Some. A pending option answers False."""
        return isinstance(self._state, Success)

    def is_none(self) -> bool:
        """Return True for Nothing. A pending option answers False."""
        return isinstance(self._state, Failure)

    def is_unit(self) -> bool:
        """Return True for ``Some(UNIT)``."""
        state = self._state
        return isinstance(state, Success) and isinstance(state.value, UnitType)

    @property
    def tag(self) -> str:
        """``'Some'`` or ``'None'``.

        Raises:
            PendingStateError: If the option is still pending.
        """
        state = self._state
        if isinstance(state, Pending):
            raise PendingStateError('tag')
        return 'Some' if isinstance(state, Success) else 'None'

    # --- Extraction ---

    def unwrap(self) -> T | Awaitable[T]:
        """Return the value or raise `UnwrappedNone`.

        On a pending option, returns an awaitable that does the same once
        settled.
        """
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.unwrap)
        if isinstance(state, Success):
            return state.value
        raise UnwrappedNone()

    def unwrap_or(self, default: T) -> T | Awaitable[T]:
        """Return the value or `default`."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.unwrap_or, default)
        return state.value if isinstance(state, Success) else default

    def map_or[U](self, default: U, fn: Callable[[T], U]) -> U | Awaitable[U]:
        """Return ``fn(value)``, or `default` when absent."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.map_or, default, fn)
        return fn(state.value) if isinstance(state, Success) else default

    def unwrap_or_else(self, fn: Callable[[], T]) -> T | Awaitable[T]:
        """Return the value or ``fn()``."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.unwrap_or_else, fn)
        return state.value if isinstance(state, Success) else fn()

    def safe_unwrap(self) -> T | None:
        """Return the value, or None when absent or pending."""
        state = self._state
        return state.value if isinstance(state, Success) else None

    # --- Dispatch ---

    def match[U](self, *, some: Callable[[T], U], none: Callable[[], U]) -> U | Awaitable[U]:
        """Call `some` with the value or `none` with no arguments."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.match, some=some, none=none)
        if isinstance(state, Success):
            return some(state.value)
        return none()

    def fold[U](self, on_some: Callable[[T], U], on_none: Callable[[], U]) -> U | Awaitable[U]:
        """Positional form of `match`."""
        return self.match(some=on_some, none=on_none)

    def match_partial[U](
        self,
        cases: Mapping[str, Callable[..., U]],
        get_default: Callable[[], U],
    ) -> U | Awaitable[U]:
        """Dispatch on a partial mapping keyed by ``'Some'``/``'None'``.

        The ``'Some'`` handler receives the value, the ``'None'`` handler
        nothing.
        """
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Option.match_partial, cases, get_default)
        handler = cases.get(self.tag)
        if handler is None:
            return get_default()
        return handler(state.value) if isinstance(state, Success) else handler()

    # --- Combinators ---

    def map[U](self, fn: Callable[[T], U | Awaitable[U]]) -> Option[U]:
        """Transform the value; Nothing passes through without calling `fn`.

        ``Some(v).map(lambda _: None)`` is ``Some(None)``, not Nothing.
        """
        return self._derive(map_step(fn))

    def flat_map[U](self, fn: Callable[[T], Option[U] | Awaitable[Option[U]]]) -> Option[U]:
        """Chain an option-returning transform, flattening one level."""
        return self._derive(flat_map_step(fn))

    and_then = flat_map

    def zip[U](self, fn: Callable[[T], U | Awaitable[U]]) -> Option[tuple[T, U]]:
        """Pair the value with ``fn(value)``."""
        return self._derive(zip_step(fn))

    def flat_zip[U](self, fn: Callable[[T], Option[U] | Awaitable[Option[U]]]) -> Option[tuple[T, U]]:
        """Pair the value with the value of ``fn(value)``; Nothing if that is absent."""
        return self._derive(flat_zip_step(fn))

    def filter(self, pred: Callable[[T], bool | Awaitable[bool]]) -> Option[T]:
        """Keep the value only if `pred` holds for it.

        A raising predicate makes the option absent. The predicate is never
        called on Nothing.
        """
        return self._derive(
            on_success(lambda value: then(invoke(pred, value), lambda kept: Success(value) if kept else _ABSENT))
        )

    def or_else[U](self, fn: Callable[[], Option[U] | Awaitable[Option[U]]]) -> Option[T | U]:
        """Fall back to ``fn()`` when absent."""
        return self._derive(on_failure(lambda _: lift(fn)))

    def validate(self, validators: Iterable[Callable[[T], Option[Any]]]) -> Option[T]:
        """Run every validator on the value.

        All validators run even after one fails; the option becomes Nothing
        if any of them returned Nothing or raised.
        """
        return self._derive(validate_step(validators, _absent))

    def inner_map[U](self, fn: Callable[[Any], U]) -> Option[list[U]]:
        """Map `fn` over each element of a list or tuple value.

        Raises:
            NotASequenceError: If the value is not a list or tuple.
        """
        return self._derive(inner_map_step(fn))

    def tap(self, fn: Callable[[T], Any]) -> Option[T]:
        """Run a side effect on the value and keep the option."""
        return self._derive(tap_step(fn))

    def to_result[E](self, error: E) -> Result[T, E]:
        """``Ok(value)``, or ``Err(error)`` when absent."""
        from hybrid_result.result import Result

        return Result._from_state(bind(self._state, on_failure(lambda _: Failure(error))))  # noqa: SLF001

    # --- Aggregation ---

    @staticmethod
    def all(*options: Option[Any]) -> Option[tuple[Any, ...]]:
        """``Some(tuple_of_values)``, or Nothing if any option is absent."""
        states = [o._state for o in options]  # noqa: SLF001
        if any(isinstance(s, Failure) for s in states):
            return Nothing
        return Option._from_state(combine(states, _collect_all))

    @staticmethod
    def any(*options: Option[Any]) -> Option[Any]:
        """Return the first Some, or Nothing."""
        return Option._from_state(combine([o._state for o in options], _first_some))  # noqa: SLF001

    # --- Constructors ---

    @staticmethod
    def from_nullable[V](value: V | None) -> Option[V]:
        """``Some(value)`` unless value is None."""
        return Nothing if value is None else Some(value)

    @staticmethod
    def from_falsy[V](value: V) -> Option[V]:
        """``Some(value)`` for a truthy value, else Nothing."""
        return Some(value) if value else Nothing

    @staticmethod
    def from_predicate[V](value: V, pred: Callable[[V], bool]) -> Option[V]:
        """``Some(value)`` if ``pred(value)`` holds, else Nothing."""
        return Some(value) if pred(value) else Nothing

    @staticmethod
    def from_awaitable[V](awaitable: Awaitable[V]) -> Option[V]:
        """Pending option of the awaitable's value; Nothing if it raises."""
        return Option._from_state(Pending(settle_awaitable(awaitable, _absent_error)))

    @staticmethod
    def try_catch[V](fn: Callable[[], V]) -> Option[V]:
        """``Some(fn())``, or Nothing if `fn` raises."""
        return Option._from_state(invoke(fn, mapper=_absent_error))

    @staticmethod
    def try_async_catch[V](fn: Callable[[], Awaitable[V]]) -> Option[V]:
        """Pending option of awaiting ``fn()``; Nothing if it raises."""

        async def call() -> V:
            return await fn()

        return Option.from_awaitable(call())

    @staticmethod
    def unit() -> Option[UnitType]:
        """``Some(UNIT)``."""
        return Some(UNIT)

    # --- Generator interpreter ---

    @staticmethod
    def gen[V](fn: Callable[..., Generator[Any, Any, V]], *args: Any, **kwargs: Any) -> Option[V]:
        """Run a generator in do-notation over options.

        ``value = yield from option`` extracts the value; the first Nothing
        stops the generator and becomes the outcome. A yielded Err stops it
        too, as Nothing.

        Raises:
            PendingStateError: If the generator yields a pending option or
                an awaitable.
        """
        return Option._from_state(drive(fn(*args, **kwargs)))

    @staticmethod
    def gen_adapter[V](fn: Callable[..., Generator[Any, Any, V]], *args: Any, **kwargs: Any) -> Option[V]:
        """Like `gen`, but `fn` receives an adapter as its first argument."""
        return Option._from_state(drive(fn(adapt, *args, **kwargs)))

    @staticmethod
    async def async_gen(
        fn: Callable[..., AsyncGenerator[Any, Any] | Generator[Any, Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Option[Any]:
        """Run an async generator over options; Some of the last value sent back."""
        return Option._from_state(await drive_async(fn(*args, **kwargs)))

    @staticmethod
    async def async_gen_adapter(
        fn: Callable[..., AsyncGenerator[Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Option[Any]:
        """`async_gen` with an adapter accepting options or awaitables of options."""
        return Option._from_state(await drive_async(fn(adapt, *args, **kwargs)))


def _absent_error(_: BaseException) -> None:
    return None


@final
class Some[T](Option[T]):
    """A present value. ``Some(None)`` is present too."""

    __slots__ = ()
    __match_args__ = ('value',)

    def __init__(self, value: T) -> None:
        super().__init__(Success(value))

    @property
    def value(self) -> T:
        return self._state.value  # type: ignore[union-attr]

    def __reduce__(self) -> tuple[type[Some[T]], tuple[T]]:
        return (Some, (self.value,))


@final
class NothingType(Option[Never]):
    """Type of the `Nothing` singleton."""

    __slots__ = ()
    _instance: NothingType | None = None

    def __new__(cls) -> NothingType:
        if cls._instance is None:
            cls._instance = cls._adopt(_ABSENT)
        return cls._instance

    def __init__(self) -> None:
        pass

    def __reduce__(self) -> str:
        return 'Nothing'


Nothing: Final[NothingType] = NothingType()
