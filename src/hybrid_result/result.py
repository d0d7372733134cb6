"""Result[T, E]: a success value or a domain error, settled or pending.

A Result is created settled (``Ok(v)``, ``Err(e)``, constructors) and stays
settled while every transform returns plain values. As soon as a transform
returns an awaitable the Result becomes pending; its combinators keep
working and chain onto the pending computation, and ``await result`` gives
back a settled ``Ok`` or ``Err``.

Example:
    ```python
    Ok(2).map(lambda x: x * 2).map(str)           # Ok('4')
    await Ok(2).map(fetch_score).map(str)          # Ok('...') once awaited
    Result.all(Ok(1), Err('a'), Err('b'))          # Err(['a', 'b'])
    ```
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Never, final

from hybrid_result import config
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
    settle_awaitable,
    tap_step,
    then,
    validate_step,
    zip_err_step,
    zip_step,
)
from hybrid_result._internal.interpreter import drive, drive_async
from hybrid_result._internal.state import Failure, Pending, Settled, State, Success
from hybrid_result._internal.trace import adapt
from hybrid_result.errors import PendingStateError, UnwrappedErrWithOk, UnwrappedOkWithErr
from hybrid_result.unit import UNIT, UnitType

if TYPE_CHECKING:
    from hybrid_result.config import ErrorMapper
    from hybrid_result.option import Option

__all__ = ['Err', 'Ok', 'Result']


def _as_error(settled: Settled) -> Settled:
    if isinstance(settled, Success):
        return Failure(settled.value)
    return settled


def _flipped(settled: Settled) -> Settled:
    if isinstance(settled, Success):
        return Failure(settled.value)
    return Success(settled.error)


def _collect_all(settled: list[Settled]) -> Settled:
    errors = [s.error for s in settled if isinstance(s, Failure)]
    if errors:
        return Failure(errors)
    return Success(tuple(s.value for s in settled))  # type: ignore[union-attr]


def _first_ok(settled: list[Settled]) -> Settled:
    for outcome in settled:
        if isinstance(outcome, Success):
            return outcome
    return Failure([s.error for s in settled])  # type: ignore[union-attr]


class Result[T, E](Hybrid):
    """A success value of type T or a domain error of type E.

    Settled results are instances of `Ok` or `Err`; pending results are plain
    `Result` instances until awaited. All combinators accept transforms that
    return plain values or awaitables. Exceptions raised by a transform are
    caught, passed through the active error mapper and become the Err
    payload.
    """

    __slots__ = ()

    @classmethod
    def _from_state(cls, state: State) -> Result[Any, Any]:
        if isinstance(state, Success):
            return Ok._adopt(state)
        if isinstance(state, Failure):
            return Err._adopt(state)
        return Result._adopt(state)

    def __repr__(self) -> str:
        state = self._state
        if isinstance(state, Success):
            return f'Ok({state.value!r})'
        if isinstance(state, Failure):
            return f'Err({state.error!r})'
        return 'Result(<pending>)'

    # --- Predicates ---

    def is_ok(self) -> bool:
        """Return True for a settled Ok. A pending result answers False."""
        return isinstance(self._state, Success)

    def is_err(self) -> bool:
        """Return True for a settled Err. A pending result answers False."""
        return isinstance(self._state, Failure)

    def is_unit(self) -> bool:
        """Return True for ``Ok(UNIT)``."""
        state = self._state
        return isinstance(state, Success) and isinstance(state.value, UnitType)

    @property
    def tag(self) -> str:
        """``'Ok'`` or ``'Err'``.

        Raises:
            PendingStateError: If the result is still pending.
        """
        state = self._state
        if isinstance(state, Pending):
            raise PendingStateError('tag')
        return 'Ok' if isinstance(state, Success) else 'Err'

    # --- Extraction ---

    def unwrap(self) -> T | Awaitable[T]:
        """Return the Ok value or raise.

        An Err whose payload is an exception raises that exception itself;
        any other payload raises `UnwrappedOkWithErr`. On a pending result,
        returns an awaitable that does the same once settled.

        Raises:
            UnwrappedOkWithErr: If called on an Err with a non-exception payload.
        """
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.unwrap)
        if isinstance(state, Success):
            return state.value
        if isinstance(state.error, BaseException):
            raise state.error
        raise UnwrappedOkWithErr(repr(self))

    def unwrap_err(self) -> E | Awaitable[E]:
        """Return the Err payload or raise `UnwrappedErrWithOk`."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.unwrap_err)
        if isinstance(state, Failure):
            return state.error
        raise UnwrappedErrWithOk(repr(self))

    def unwrap_or(self, default: T) -> T | Awaitable[T]:
        """Return the Ok value or `default`."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.unwrap_or, default)
        return state.value if isinstance(state, Success) else default

    def unwrap_or_else(self, fn: Callable[[E], T]) -> T | Awaitable[T]:
        """Return the Ok value or compute one from the error."""
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.unwrap_or_else, fn)
        return state.value if isinstance(state, Success) else fn(state.error)

    def safe_unwrap(self) -> T | None:
        """Return the Ok value, or None for an Err or a pending result."""
        state = self._state
        return state.value if isinstance(state, Success) else None

    # --- Dispatch ---

    def match[U](self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U | Awaitable[U]:
        """Call `ok` with the value or `err` with the error.

        Example:
            ```python
            Ok(2).match(ok=lambda v: v * 10, err=lambda e: -1)  # 20
            ```
        """
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.match, ok=ok, err=err)
        if isinstance(state, Success):
            return ok(state.value)
        return err(state.error)

    def fold[U](self, on_ok: Callable[[T], U], on_err: Callable[[E], U]) -> U | Awaitable[U]:
        """Positional form of `match`."""
        return self.match(ok=on_ok, err=on_err)

    def match_partial[U](
        self,
        cases: Mapping[str, Callable[[Any], U]],
        get_default: Callable[[], U],
    ) -> U | Awaitable[U]:
        """Dispatch on a partial mapping keyed by ``'Ok'``/``'Err'``.

        Args:
            cases: Handlers for some of the tags.
            get_default: Called when the tag has no handler.
        """
        state = self._state
        if isinstance(state, Pending):
            return self._when_settled(Result.match_partial, cases, get_default)
        handler = cases.get(self.tag)
        if handler is None:
            return get_default()
        return handler(state.value if isinstance(state, Success) else state.error)

    # --- Combinators ---

    def map[U](self, fn: Callable[[T], U | Awaitable[U]]) -> Result[U, E]:
        """Transform the Ok value.

        Args:
            fn: Called with the Ok value. An awaitable return makes the
                result pending.

        Returns:
            The transformed result; an Err passes through without calling `fn`.
        """
        return self._derive(map_step(fn))

    def flat_map[U, F](self, fn: Callable[[T], Result[U, F] | Awaitable[Result[U, F]]]) -> Result[U, E | F]:
        """Chain a result-returning transform, flattening one level.

        An Err from either side becomes the outcome.
        """
        return self._derive(flat_map_step(fn))

    and_then = flat_map

    def zip[U](self, fn: Callable[[T], U | Awaitable[U]]) -> Result[tuple[T, U], E]:
        """Pair the Ok value with ``fn(value)``."""
        return self._derive(zip_step(fn))

    def flat_zip[U, F](self, fn: Callable[[T], Result[U, F] | Awaitable[Result[U, F]]]) -> Result[tuple[T, U], E | F]:
        """Pair the Ok value with the value of the result ``fn(value)``.

        If that result is an Err, it becomes the whole outcome.
        """
        return self._derive(flat_zip_step(fn))

    def zip_err[F](self, fn: Callable[[T], Result[Any, F] | Awaitable[Result[Any, F]]]) -> Result[T, E | F]:
        """Keep the Ok value but take the Err of ``fn(value)``, if any.

        The Ok value of ``fn(value)`` is discarded.

        Example:
            ```python
            Ok('42').zip_err(lambda s: Ok(int(s)))   # Ok('42')
            Ok('42').zip_err(lambda s: Err('bad'))   # Err('bad')
            ```
        """
        return self._derive(zip_err_step(fn))

    def map_err[F](self, fn: Callable[[E], F | Awaitable[F]]) -> Result[T, F]:
        """Transform the Err payload; an Ok passes through."""
        return self._derive(on_failure(lambda error: bind(invoke(fn, error), _as_error)))

    def map_both[U, F](self, fn_ok: Callable[[T], U], fn_err: Callable[[E], F]) -> Result[U, F]:
        """Transform the Ok value with `fn_ok` or the Err payload with `fn_err`."""

        def step(settled: Settled) -> State:
            if isinstance(settled, Success):
                return invoke(fn_ok, settled.value)
            return bind(invoke(fn_err, settled.error), _as_error)

        return self._derive(step)

    def or_else[U, F](self, fn: Callable[[E], Result[U, F] | Awaitable[Result[U, F]]]) -> Result[T | U, F]:
        """Recover from an Err with the result of ``fn(error)``."""
        return self._derive(on_failure(lambda error: lift(fn, error)))

    def validate(self, validators: Iterable[Callable[[T], Result[Any, E]]]) -> Result[T, list[E]]:
        """Run every validator against the Ok value.

        Unlike the other combinators this does not stop at the first failing
        validator: all of them run, and their errors are collected in call
        order.

        Args:
            validators: Callables returning a Result (or an awaitable of one).

        Returns:
            The original result when every validator passes, otherwise
            ``Err([error, ...])``. An Err base runs no validators.

        Example:
            ```python
            Ok(5).validate([
                lambda v: Ok(v) if v > 0 else Err('not positive'),
                lambda v: Ok(v) if v % 2 == 0 else Err('odd'),
            ])
            # Err(['odd'])
            ```
        """
        return self._derive(validate_step(validators, Failure))

    def inner_map[U](self, fn: Callable[[Any], U]) -> Result[list[U], E]:
        """Map `fn` over each element of a list or tuple Ok value.

        Raises:
            NotASequenceError: If the Ok value is not a list or tuple. From a
                pending result the error is raised when awaited.
        """
        return self._derive(inner_map_step(fn))

    def tap(self, fn: Callable[[T], Any]) -> Result[T, E]:
        """Run a side effect on the Ok value and keep the result."""
        return self._derive(tap_step(fn))

    def tap_err(self, fn: Callable[[E], Any]) -> Result[T, E]:
        """Run a side effect on the Err payload and keep the result."""
        return self._derive(on_failure(lambda error: then(invoke(fn, error), lambda _: Failure(error))))

    def flip(self) -> Result[E, T]:
        """Swap sides: ``Ok(v)`` becomes ``Err(v)`` and ``Err(e)`` becomes ``Ok(e)``."""
        return self._derive(_flipped)

    def to_option(self) -> Option[T]:
        """Convert to an Option, discarding the error."""
        from hybrid_result.option import Option

        return Option._from_state(self._state)  # noqa: SLF001

    # --- Aggregation ---

    @staticmethod
    def all(*results: Result[Any, Any]) -> Result[tuple[Any, ...], list[Any]]:
        """Combine results into ``Ok(tuple_of_values)``.

        If any of them is an Err, the outcome is ``Err(list_of_all_errors)``.
        Pending members are awaited concurrently.
        """
        return Result._from_state(combine([r._lift() for r in results], _collect_all))  # noqa: SLF001

    @staticmethod
    def any(*results: Result[Any, Any]) -> Result[Any, list[Any]]:
        """Return the first Ok, or ``Err(list_of_all_errors)`` if none succeeded."""
        return Result._from_state(combine([r._lift() for r in results], _first_ok))  # noqa: SLF001

    # --- Constructors ---

    @staticmethod
    def from_nullable[V, F](value: V | None, error: F) -> Result[V, F]:
        """``Ok(value)`` unless value is None, else ``Err(error)``."""
        return Err(error) if value is None else Ok(value)

    @staticmethod
    def from_falsy[V, F](value: V, error: F) -> Result[V, F]:
        """``Ok(value)`` for a truthy value, else ``Err(error)``."""
        return Ok(value) if value else Err(error)

    @staticmethod
    def from_predicate[V, F](value: V, pred: Callable[[V], bool], error: F) -> Result[V, F]:
        """``Ok(value)`` if ``pred(value)`` holds, else ``Err(error)``."""
        return Ok(value) if pred(value) else Err(error)

    @staticmethod
    def from_awaitable[V](awaitable: Awaitable[V], error_mapper: ErrorMapper | None = None) -> Result[V, Any]:
        """Wrap an awaitable in a pending result.

        Args:
            awaitable: Its value becomes the Ok value.
            error_mapper: Applied to an exception raised by the awaitable.
                Defaults to the active error mapper.
        """
        return Result._from_state(Pending(settle_awaitable(awaitable, error_mapper)))

    @staticmethod
    def try_catch[V](fn: Callable[[], V], error_mapper: ErrorMapper | None = None) -> Result[V, Any]:
        """Call `fn`, turning a raised exception into an Err.

        Example:
            ```python
            Result.try_catch(lambda: int('42'))     # Ok(42)
            Result.try_catch(lambda: int('x'), str)  # Err("invalid literal ...")
            ```
        """
        return Result._from_state(invoke(fn, mapper=error_mapper))

    @staticmethod
    def try_async_catch[V](
        fn: Callable[[], Awaitable[V]],
        error_mapper: ErrorMapper | None = None,
    ) -> Result[V, Any]:
        """Pending result of awaiting ``fn()``; exceptions become an Err.

        `fn` is called when the result is awaited.
        """

        async def call() -> V:
            return await fn()

        return Result.from_awaitable(call(), error_mapper)

    @staticmethod
    def unit() -> Result[UnitType, Never]:
        """``Ok(UNIT)``."""
        return Ok(UNIT)

    # --- Error mapper ---

    @staticmethod
    def set_error_mapper(mapper: ErrorMapper) -> None:
        """Install the mapper applied to implicitly caught exceptions."""
        config.set_error_mapper(mapper)

    @staticmethod
    def reset_error_mapper() -> None:
        """Restore the identity error mapper."""
        config.reset_error_mapper()

    # --- Generator interpreter ---

    @staticmethod
    def gen[V](fn: Callable[..., Generator[Any, Any, V]], *args: Any, **kwargs: Any) -> Result[V, Any]:
        """Run a generator in do-notation.

        Inside the generator, ``value = yield from result`` extracts the Ok
        value; the first Err stops the generator (its ``finally`` blocks
        still run) and becomes the outcome. The generator's return value is
        wrapped in Ok. A yielded Nothing fails the run with
        `UnwrappedNone`.

        Args:
            fn: Generator function, called with ``*args`` and ``**kwargs``.

        Raises:
            PendingStateError: If the generator yields a pending result or an
                awaitable; use `async_gen` for those.

        Example:
            ```python
            def checkout():
                a = yield from Ok(1)
                b = yield from Ok(2)
                return a + b

            Result.gen(checkout)  # Ok(3)
            ```
        """
        return Result._from_state(drive(fn(*args, **kwargs)))

    @staticmethod
    def gen_adapter[V](
        fn: Callable[..., Generator[Any, Any, V]],
        *args: Any,
        **kwargs: Any,
    ) -> Result[V, Any]:
        """Like `gen`, but `fn` receives an adapter as its first argument.

        ``value = yield from _(result)`` (or ``yield _(result)``) records
        the call site for trace splicing.
        """
        return Result._from_state(drive(fn(adapt, *args, **kwargs)))

    @staticmethod
    async def async_gen[V](
        fn: Callable[..., AsyncGenerator[Any, Any] | Generator[Any, Any, V]],
        *args: Any,
        **kwargs: Any,
    ) -> Result[Any, Any]:
        """Run an async generator in do-notation.

        ``value = yield result`` extracts the Ok value; pending results and
        awaitables are awaited first. An async generator cannot return a
        value, so the outcome is Ok of the last value sent back into it.

        Example:
            ```python
            async def load():
                user = yield fetch_user(1)    # awaitable of a Result
                yield Ok(user.name)           # last value is the outcome

            await Result.async_gen(load)
            ```
        """
        return Result._from_state(await drive_async(fn(*args, **kwargs)))

    @staticmethod
    async def async_gen_adapter(
        fn: Callable[..., AsyncGenerator[Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Result[Any, Any]:
        """`async_gen` with an adapter accepting results or awaitables of results."""
        return Result._from_state(await drive_async(fn(adapt, *args, **kwargs)))


@final
class Ok[T](Result[T, Never]):
    """Settled success."""

    __slots__ = ()
    __match_args__ = ('value',)

    def __init__(self, value: T) -> None:
        super().__init__(Success(value))

    @property
    def value(self) -> T:
        return self._state.value  # type: ignore[union-attr]

    def __reduce__(self) -> tuple[type[Ok[T]], tuple[T]]:
        return (Ok, (self.value,))


@final
class Err[E](Result[Never, E]):
    """Settled failure carrying a domain error."""

    __slots__ = ()
    __match_args__ = ('error',)

    def __init__(self, error: E) -> None:
        super().__init__(Failure(error))

    @property
    def error(self) -> E:
        return self._state.error  # type: ignore[union-attr]

    def __reduce__(self) -> tuple[type[Err[E]], tuple[E]]:
        return (Err, (self.error,))
