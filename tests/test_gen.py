"""Tests for the synchronous generator interpreter (gen and gen_adapter)."""

import pytest

from hybrid_result import (
    Err,
    Nothing,
    Ok,
    Option,
    PendingStateError,
    Result,
    Some,
    UnwrappedNone,
    override_settings,
)


def frame_names(error):
    names = []
    tb = error.__traceback__
    while tb is not None:
        names.append(tb.tb_frame.f_code.co_name)
        tb = tb.tb_next
    return names


class TestResultGen:
    """Tests for Result.gen."""

    def test_returns_ok_of_return_value(self):
        """A generator that finishes produces Ok of its return value."""

        def compute():
            a = yield from Ok(1)
            b = yield from Ok(2)
            return a + b

        assert Result.gen(compute) == Ok(3)

    def test_stops_at_first_err(self):
        """The first Err is the outcome and later steps never run."""
        calls = []

        def third(x):
            calls.append(x)
            return x

        def compute():
            a = yield from Ok(1)
            b = yield from Err('boom')
            c = yield from Ok(2).map(third)
            return a + b + c

        assert Result.gen(compute) == Err('boom')
        assert calls == []

    def test_code_after_failing_yield_never_runs(self):
        """Statements after the failing yield do not execute."""
        reached = []

        def compute():
            yield from Err('stop')
            reached.append('after')
            return 1

        Result.gen(compute)
        assert reached == []

    def test_finally_runs_on_short_circuit(self):
        """The generator is closed so cleanup code runs."""
        cleaned = []

        def compute():
            try:
                yield from Err('stop')
            finally:
                cleaned.append('closed')

        assert Result.gen(compute) == Err('stop')
        assert cleaned == ['closed']

    def test_raw_yield_of_container(self):
        """Yielding a container without yield from also unwraps it."""

        def compute():
            x = yield Ok(5)
            return x * 2

        assert Result.gen(compute) == Ok(10)

    def test_plain_values_are_sent_back(self):
        """Non-container yields are sent back unchanged."""

        def compute():
            x = yield 5
            y = yield 'text'
            return (x, y)

        assert Result.gen(compute) == Ok((5, 'text'))

    def test_passes_arguments(self):
        """Extra arguments reach the generator function."""

        def compute(base, *, factor):
            value = yield from Ok(base)
            return value * factor

        assert Result.gen(compute, 3, factor=4) == Ok(12)

    def test_empty_generator(self):
        """A generator that never yields succeeds with its return value."""

        def compute():
            return 'done'
            yield  # pragma: no cover

        assert Result.gen(compute) == Ok('done')

    def test_ten_thousand_yields(self):
        """The interpreter is a loop and does not grow the stack."""

        def compute():
            total = 0
            for i in range(10_000):
                total += yield from Ok(i)
            return total

        assert Result.gen(compute) == Ok(sum(range(10_000)))

    def test_user_exception_propagates(self):
        """An exception raised by the generator itself is not swallowed."""

        def compute():
            yield from Ok(1)
            raise KeyError('user bug')

        with pytest.raises(KeyError):
            Result.gen(compute)

    @pytest.mark.filterwarnings('ignore:coroutine .* was never awaited:RuntimeWarning')
    def test_pending_yield_raises(self):
        """A pending container cannot be unwrapped synchronously."""
        cleaned = []

        async def later(x):
            return x

        def compute():
            try:
                yield from Ok(1).map(later)
            finally:
                cleaned.append('closed')

        with pytest.raises(PendingStateError):
            Result.gen(compute)
        assert cleaned == ['closed']

    def test_awaitable_yield_raises(self):
        """A raw awaitable cannot be unwrapped synchronously."""

        async def later():
            return Ok(1)

        def compute():
            yield later()

        with pytest.raises(PendingStateError):
            Result.gen(compute)


class TestResultGenAdapter:
    """Tests for Result.gen_adapter."""

    def test_adapter_unwraps(self):
        """The adapter wraps containers for yield and yield from."""

        def compute(_):
            a = yield from _(Ok(1))
            b = yield _(Ok(2))
            return a + b

        assert Result.gen_adapter(compute) == Ok(3)

    def test_adapter_short_circuits(self):
        """The adapter path stops at the first Err."""
        calls = []

        def compute(_):
            yield from _(Err('bad'))
            calls.append('after')

        assert Result.gen_adapter(compute) == Err('bad')
        assert calls == []

    def test_adapter_receives_extra_arguments(self):
        """Extra arguments follow the adapter."""

        def compute(_, offset):
            value = yield from _(Ok(1))
            return value + offset

        assert Result.gen_adapter(compute, 10) == Ok(11)


class TestTraceSplicing:
    """Tests for rewriting the traceback of a failing yield's exception."""

    def test_traceback_starts_at_yield(self):
        """An exception payload points at the yielding generator."""

        def compute():
            yield from Err(ValueError('bad'))

        error = Result.gen(compute).unwrap_err()
        assert frame_names(error) == ['compute']

    def test_library_frames_are_removed(self):
        """Frames inside the library are dropped, user frames kept."""

        def parse():
            raise ValueError('cannot parse')

        def compute():
            yield from Result.try_catch(parse)

        error = Result.gen(compute).unwrap_err()
        assert frame_names(error) == ['compute', 'parse']

    def test_adapter_site(self):
        """The adapter records the line that called it."""

        def compute(_):
            yield _(Err(RuntimeError('adapted')))

        error = Result.gen_adapter(compute).unwrap_err()
        assert frame_names(error) == ['compute']

    def test_disabled_capture(self):
        """With capture disabled the traceback is untouched."""

        def compute():
            yield from Err(ValueError('bad'))

        with override_settings(capture_traces=False):
            error = Result.gen(compute).unwrap_err()
        assert error.__traceback__ is None

    def test_non_exception_payload_untouched(self):
        """Plain payloads are returned as-is."""

        def compute():
            yield from Err('plain')

        assert Result.gen(compute) == Err('plain')


class TestOptionGen:
    """Tests for Option.gen and Option.gen_adapter."""

    def test_some_values(self):
        """Some values are unwrapped into the generator."""

        def compute():
            a = yield from Some(2)
            b = yield from Some(3)
            return a * b

        assert Option.gen(compute) == Some(6)

    def test_nothing_short_circuits(self):
        """The first Nothing stops the generator."""
        calls = []

        def compute():
            a = yield from Some(1)
            yield from Nothing
            calls.append(a)
            return a

        assert Option.gen(compute) is Nothing
        assert calls == []

    def test_return_none_is_some(self):
        """Returning None gives Some(None)."""

        def compute():
            yield from Some(1)

        assert Option.gen(compute) == Some(None)

    def test_adapter(self):
        """gen_adapter works for options."""

        def compute(_):
            value = yield from _(Some('x'))
            return value.upper()

        assert Option.gen_adapter(compute) == Some('X')

    def test_ten_thousand_yields(self):
        """Option generators are stack safe too."""

        def compute():
            count = 0
            for _ in range(10_000):
                count += yield from Some(1)
            return count

        assert Option.gen(compute) == Some(10_000)


class TestCrossKindYields:
    """Tests for yielding the other container kind."""

    def test_nothing_fails_result_generator(self):
        """A Nothing in a Result generator fails it with UnwrappedNone."""
        calls = []

        def compute():
            a = yield from Ok(1)
            b = yield from Nothing
            calls.append(b)
            return a

        outcome = Result.gen(compute)
        assert outcome.is_err()
        assert isinstance(outcome.unwrap_err(), UnwrappedNone)
        assert calls == []

    def test_some_feeds_result_generator(self):
        """A Some in a Result generator gives its value."""

        def compute():
            a = yield from Ok(1)
            b = yield from Some(2)
            return a + b

        assert Result.gen(compute) == Ok(3)

    def test_err_ends_option_generator(self):
        """An Err in an Option generator ends it as Nothing."""
        calls = []

        def compute():
            a = yield from Err('e')
            calls.append(a)
            return a

        assert Option.gen(compute) is Nothing
        assert calls == []

    def test_ok_feeds_option_generator(self):
        """An Ok in an Option generator gives its value."""

        def compute():
            a = yield from Some(2)
            b = yield from Ok(5)
            return a * b

        assert Option.gen(compute) == Some(10)
