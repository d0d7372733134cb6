"""Tests for Flow (mixed Option/Result generators) and the free match helpers."""

import anyio
import pytest

from hybrid_result import (
    Err,
    Flow,
    Nothing,
    Ok,
    PendingStateError,
    Some,
    UnwrappedNone,
    match_option,
    match_result,
)


def find_user(user_id):
    users = {1: 'ada', 2: 'grace'}
    return Some(users[user_id]) if user_id in users else Nothing


def parse_age(text):
    return Ok(int(text)) if text.isdigit() else Err(f'not a number: {text}')


class TestFlowGen:
    """Tests for Flow.gen."""

    def test_mixed_kinds(self):
        """Options and Results can be yielded in one generator."""

        def compute():
            name = yield from find_user(1)
            age = yield from parse_age('36')
            return f'{name}:{age}'

        assert Flow.gen(compute) == Ok('ada:36')

    def test_nothing_becomes_unwrapped_none(self):
        """A yielded Nothing ends the flow with Err(UnwrappedNone())."""

        def compute():
            name = yield from find_user(99)
            return name

        outcome = Flow.gen(compute)
        assert outcome.is_err()
        assert isinstance(outcome.unwrap_err(), UnwrappedNone)
        assert outcome == Err(UnwrappedNone())

    def test_err_is_kept(self):
        """A yielded Err ends the flow with that Err."""

        def compute():
            yield from find_user(2)
            age = yield from parse_age('old')
            return age

        assert Flow.gen(compute) == Err('not a number: old')

    def test_adapter(self):
        """gen_adapter passes the adapter first."""

        def compute(_, user_id):
            name = yield _(find_user(user_id))
            return name.title()

        assert Flow.gen_adapter(compute, 2) == Ok('Grace')

    def test_outcome_is_result_even_without_results(self):
        """A flow of Options still produces a Result."""

        def compute():
            value = yield from Some(1)
            return value

        assert Flow.gen(compute) == Ok(1)


class TestFlowAsyncGen:
    """Tests for Flow.async_gen."""

    @pytest.mark.asyncio
    async def test_mixed_awaitables(self):
        """Awaitables of either kind are awaited and unwrapped."""

        async def load_user(user_id):
            await anyio.sleep(0)
            return find_user(user_id)

        async def compute():
            name = yield load_user(1)
            age = yield parse_age('36')
            yield (name, age)

        assert await Flow.async_gen(compute) == Ok(('ada', 36))

    @pytest.mark.asyncio
    async def test_nothing_short_circuits(self):
        """An awaited Nothing ends the flow."""

        async def compute():
            yield Nothing
            pytest.fail('continued after Nothing')

        assert await Flow.async_gen(compute) == Err(UnwrappedNone())

    @pytest.mark.asyncio
    async def test_adapter(self):
        """async_gen_adapter passes the adapter first."""

        async def compute(_):
            name = yield _(find_user(2))
            yield name.upper()

        assert await Flow.async_gen_adapter(compute) == Ok('GRACE')


class TestMatchResult:
    """Tests for match_result."""

    def test_ok_branch(self):
        """The ok handler receives the value."""
        assert match_result(Ok(2), ok=lambda v: v * 10, err=lambda e: pytest.fail('err called')) == 20

    def test_err_branch(self):
        """The err handler receives the payload."""
        assert match_result(Err('boom'), ok=str, err=len) == 4

    @pytest.mark.asyncio
    async def test_pending_raises(self):
        """A pending result must be awaited first."""

        async def later(x):
            return x

        pending = Ok(1).map(later)
        with pytest.raises(PendingStateError):
            match_result(pending, ok=str, err=str)
        assert await pending == Ok(1)


class TestMatchOption:
    """Tests for match_option."""

    def test_some_branch(self):
        """The some handler receives the value."""
        assert match_option(Some('x'), some=str.upper, none=lambda: '') == 'X'

    def test_none_branch(self):
        """The none handler takes no arguments."""
        assert match_option(Nothing, some=str.upper, none=lambda: 'empty') == 'empty'

    @pytest.mark.asyncio
    async def test_pending_raises(self):
        """A pending option must be awaited first."""

        async def later(x):
            return x

        pending = Some(1).map(later)
        with pytest.raises(PendingStateError):
            match_option(pending, some=str, none=str)
        assert await pending == Some(1)
