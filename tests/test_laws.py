"""Property-based tests for functor and monad laws, sync and async."""

import anyio
from hypothesis import given
from hypothesis import strategies as st

from hybrid_result import Err, Nothing, Ok, Option, Result, Some
from tests.strategies import integers, options, results


def half(x: int) -> Result[int, str]:
    return Ok(x // 2) if x % 2 == 0 else Err('odd')


def positive(x: int) -> Option[int]:
    return Some(x) if x > 0 else Nothing


async def double_later(x: int) -> int:
    await anyio.sleep(0)
    return x * 2


class TestResultFunctorLaws:
    """Functor laws for Result."""

    @given(results)
    def test_identity(self, m: Result[int, str]):
        """Identity: m.map(id) == m."""
        assert m.map(lambda x: x) == m

    @given(results)
    def test_composition(self, m: Result[int, str]):
        """Composition: m.map(f).map(g) == m.map(g . f)."""

        def f(x: int) -> int:
            return x + 1

        def g(x: int) -> str:
            return str(x)

        assert m.map(f).map(g) == m.map(lambda x: g(f(x)))

    @given(results)
    def test_map_err_identity(self, m: Result[int, str]):
        """map_err(id) leaves any result unchanged."""
        assert m.map_err(lambda e: e) == m

    @given(results)
    def test_flip_is_involution(self, m: Result[int, str]):
        """Flipping twice gives back the original."""
        assert m.flip().flip() == m


class TestResultMonadLaws:
    """Monad laws for Result."""

    @given(integers)
    def test_left_identity(self, value: int):
        """Left identity: Ok(a).flat_map(f) == f(a)."""
        assert Ok(value).flat_map(half) == half(value)

    @given(results)
    def test_right_identity(self, m: Result[int, str]):
        """Right identity: m.flat_map(Ok) == m."""
        assert m.flat_map(Ok) == m

    @given(results)
    def test_associativity(self, m: Result[int, str]):
        """Associativity: m.flat_map(f).flat_map(g) == m.flat_map(x => f(x).flat_map(g))."""
        left = m.flat_map(half).flat_map(half)
        right = m.flat_map(lambda x: half(x).flat_map(half))
        assert left == right


class TestOptionLaws:
    """Functor and monad laws for Option."""

    @given(options)
    def test_identity(self, m: Option[int]):
        """Identity: m.map(id) == m."""
        assert m.map(lambda x: x) == m

    @given(integers)
    def test_left_identity(self, value: int):
        """Left identity: Some(a).flat_map(f) == f(a)."""
        assert Some(value).flat_map(positive) == positive(value)

    @given(options)
    def test_right_identity(self, m: Option[int]):
        """Right identity: m.flat_map(Some) == m."""
        assert m.flat_map(Some) == m

    @given(options)
    def test_associativity(self, m: Option[int]):
        """Associativity holds for Option.flat_map."""

        def g(x: int) -> Option[str]:
            return Some(str(x)) if x % 3 else Nothing

        assert m.flat_map(positive).flat_map(g) == m.flat_map(lambda x: positive(x).flat_map(g))

    @given(options, st.booleans())
    def test_filter_matches_predicate(self, m: Option[int], keep: bool):
        """filter keeps Some exactly when the predicate holds."""
        filtered = m.filter(lambda _: keep)
        assert filtered == (m if keep else Nothing)


class TestAsyncEquivalence:
    """An async transform gives the same outcome once awaited."""

    @given(results)
    def test_result_map(self, m: Result[int, str]):
        """Awaiting m.map(async f) equals m.map(f)."""

        async def run() -> Result[int, str]:
            return await m.map(double_later)

        assert anyio.run(run) == m.map(lambda x: x * 2)

    @given(options)
    def test_option_map(self, m: Option[int]):
        """Awaiting an Option mapped asynchronously equals the sync map."""

        async def run() -> Option[int]:
            return await m.map(double_later)

        assert anyio.run(run) == m.map(lambda x: x * 2)

    @given(results)
    def test_result_flat_map(self, m: Result[int, str]):
        """An async step that returns a Result flattens like the sync one."""

        async def half_later(x: int) -> Result[int, str]:
            await anyio.sleep(0)
            return half(x)

        async def run() -> Result[int, str]:
            return await m.flat_map(half_later)

        assert anyio.run(run) == m.flat_map(half)
