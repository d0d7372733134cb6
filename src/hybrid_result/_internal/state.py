"""Container state: settled outcomes and memoised pending computations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator
from typing import Any

import anyio
import msgspec

from hybrid_result.errors import PendingStateError

__all__ = ['Failure', 'Pending', 'Settled', 'State', 'Step', 'Success']


class Success[T](msgspec.Struct, frozen=True):
    """Settled successful outcome."""

    value: T


class Failure[E](msgspec.Struct, frozen=True):
    """Settled failed outcome."""

    error: E


type Settled = Success[Any] | Failure[Any]
type State = Settled | Pending
type Step = Callable[[Settled], State]


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Pending:
    """A computation that settles later, run at most once.

    A node is either a source (wrapping an awaitable that produces a
    `Settled`) or a step chained on a parent node. Resolution walks the
    unresolved lineage with a loop and settles it from the oldest node
    forward, so long chains of steps never nest awaits. Every node memoises
    its outcome: siblings chained on the same parent run the parent once.

    The awaited work of a node belongs to the node, not to whichever task
    awaits it first. On asyncio it runs in a task of its own; elsewhere in a
    shielded cancel scope. Cancelling one awaiter cancels only its wait, and
    the others still receive the outcome. Only `Exception` outcomes are
    memoised.
    """

    __slots__ = ('_event', '_failure', '_outcome', '_parent', '_source', '_step', '_task')

    def __init__(
        self,
        source: Awaitable[Settled] | None = None,
        *,
        parent: Pending | None = None,
        step: Step | None = None,
    ) -> None:
        if (source is None) == (parent is None):
            raise ValueError('Pending needs either a source or a parent')
        if parent is not None and step is None:
            raise ValueError('Pending with a parent needs a step')
        self._source = source
        self._parent = parent
        self._step = step
        self._outcome: Settled | None = None
        self._failure: Exception | None = None
        self._event: anyio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def done(self) -> bool:
        return self._outcome is not None or self._failure is not None

    def __await__(self) -> Generator[Any, Any, Settled]:
        return self.resolve().__await__()

    async def resolve(self) -> Settled:
        """Settle this node and every unresolved ancestor."""
        lineage: list[Pending] = []
        node: Pending | None = self
        while node is not None and not node.done:
            lineage.append(node)
            node = node._parent
        upstream = node._result() if node is not None else None
        for pending in reversed(lineage):
            upstream = await pending._settle(upstream)
        return self._result()

    def _result(self) -> Settled:
        if self._failure is not None:
            raise self._failure
        if self._outcome is None:
            raise PendingStateError('reading a computation that was interrupted before it settled')
        return self._outcome

    async def _settle(self, upstream: Settled | None) -> Settled:
        if self.done:
            return self._result()
        if self._event is None:
            if self._source is None:
                self._advance(upstream)
                if self.done:
                    return self._result()
            event = self._event = anyio.Event()
            loop = _running_loop()
            if loop is not None:
                self._task = loop.create_task(self._run(event))
            else:
                with anyio.CancelScope(shield=True):
                    await self._run(event)
        # a cancelled awaiter stops here; the work keeps going for the others
        await self._event.wait()
        return self._result()

    def _advance(self, upstream: Settled | None) -> None:
        """Apply the step to the parent's outcome.

        A settled return settles the node at once. A pending return becomes
        the node's source, so the step itself never runs twice.
        """
        step = self._step
        if step is None or upstream is None:
            raise PendingStateError('settling a step without a settled parent')
        try:
            outcome = step(upstream)
        except Exception as exc:  # noqa: BLE001
            self._failure = exc
        else:
            if isinstance(outcome, Pending):
                self._source = outcome
            else:
                self._outcome = outcome
        self._parent = self._step = None

    async def _run(self, event: anyio.Event) -> None:
        source = self._source
        try:
            outcome = await source  # type: ignore[misc]
        except Exception as exc:  # noqa: BLE001
            self._failure = exc
        else:
            self._outcome = outcome
        finally:
            if self.done:
                self._source = None
            self._task = None
            event.set()

    def __repr__(self) -> str:
        if self._outcome is not None:
            return f'Pending(settled={self._outcome!r})'
        return 'Pending(<unsettled>)'
