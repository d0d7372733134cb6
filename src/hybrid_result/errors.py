"""Misuse errors raised by containers.

Domain failures travel as `Err` payloads or `Nothing` and are never raised.
The classes here signal a logic bug at the call site: unwrapping the wrong
branch, inspecting a pending container synchronously, or calling
`inner_map` on a non-sequence.
"""

from __future__ import annotations

__all__ = [
    'HybridResultError',
    'NotASequenceError',
    'PendingStateError',
    'UnwrapError',
    'UnwrappedErrWithOk',
    'UnwrappedNone',
    'UnwrappedOkWithErr',
]


class HybridResultError(Exception):
    """Base class for every exception raised by hybrid_result."""


class UnwrapError(HybridResultError, RuntimeError):
    """Extraction was attempted on the wrong branch of a container."""

    def __init__(self, message: str, container: str | None = None) -> None:
        self.container = container
        super().__init__(message)


class UnwrappedOkWithErr(UnwrapError):
    """`unwrap()` called on an Err whose payload is not an exception."""

    def __init__(self, container: str) -> None:
        super().__init__(f'Attempted to call unwrap on an Err result: {container}', container)


class UnwrappedErrWithOk(UnwrapError):
    """`unwrap_err()` called on an Ok."""

    def __init__(self, container: str) -> None:
        super().__init__(f'Attempted to call unwrap_err on an Ok result: {container}', container)


class UnwrappedNone(UnwrapError):
    """`unwrap()` called on Nothing.

    Also used as the error payload when a `Flow` generator yields Nothing.
    """

    def __init__(self) -> None:
        super().__init__('Attempted to unwrap Option::None', 'Nothing')

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UnwrappedNone)

    def __hash__(self) -> int:
        return hash(UnwrappedNone)


class PendingStateError(HybridResultError, RuntimeError):
    """A pending container was used where a settled one is required."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f'{operation} requires a settled container; await it first')


class NotASequenceError(HybridResultError, TypeError):
    """`inner_map` called on a success value that is not a list or tuple."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f'inner_map can only be called on a list or tuple value, got {type(value).__name__}')
