"""Decorators: @do, @safe and their async variants."""

from hybrid_result.decorators.do import do, do_async
from hybrid_result.decorators.safe import safe, safe_async

__all__ = [
    'do',
    'do_async',
    'safe',
    'safe_async',
]
