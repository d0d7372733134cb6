"""Call-site capture for yielded containers.

When a failing container reaches the interpreter, the error it carries was
usually created far away from the line that yielded it. If the yield site was
captured, the error's traceback is rebuilt so that it starts at that line and
keeps only frames outside this package. Best effort: any failure to rebuild
leaves the traceback untouched.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Generator
from types import FrameType, TracebackType
from typing import Any

import msgspec

from hybrid_result._logging import get_logger
from hybrid_result.config import get_settings

__all__ = ['Adapted', 'CallSite', 'Traced', 'adapt', 'capture', 'splice', 'strip']

_log = get_logger(__name__)

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep


class CallSite(msgspec.Struct, frozen=True):
    """Frame and position of a yield in user code."""

    frame: FrameType
    lineno: int
    lasti: int


def capture(depth: int = 1) -> CallSite | None:
    """Capture the frame `depth` levels above the caller.

    Returns None when trace capture is disabled in the active settings.
    """
    if not get_settings().capture_traces:
        return None
    frame = sys._getframe(depth + 1)  # noqa: SLF001
    return CallSite(frame, frame.f_lineno, frame.f_lasti)


class Traced(msgspec.Struct, frozen=True):
    """A container yielded through ``yield from``, with its yield site."""

    target: Any
    site: CallSite | None


class Adapted(msgspec.Struct, frozen=True):
    """A container (or awaitable of one) passed through a generator adapter."""

    target: Any
    site: CallSite | None

    def __iter__(self) -> Generator[Adapted, Any, Any]:
        return (yield self)


def adapt(target: Any) -> Adapted:
    """Adapter handed to ``gen_adapter`` style generator functions."""
    return Adapted(target, capture(1))


def strip(item: Any) -> tuple[Any, CallSite | None]:
    """Remove yield wrappers, returning the target and the first captured site."""
    site: CallSite | None = None
    while isinstance(item, Traced | Adapted):
        if site is None:
            site = item.site
        item = item.target
    return item, site


def _is_internal(frame: FrameType) -> bool:
    return os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR)


def splice(error: object, site: CallSite | None) -> None:
    """Rebuild `error.__traceback__` to start at `site`."""
    if site is None or not isinstance(error, BaseException):
        return
    try:
        kept: list[TracebackType] = []
        tb = error.__traceback__
        while tb is not None:
            if not _is_internal(tb.tb_frame):
                kept.append(tb)
            tb = tb.tb_next
        rebuilt: TracebackType | None = None
        for entry in reversed(kept):
            rebuilt = TracebackType(rebuilt, entry.tb_frame, entry.tb_lasti, entry.tb_lineno)
        error.__traceback__ = TracebackType(rebuilt, site.frame, site.lasti, site.lineno)
    except (TypeError, ValueError) as exc:
        _log.debug('trace_splice_failed', error_type=type(error).__name__, reason=str(exc))
