"""Library configuration: Settings, the error mapper, and scoped overrides.

Settings live in a context variable rather than a module global, so a task
can install its own error mapper without affecting chains running in other
tasks. Outside of any override every context sees the process defaults.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from hybrid_result._logging import configure_logging, get_logger

__all__ = [
    'ErrorMapper',
    'Settings',
    'configure',
    'get_settings',
    'identity_mapper',
    'map_error',
    'override_settings',
    'reset_error_mapper',
    'reset_settings',
    'set_error_mapper',
]

_log = get_logger(__name__)

type ErrorMapper = Callable[[Any], Any]

_CAPTURE_TRACES_ENV = 'HYBRID_RESULT_CAPTURE_TRACES'
_TRUTHY = ('1', 'true', 'yes', 'on')
_FALSY = ('0', 'false', 'no', 'off')


def identity_mapper(error: Any) -> Any:
    """Default error mapper: return the caught exception unchanged."""
    return error


def _detect_capture_traces() -> bool:
    """Read the trace-capture default from the environment.

    HYBRID_RESULT_CAPTURE_TRACES accepts 1/0, true/false, yes/no, on/off.
    Unset means enabled.
    """
    raw = os.environ.get(_CAPTURE_TRACES_ENV, '').strip().lower()
    if not raw or raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    _log.warning('unknown_env_value', variable=_CAPTURE_TRACES_ENV, value=raw, fallback=True)
    return True


@dataclass(frozen=True)
class Settings:
    """Configuration consulted by containers and the generator interpreter.

    Attributes:
        error_mapper: Applied to every implicitly caught exception before it
            becomes an Err payload.
        capture_traces: Whether failing yields rewrite the error's traceback
            to point at the yielding line.
        log_level: Logging level applied through `configure_logging` when set
            via `configure`. None leaves logging untouched.
    """

    error_mapper: ErrorMapper = identity_mapper
    capture_traces: bool = True
    log_level: str | None = None


_DEFAULTS = Settings(capture_traces=_detect_capture_traces())
_settings: ContextVar[Settings] = ContextVar('hybrid_result_settings', default=_DEFAULTS)


def get_settings() -> Settings:
    """Return the settings active in the current context."""
    return _settings.get()


def configure(**changes: Any) -> Settings:
    """Replace fields of the active settings.

    Args:
        **changes: Settings fields to replace.

    Returns:
        The new active Settings.

    Example:
        ```python
        configure(error_mapper=lambda e: str(e), log_level='DEBUG')
        ```
    """
    settings = replace(_settings.get(), **changes)
    _settings.set(settings)
    if 'log_level' in changes and settings.log_level is not None:
        configure_logging(settings.log_level)
    _log.debug('settings_configured', fields=sorted(changes))
    return settings


def reset_settings() -> None:
    """Restore the process defaults in the current context."""
    _settings.set(_DEFAULTS)
    _log.debug('settings_reset')


def set_error_mapper(mapper: ErrorMapper) -> None:
    """Install the function applied to implicitly caught exceptions."""
    configure(error_mapper=mapper)


def reset_error_mapper() -> None:
    """Restore the identity error mapper."""
    configure(error_mapper=identity_mapper)


def map_error(error: Any) -> Any:
    """Apply the active error mapper."""
    return _settings.get().error_mapper(error)


@contextmanager
def override_settings(**changes: Any) -> Iterator[Settings]:
    """Temporarily replace settings for the enclosed block.

    Example:
        ```python
        with override_settings(error_mapper=str):
            assert Result.try_catch(lambda: 1 / 0) == Err('division by zero')
        ```
    """
    token = _settings.set(replace(_settings.get(), **changes))
    try:
        yield _settings.get()
    finally:
        _settings.reset(token)
