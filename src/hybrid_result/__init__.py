"""hybrid-result: Result and Option containers that are sync until they are not.

Containers stay synchronous while every transform returns a plain value and
become awaitable as soon as one returns an awaitable, with a single
combinator API in both states. Generator do-notation (`Result.gen`,
`Option.gen`, `Flow.gen` and their async variants) short-circuits on the
first failure.

Flat imports (preferred):
    from hybrid_result import Result, Ok, Err, Option, Some, Nothing
    from hybrid_result import Flow, do, safe, configure

Submodule imports (for organization):
    from hybrid_result.result import Ok, Err, Result
    from hybrid_result.option import Some, Nothing, Option
    from hybrid_result.decorators import do, safe
"""

# Configuration
from hybrid_result._logging import add_log_hook, clear_log_hooks, configure_logging, get_logger, remove_log_hook
from hybrid_result.config import (
    Settings,
    configure,
    get_settings,
    identity_mapper,
    map_error,
    override_settings,
    reset_error_mapper,
    reset_settings,
    set_error_mapper,
)

# Decorators
from hybrid_result.decorators import do, do_async, safe, safe_async

# Errors
from hybrid_result.errors import (
    HybridResultError,
    NotASequenceError,
    PendingStateError,
    UnwrapError,
    UnwrappedErrWithOk,
    UnwrappedNone,
    UnwrappedOkWithErr,
)

# Flow and matching
from hybrid_result.flow import Flow
from hybrid_result.match import match_option, match_result

# Types
from hybrid_result.option import Nothing, NothingType, Option, Some
from hybrid_result.result import Err, Ok, Result
from hybrid_result.unit import UNIT, UnitType

__all__ = [
    # Types
    'UNIT',
    'Err',
    # Flow and matching
    'Flow',
    # Errors
    'HybridResultError',
    'NotASequenceError',
    'Nothing',
    'NothingType',
    'Ok',
    'Option',
    'PendingStateError',
    'Result',
    # Configuration
    'Settings',
    'Some',
    'UnitType',
    'UnwrapError',
    'UnwrappedErrWithOk',
    'UnwrappedNone',
    'UnwrappedOkWithErr',
    'add_log_hook',
    'clear_log_hooks',
    'configure',
    'configure_logging',
    # Decorators
    'do',
    'do_async',
    'get_logger',
    'get_settings',
    'identity_mapper',
    'map_error',
    'match_option',
    'match_result',
    'override_settings',
    'remove_log_hook',
    'reset_error_mapper',
    'reset_settings',
    'safe',
    'safe_async',
    'set_error_mapper',
]

__version__ = '0.1.0'
