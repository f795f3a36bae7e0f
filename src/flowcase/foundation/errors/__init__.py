"""Unified error handling for flowcase.

- ErrorCode: Standard error codes for flow failures
- FlowError/FlowException: Structured errors and exceptions
- Result/Ok/Err: Monadic task outcomes, with Failure for reported errors
"""

from .errors import CallbackAlreadyCalled, ErrorCode, FlowError, FlowException, InvalidTaskError, TaskFailed
from .result import Err, Failure, Ok, Outcome, Result, completion, sequence, to_callback_args
from .types import JsonDict, JsonValue

__all__ = [
    # Core errors
    "ErrorCode", "FlowError", "FlowException", "InvalidTaskError", "CallbackAlreadyCalled", "TaskFailed",
    # Result monad
    "Result", "Ok", "Err", "Failure", "Outcome", "completion", "to_callback_args", "sequence",
    # Type aliases
    "JsonDict", "JsonValue",
]
