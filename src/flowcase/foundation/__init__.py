"""Foundation - Core building blocks for flowcase.

Contains: error handling, configuration, testing.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrorCode", "FlowError", "FlowException", "InvalidTaskError", "CallbackAlreadyCalled", "TaskFailed",
    "Result", "Ok", "Err", "Failure", "Outcome", "completion", "to_callback_args", "sequence",
    # Config
    "FlowcaseSettings", "FlowSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    # Testing
    "Call", "Spy",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrorCode", "FlowError", "FlowException", "InvalidTaskError", "CallbackAlreadyCalled", "TaskFailed",
                "Result", "Ok", "Err", "Failure", "Outcome", "completion", "to_callback_args", "sequence"):
        from . import errors
        return getattr(errors, name)

    if name in ("FlowcaseSettings", "FlowSettings", "LoggingSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    if name in ("Call", "Spy"):
        from . import testing
        return getattr(testing, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
