"""Flowcase - Minimal asynchronous control flow for callback-style tasks.

Three combinators coordinate tasks that report through a trailing
``callback(error=None, value=None)``:

    - serial: run tasks in order, threading each value into the next
    - parallel: start every task at once, join on their completion
    - map: apply an iteratee to every value concurrently, order preserved

The outer ``done(error, value)`` fires exactly once per call. The first
reported failure wins, and siblings already running are never cancelled.

Quick Start:
    >>> from flowcase import serial, parallel, map
    >>>
    >>> def fetch(next):
    ...     next(None, "data")
    >>> def parse(data, next):
    ...     next(None, data.upper())
    >>> serial([fetch, parse], lambda err, value: print(err, value))
    None DATA
    >>>
    >>> map([1, 2, 3], lambda x, next: next(None, x * 2), lambda err, value: print(value))
    [2, 4, 6]

Asyncio:
    >>> from flowcase import map_async, wait_callback
    >>> results = await map_async(fetch_json, urls)
    >>> value = await wait_callback(serial, [fetch, parse])

Configuration (environment):
    FLOWCASE_FLOW_STRICT_CALLBACKS=false   # ignore duplicate task callbacks
    FLOWCASE_LOG_LEVEL=DEBUG               # log combinator lifecycle
"""

from __future__ import annotations

__version__ = "0.1.0"

# Combinators
from .runtime.flow import (
    Accumulator,
    Join,
    Latch,
    TaskCallback,
    map,
    map_async,
    parallel,
    parallel_async,
    serial,
    serial_async,
    wait_callback,
)

# Errors
from .foundation.errors import (
    CallbackAlreadyCalled,
    Err,
    ErrorCode,
    Failure,
    FlowError,
    FlowException,
    InvalidTaskError,
    Ok,
    Result,
    TaskFailed,
)

# Config
from .foundation.config import FlowcaseSettings, clear_settings_cache, get_settings

# Logging
from .runtime.observability import configure_from_settings, configure_logging, get_logger

__all__ = [
    "__version__",
    # Callback combinators
    "serial",
    "parallel",
    "map",
    # Awaitable combinators
    "serial_async",
    "parallel_async",
    "map_async",
    "wait_callback",
    # Guards
    "Join",
    "Latch",
    "Accumulator",
    "TaskCallback",
    # Errors
    "ErrorCode",
    "FlowError",
    "FlowException",
    "InvalidTaskError",
    "CallbackAlreadyCalled",
    "TaskFailed",
    "Result",
    "Ok",
    "Err",
    "Failure",
    # Config
    "FlowcaseSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
