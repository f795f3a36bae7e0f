"""Flow combinators over callback-style and awaitable tasks.

Callback API (``done(error, value)`` fires exactly once):
    - serial: run tasks in order, threading each value into the next
    - parallel: start all tasks, join on completion, first failure wins
    - map: apply an iteratee to every value concurrently, order preserved

Awaitable API:
    - serial_async, parallel_async, map_async

Interop:
    - wait_callback: await any callback-style function
"""

from __future__ import annotations

from .aio import map_async, parallel_async, serial_async
from .control import Join, map, parallel, serial
from .guard import Accumulator, Latch, TaskCallback
from .interop import wait_callback

__all__ = [
    # Callback combinators
    "serial",
    "parallel",
    "map",
    # Awaitable combinators
    "serial_async",
    "parallel_async",
    "map_async",
    # Interop
    "wait_callback",
    # Guards
    "Join",
    "Latch",
    "Accumulator",
    "TaskCallback",
]
