"""Bridge callback-style functions into asyncio.

wait_callback() calls a function with a trailing ``callback(error, value)``
and suspends until that callback fires. The callback may be invoked
synchronously, later on the loop, or from another thread.

Example:
    >>> from flowcase import serial, wait_callback
    >>> result = await wait_callback(serial, [fetch, parse])
"""

from __future__ import annotations

import asyncio
from typing import Callable

from flowcase.foundation.errors import TaskFailed


async def wait_callback(fn: Callable[..., None], *args: object) -> object:
    """Call ``fn(*args, callback)`` and await the value it reports.

    Returns:
        The value passed as ``callback(None, value)``

    Raises:
        BaseException: The reported error, if it is an exception instance
        TaskFailed: For StopIteration and any non-exception error; keeps
            ``reason`` and ``value``
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[object] = loop.create_future()

    def callback(error: object = None, value: object = None) -> None:
        loop.call_soon_threadsafe(_settle, future, error, value)

    fn(*args, callback)
    return await future


def _settle(future: asyncio.Future[object], error: object, value: object) -> None:
    if future.done():
        return
    if error is None:
        future.set_result(value)
    elif isinstance(error, BaseException) and not isinstance(error, StopIteration):
        future.set_exception(error)
    else:
        # Futures refuse StopIteration
        future.set_exception(TaskFailed(error, value))
