"""Awaitable counterparts of serial, parallel and map.

Tasks are coroutine functions and fail by raising. The guarantees match
the callback API:
    - serial_async: strict sequencing, first exception stops the chain
    - parallel_async / map_async: everything is scheduled at once, the first
      exception (in completion order) is raised as soon as it is known,
      siblings are NOT cancelled and keep running in the background

Late outcomes of siblings are retrieved and absorbed by the Join, so they
never surface as "Task exception was never retrieved" warnings.

Example:
    >>> async def double(x: int) -> int:
    ...     await asyncio.sleep(0.01)
    ...     return x * 2
    >>> await map_async(double, [1, 2, 3])
    [2, 4, 6]
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from .control import Join, _flow_logger, _materialise_tasks, _require_callable

T = TypeVar("T")
U = TypeVar("U")


async def serial_async(steps: Iterable[Callable[..., Awaitable[object]]]) -> object:
    """Await steps one after another, feeding each result into the next.

    The first step is awaited as ``step()``, later ones as
    ``step(previous)``. Returns the last result, or ``[]`` for no steps.

    Raises:
        Exception: The first exception raised by a step; later steps never start
        InvalidTaskError: If a step is not callable
    """
    fns = _materialise_tasks("serial_async", steps)
    if not fns:
        return []
    log = _flow_logger("serial_async", len(fns))
    value = await fns[0]()
    for fn in fns[1:]:
        value = await fn(value)
    log.debug("completed")
    return value


async def parallel_async(tasks: Iterable[Callable[[], Awaitable[T]]]) -> list[T]:
    """Run every task concurrently; results aligned with ``tasks``.

    Raises:
        Exception: The first exception raised, as soon as it happens
        InvalidTaskError: If a task is not callable
    """
    fns = _materialise_tasks("parallel_async", tasks)
    if not fns:
        return []
    return await _join("parallel_async", fns)


async def map_async(func: Callable[[T], Awaitable[U]], items: Iterable[T]) -> list[U]:
    """Apply ``func`` to every item concurrently; results aligned with ``items``.

    ``func`` is called once per item, in input order, before anything is
    awaited. There is no concurrency limit.

    Raises:
        Exception: The first exception raised, as soon as it happens
        InvalidTaskError: If ``func`` is not callable
    """
    _require_callable("map_async", "func", func)
    values = list(items)
    if not values:
        return []
    return await _join("map_async", [functools.partial(func, v) for v in values])


async def _join(combinator: str, starts: list[Callable[[], Awaitable[T]]]) -> list[T]:
    """Schedule each awaitable as soon as it is created and join on them.

    If creating one raises, the ones already scheduled keep running with
    their outcomes absorbed, and the exception propagates.
    """
    loop = asyncio.get_running_loop()
    outer: asyncio.Future[list[T]] = loop.create_future()

    def resolve(error: object, value: object) -> None:
        if outer.done():
            return  # awaiting caller was cancelled
        if isinstance(error, asyncio.CancelledError):
            outer.cancel()
        elif error is not None:
            outer.set_exception(error)  # type: ignore[arg-type]
        else:
            outer.set_result(value)  # type: ignore[arg-type]

    join = Join(combinator, len(starts), resolve, keep_failure_value=False)
    join.log.debug("started")
    for i, start in enumerate(starts):
        try:
            fut = asyncio.ensure_future(start())
        except BaseException:
            outer.cancel()
            raise
        fut.add_done_callback(functools.partial(_report, join.callback(i)))
    return await outer


def _report(callback: Callable[[object, object], None], fut: asyncio.Future[object]) -> None:
    if fut.cancelled():
        callback(asyncio.CancelledError(), None)
    elif (exc := fut.exception()) is not None:
        callback(exc, None)
    else:
        callback(None, fut.result())
