"""Callback-style control flow: serial, parallel and map.

Every task follows the trailing-callback convention and reports through
``callback(error=None, value=None)``. ``error is None`` means success; any
other object is a failure and is handed to ``done`` untouched.

Each combinator calls ``done(error, value)`` exactly once per invocation,
including for empty input.

Fail-fast on report, not on execution:
    parallel() and map() start every task up front and never cancel them.
    When one task fails, ``done`` is called right away, but the siblings
    that are already running keep going. Their side effects may still happen
    after ``done`` has returned. Their completions are absorbed.

Exceptions raised synchronously by a task are not caught. They propagate to
whoever called the combinator (or invoked the callback), and in that case
``done`` is not called.

Example:
    >>> def fetch(next):
    ...     next(None, "data")
    >>> def parse(data, next):
    ...     next(None, data.upper())
    >>> serial([fetch, parse], lambda err, value: print(err, value))
    None DATA

    >>> map([1, 2, 3], lambda x, next: next(None, x * 2), lambda err, value: print(value))
    [2, 4, 6]
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Callable

from flowcase.foundation.config import get_settings
from flowcase.foundation.errors import Err, Failure, InvalidTaskError, Ok, Outcome, sequence
from flowcase.runtime.observability import BoundLogger, get_logger

from .guard import Accumulator, Done, Latch, TaskCallback

Callback = Callable[..., None]
Task = Callable[..., None]
Iteratee = Callable[[object, Callback], None]

_LOGGER_NAME = "flowcase.flow"


# ─────────────────────────────────────────────────────────────────────────────
# Shared helpers
# ─────────────────────────────────────────────────────────────────────────────


def _flow_logger(combinator: str, size: int) -> BoundLogger:
    return get_logger(_LOGGER_NAME).bind_flow(combinator, size)


def _require_callable(combinator: str, role: str, obj: object) -> None:
    if not callable(obj):
        raise InvalidTaskError.for_object(combinator, role, obj)


def _materialise_tasks(combinator: str, tasks: Iterable[Task]) -> list[Task]:
    items = list(tasks)
    for i, task in enumerate(items):
        _require_callable(combinator, f"task {i}", task)
    return items


class Join:
    """Fan-in for concurrently running tasks.

    Owns the Latch and Accumulator of one parallel()/map() invocation. Each
    task gets its own one-shot callback from callback(index). The first
    reported failure fires ``done`` immediately. Success fires once the last
    slot is filled. Anything that arrives after that is absorbed and logged.

    Args:
        combinator: Name used in logs and errors
        size: Number of tasks joined
        done: Outer ``done(error, value)`` callback
        keep_failure_value: Pass the failing task's value to done (map) or
            drop it (parallel)
    """

    __slots__ = ("_combinator", "_latch", "_acc", "_keep_failure_value", "_strict", "_log_absorbed", "_log")

    def __init__(
        self,
        combinator: str,
        size: int,
        done: Done,
        *,
        keep_failure_value: bool = True,
        log: BoundLogger | None = None,
    ) -> None:
        flow = get_settings().flow
        self._combinator = combinator
        self._latch = Latch(done)
        self._acc = Accumulator(size)
        self._keep_failure_value = keep_failure_value
        self._strict = flow.strict_callbacks
        self._log_absorbed = flow.log_absorbed
        self._log = log or _flow_logger(combinator, size)

    @property
    def latch(self) -> Latch:
        return self._latch

    @property
    def log(self) -> BoundLogger:
        return self._log

    @property
    def pending(self) -> int:
        """Tasks that have not reported yet."""
        return self._acc.remaining

    def callback(self, index: int) -> TaskCallback:
        return TaskCallback(index, self._settle, combinator=self._combinator, strict=self._strict, log=self._log)

    def _settle(self, index: int, outcome: Outcome) -> None:
        slots = self._acc.put(index, outcome)
        if self._latch.fired:
            self._absorbed(index, outcome)
            return
        if outcome.is_err():
            failure: Failure = outcome.unwrap_err()
            if not self._keep_failure_value:
                outcome = Err(Failure(failure.error))
            if self._latch.fire(outcome):
                self._log.debug("failed", task=index, error=repr(failure.error))
            else:
                self._absorbed(index, outcome)
        elif slots is not None:
            # A sibling's failure may not have reached the latch yet
            result = sequence(slots)
            if result.is_ok() and self._latch.fire(result):
                self._log.debug("completed")

    def _absorbed(self, index: int, outcome: Outcome) -> None:
        count = self._latch.absorb()
        if outcome.is_err() and self._log_absorbed:
            self._log.warning("late failure absorbed", task=index, error=repr(outcome.unwrap_err().error),
                              absorbed=count)
        else:
            self._log.debug("late completion absorbed", task=index, absorbed=count)


# ─────────────────────────────────────────────────────────────────────────────
# Serial
# ─────────────────────────────────────────────────────────────────────────────


class _Step:
    """Rendezvous between a running serial task and the driver loop.

    Whichever side arrives second owns continuing the chain: the driver if
    the task completed before returning, the callback otherwise.
    """

    __slots__ = ("_run", "_lock", "_returned", "_outcome")

    def __init__(self, run: _SerialRun) -> None:
        self._run = run
        self._lock = threading.Lock()
        self._returned = False
        self._outcome: Outcome | None = None

    def complete(self, index: int, outcome: Outcome) -> None:
        with self._lock:
            self._outcome = outcome
            resume = self._returned
        if resume:
            self._run.resume(index, outcome)

    def settle(self) -> Outcome | None:
        """Mark the task as returned; the outcome if it already completed."""
        with self._lock:
            self._returned = True
            return self._outcome


class _SerialRun:
    __slots__ = ("_tasks", "_latch", "_strict", "_log")

    def __init__(self, tasks: list[Task], done: Done, log: BoundLogger) -> None:
        self._tasks = tasks
        self._latch = Latch(done)
        self._strict = get_settings().flow.strict_callbacks
        self._log = log

    def drive(self, index: int, value: object) -> None:
        # Loops while tasks complete synchronously so long chains stay flat
        tasks = self._tasks
        while index < len(tasks):
            step = _Step(self)
            callback = TaskCallback(index, step.complete, combinator="serial", strict=self._strict, log=self._log)
            if index == 0:
                tasks[0](callback)
            else:
                tasks[index](value, callback)
            if (outcome := step.settle()) is None:
                return
            if outcome.is_err():
                self._fail(index, outcome)
                return
            index, value = index + 1, outcome.unwrap()
        self._latch.fire(Ok(value))
        self._log.debug("completed")

    def resume(self, index: int, outcome: Outcome) -> None:
        if outcome.is_err():
            self._fail(index, outcome)
        else:
            self.drive(index + 1, outcome.unwrap())

    def _fail(self, index: int, outcome: Outcome) -> None:
        self._latch.fire(outcome)
        self._log.debug("failed", task=index, error=repr(outcome.unwrap_err().error))


def serial(tasks: Iterable[Task], done: Done) -> None:
    """Run tasks one after another, threading each result into the next.

    The first task is called as ``task(callback)``; every later task as
    ``task(previous_value, callback)``. Task i+1 starts only after task i
    reported.

    Outcomes:
        - empty ``tasks``: ``done(None, [])``
        - all succeed: ``done(None, last_value)``
        - task k fails: ``done(error_k, value_k)`` with exactly the value task
          k passed; tasks after k never run

    Raises:
        InvalidTaskError: If ``done`` or any task is not callable
        CallbackAlreadyCalled: If a task reports twice (strict mode)
    """
    items = _materialise_tasks("serial", tasks)
    _require_callable("serial", "done", done)
    log = _flow_logger("serial", len(items))
    if not items:
        done(None, [])
        return
    log.debug("started")
    _SerialRun(items, done, log).drive(0, None)


# ─────────────────────────────────────────────────────────────────────────────
# Parallel & Map
# ─────────────────────────────────────────────────────────────────────────────


def parallel(tasks: Iterable[Task], done: Done) -> None:
    """Start every task at once and join on their completion.

    Each task is called as ``task(callback)``. There is no concurrency limit
    and no task is cancelled when a sibling fails.

    Outcomes:
        - empty ``tasks``: ``done(None, [])``
        - all succeed: ``done(None, results)``, results aligned with ``tasks``
        - first failure (in completion order): ``done(error, None)``; later
          completions are absorbed

    Raises:
        InvalidTaskError: If ``done`` or any task is not callable
        CallbackAlreadyCalled: If a task reports twice (strict mode)
    """
    items = _materialise_tasks("parallel", tasks)
    _require_callable("parallel", "done", done)
    if not items:
        done(None, [])
        return
    join = Join("parallel", len(items), done, keep_failure_value=False)
    join.log.debug("started")
    for i, task in enumerate(items):
        task(join.callback(i))


def map(values: Iterable[object], iteratee: Iteratee, done: Done) -> None:  # noqa: A001
    """Apply ``iteratee(item, callback)`` to every value concurrently.

    Iteratee calls are started in input order without waiting for each other.

    Outcomes:
        - empty ``values``: ``done(None, [])``; iteratee is never called
        - all succeed: ``done(None, results)``, results aligned with ``values``
        - first failure observed: ``done(error, value)`` with the value the
          failing call reported; later completions are absorbed

    Raises:
        InvalidTaskError: If ``iteratee`` or ``done`` is not callable
        CallbackAlreadyCalled: If an iteratee call reports twice (strict mode)
    """
    items = list(values)
    _require_callable("map", "iteratee", iteratee)
    _require_callable("map", "done", done)
    if not items:
        done(None, [])
        return
    join = Join("map", len(items), done, keep_failure_value=True)
    join.log.debug("started")
    for i, item in enumerate(items):
        iteratee(item, join.callback(i))
