"""Per-invocation guard state shared by the flow combinators.

    - Latch: one-shot gate in front of the outer done callback
    - Accumulator: fixed-size, index-aligned result slots
    - TaskCallback: the one-shot completion callback handed to each task

All three are thread-safe. Tasks may complete synchronously, from worker
threads or from an event loop, and the guards serialise those completions
with a plain ``threading.Lock``. User callbacks are never invoked while a
lock is held.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable

from flowcase.foundation.errors import CallbackAlreadyCalled, Outcome, completion, to_callback_args

if TYPE_CHECKING:
    from flowcase.runtime.observability import BoundLogger

Done = Callable[[object, object], None]
Sink = Callable[[int, Outcome], None]


class Latch:
    """One-shot gate around a ``done(error, value)`` callback.

    The first fire() reaches ``done``; every later fire() is absorbed and
    counted. This is what guarantees the outer callback of a combinator runs
    exactly once, however many tasks report afterwards.

    Example:
        >>> seen = []
        >>> latch = Latch(lambda err, value: seen.append((err, value)))
        >>> latch.fire(completion("boom"))
        True
        >>> latch.fire(completion(None, 1))
        False
        >>> seen, latch.absorbed
        ([('boom', None)], 1)
    """

    __slots__ = ("_done", "_lock", "_fired", "_absorbed")

    def __init__(self, done: Done) -> None:
        self._done = done
        self._lock = threading.Lock()
        self._fired = False
        self._absorbed = 0

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def absorbed(self) -> int:
        """Number of terminal events swallowed after the first."""
        return self._absorbed

    def fire(self, result: Outcome) -> bool:
        """Deliver ``result`` to done if nothing was delivered yet.

        Returns:
            True if this call reached done, False if it was absorbed
        """
        with self._lock:
            if self._fired:
                self._absorbed += 1
                return False
            self._fired = True
        error, value = to_callback_args(result)
        self._done(error, value)
        return True

    def absorb(self) -> int:
        """Record a completion that arrived after the latch fired."""
        with self._lock:
            self._absorbed += 1
            return self._absorbed


class Accumulator:
    """Fixed-size result slots, one per task, filled in any order.

    put() returns the full slot list exactly once: to the caller that fills
    the last empty slot.
    """

    __slots__ = ("_slots", "_remaining", "_lock")

    def __init__(self, size: int) -> None:
        self._slots: list[Outcome | None] = [None] * size
        self._remaining = size
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def remaining(self) -> int:
        return self._remaining

    def put(self, index: int, result: Outcome) -> list[Outcome] | None:
        with self._lock:
            if self._slots[index] is not None:
                raise ValueError(f"Slot {index} already filled")
            self._slots[index] = result
            self._remaining -= 1
            if self._remaining:
                return None
            return list(self._slots)  # type: ignore[arg-type]


class TaskCallback:
    """Completion callback given to a single task: ``callback(error=None, value=None)``.

    Normalises its arguments into a Result and forwards them to ``sink``
    together with the task index. A second invocation raises
    CallbackAlreadyCalled in strict mode and is logged and dropped otherwise.
    """

    __slots__ = ("_index", "_sink", "_combinator", "_strict", "_log", "_lock", "_called")

    def __init__(self, index: int, sink: Sink, *, combinator: str, strict: bool, log: BoundLogger) -> None:
        self._index = index
        self._sink = sink
        self._combinator = combinator
        self._strict = strict
        self._log = log
        self._lock = threading.Lock()
        self._called = False

    @property
    def index(self) -> int:
        return self._index

    @property
    def called(self) -> bool:
        return self._called

    def __call__(self, error: object = None, value: object = None) -> None:
        with self._lock:
            repeated, self._called = self._called, True
        if repeated:
            if self._strict:
                raise CallbackAlreadyCalled.for_task(self._combinator, self._index)
            self._log.warning("duplicate callback ignored", task=self._index)
            return
        self._sink(self._index, completion(error, value))

    def __repr__(self) -> str:
        return f"TaskCallback({self._combinator}[{self._index}], called={self._called})"
