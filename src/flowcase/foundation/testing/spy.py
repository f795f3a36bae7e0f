"""Call-recording spies for testing callback flows.

A Spy wraps an optional function, records every call with its arguments
and a global sequence number, then delegates. The sequence numbers are
shared by all spies, so call ordering between spies can be asserted.

Example:
    >>> from flowcase import serial
    >>> first = Spy(lambda next: next(None, "data"))
    >>> second = Spy(lambda data, next: next(None, "result"))
    >>> done = Spy()
    >>> serial([first, second], done)
    >>> first.called_before(second), done.called_with(None, "result")
    (True, True)
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

R = TypeVar("R")

_order = itertools.count(1)
_order_lock = threading.Lock()


def _next_order() -> int:
    with _order_lock:
        return next(_order)


@dataclass(slots=True, frozen=True)
class Call:
    """Record of a single spy invocation."""
    args: tuple[object, ...]
    kwargs: dict[str, object]
    order: int


@dataclass(eq=False)
class Spy(Generic[R]):
    """Callable recorder. Delegates to ``func`` when given, else returns None."""

    func: Callable[..., R] | None = None
    calls: list[Call] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __call__(self, *args: object, **kwargs: object) -> R | None:
        # Recorded before delegating so nested calls order after this one
        with self._lock:
            self.calls.append(Call(args, kwargs, _next_order()))
        return self.func(*args, **kwargs) if self.func is not None else None

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def called(self) -> bool:
        return self.call_count > 0

    @property
    def called_once(self) -> bool:
        return self.call_count == 1

    @property
    def first_call(self) -> Call | None:
        return self.calls[0] if self.calls else None

    @property
    def last_call(self) -> Call | None:
        return self.calls[-1] if self.calls else None

    def called_with(self, *args: object) -> bool:
        """Whether any call started with exactly these positional arguments."""
        n = len(args)
        return any(c.args[:n] == args for c in self.calls)

    def always_called_with(self, *args: object) -> bool:
        n = len(args)
        return self.called and all(c.args[:n] == args for c in self.calls)

    def called_before(self, other: Spy[object]) -> bool:
        """First call of self precedes the last call of other."""
        if not self.calls:
            return False
        return not other.calls or self.calls[0].order < other.calls[-1].order

    def called_after(self, other: Spy[object]) -> bool:
        """Last call of self follows the first call of other."""
        if not self.calls or not other.calls:
            return False
        return self.calls[-1].order > other.calls[0].order

    def args_list(self) -> list[tuple[object, ...]]:
        return [c.args for c in self.calls]

    def reset(self) -> None:
        with self._lock:
            self.calls.clear()

    def assert_called_once(self) -> None:
        if not self.called_once:
            raise AssertionError(f"Expected one call, got {self.call_count}")

    def assert_not_called(self) -> None:
        if self.called:
            raise AssertionError(f"Spy called {self.call_count} times")

    def assert_called_with(self, *args: object) -> None:
        if not self.called_with(*args):
            raise AssertionError(f"No call started with {args!r}; calls: {self.args_list()!r}")
