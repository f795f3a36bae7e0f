"""Tests for map(): per-element fan-out with ordered results."""

from __future__ import annotations

import threading
import time

import pytest

from flowcase import InvalidTaskError, map
from flowcase.foundation.testing import Spy


def echo(value, next):
    next(None, value)


class TestMap:
    def test_calls_func_with_all_values(self) -> None:
        spy = Spy(echo)
        map([0, 1, 2], spy, lambda error, data: None)
        assert spy.called_with(0)
        assert spy.called_with(1)
        assert spy.called_with(2)
        assert spy.call_count == 3

    def test_returns_error_that_was_thrown_first(self) -> None:
        spy = Spy(lambda value, next: next(value, value))
        done = Spy()
        map(["first", "second"], spy, done)
        assert done.called_with("first")
        assert not done.called_with("second")
        assert done.called_once

    def test_empty_list(self) -> None:
        done = Spy()
        func = Spy()
        map([], func, done)
        assert done.called_once
        assert done.called_with(None, [])
        func.assert_not_called()

    def test_no_error_when_all_succeed(self) -> None:
        done = Spy()
        map([0, 1, 2], Spy(echo), done)
        assert done.called_once
        assert done.called_with(None)

    def test_results_aligned_with_values(self) -> None:
        done = Spy()
        map(["a", "b", "c"], lambda v, next: next(None, v.upper()), done)
        assert done.args_list() == [(None, ["A", "B", "C"])]

    def test_failure_carries_value(self) -> None:
        done = Spy()
        map([1, 2, 3], lambda v, next: next("odd", v) if v == 2 else next(None, v), done)
        assert done.args_list() == [("odd", 2)]

    def test_iteratee_called_in_input_order(self) -> None:
        spy = Spy(echo)
        map(range(5), spy, Spy())
        assert [c.args[0] for c in spy.calls] == [0, 1, 2, 3, 4]

    def test_all_elements_processed_after_failure(self) -> None:
        spy = Spy(lambda v, next: next("fail" if v == 0 else None, v))
        done = Spy()
        map([0, 1, 2], spy, done)
        assert spy.call_count == 3
        assert done.args_list() == [("fail", 0)]


class TestMapOrdering:
    def test_completion_order_does_not_affect_results(self, deferred) -> None:
        done = Spy()
        map(["x", "y", "z"], deferred.iteratee, done)
        assert deferred.items == ["x", "y", "z"]
        deferred.complete(1, None, "Y")
        deferred.complete(2, None, "Z")
        deferred.complete(0, None, "X")
        assert done.args_list() == [(None, ["X", "Y", "Z"])]

    def test_first_failure_observed_wins(self, deferred) -> None:
        done = Spy()
        map(["x", "y"], deferred.iteratee, done)
        deferred.complete(1, "second failed", "y")
        deferred.complete(0, "first failed", "x")
        assert done.args_list() == [("second failed", "y")]

    def test_threaded_iteratee(self) -> None:
        finished = threading.Event()
        results: list[tuple[object, object]] = []

        def square(value, next):
            def work() -> None:
                time.sleep(0.001 * (10 - value))
                next(None, value * value)
            threading.Thread(target=work).start()

        def done(error, data):
            results.append((error, data))
            finished.set()

        map(range(10), square, done)
        assert finished.wait(5)
        assert results == [(None, [v * v for v in range(10)])]


class TestMapMisuse:
    def test_non_callable_iteratee(self) -> None:
        with pytest.raises(InvalidTaskError) as exc_info:
            map([1], "not a function", Spy())
        assert exc_info.value.error.combinator == "map"

    def test_logs_absorbed_failures(self, logs) -> None:
        map(["first", "second"], lambda v, next: next(v, v), Spy())
        warnings = [e for e in logs.entries if e.level == "warning"]
        assert [e.event for e in warnings] == ["late failure absorbed"]
        assert warnings[0].context["task"] == 1
