"""Tests for serial(): ordering, data threading and failure short-circuit."""

from __future__ import annotations

import threading

import pytest

from flowcase import CallbackAlreadyCalled, InvalidTaskError, serial
from flowcase.foundation.testing import Spy


def produce(next):
    next(None, "data")


def consume(data, next):
    next(None, "result")


class TestSerial:
    def test_calls_functions_sequentially(self) -> None:
        spy1, spy2, done = Spy(produce), Spy(consume), Spy()
        serial([spy1, spy2], done)
        assert spy1.called_once
        assert spy2.called_once
        assert spy1.called_before(spy2)
        assert done.called_after(spy2)

    def test_empty_list(self) -> None:
        done = Spy()
        serial([], done)
        assert done.called_once
        assert done.called_with(None, [])

    def test_first_failure_skips_rest(self) -> None:
        spy1 = Spy(lambda next: next("error1", []))
        spy2 = Spy(consume)
        done = Spy()
        serial([spy1, spy2], done)
        assert spy1.called_once
        assert spy2.call_count == 0
        done.assert_called_once()
        assert done.called_with("error1", [])

    def test_later_failure_reported(self) -> None:
        spy1 = Spy(produce)
        spy2 = Spy(lambda data, next: next("error2", []))
        done = Spy()
        serial([spy1, spy2], done)
        assert spy1.called_once
        assert spy2.called_once
        assert done.args_list() == [("error2", [])]

    def test_passes_data_to_next_function(self) -> None:
        spy1, spy2, done = Spy(produce), Spy(consume), Spy()
        serial([spy1, spy2], done)
        assert spy2.called_with("data")
        assert done.called_with(None, "result")

    def test_first_task_gets_only_callback(self) -> None:
        first = Spy(produce)
        serial([first], Spy())
        assert len(first.first_call.args) == 1

    def test_value_threads_through_chain(self) -> None:
        tasks = [lambda next: next(None, 1)] + [lambda v, next: next(None, v * 2)] * 4
        done = Spy()
        serial(tasks, done)
        assert done.args_list() == [(None, 16)]

    def test_partial_value_passed_verbatim(self) -> None:
        partial = {"rows": [1, 2]}
        done = Spy()
        serial([lambda next: next(None, 1), lambda v, next: next(ValueError("x"), partial)], done)
        error, value = done.last_call.args
        assert isinstance(error, ValueError)
        assert value is partial

    @pytest.mark.parametrize("error", [0, "", False])
    def test_falsy_errors_are_failures(self, error: object) -> None:
        after = Spy(consume)
        done = Spy()
        serial([lambda next: next(error, "partial"), after], done)
        assert not after.called
        assert done.args_list() == [(error, "partial")]

    def test_callback_with_no_arguments_is_success(self) -> None:
        done = Spy()
        serial([lambda next: next(), lambda v, next: next(None, v)], done)
        assert done.args_list() == [(None, None)]

    def test_long_synchronous_chain_does_not_recurse(self) -> None:
        tasks = [lambda next: next(None, 0)] + [lambda v, next: next(None, v + 1)] * 10_000
        done = Spy()
        serial(tasks, done)
        assert done.args_list() == [(None, 10_000)]

    def test_accepts_generator(self) -> None:
        done = Spy()
        serial((t for t in [produce, consume]), done)
        assert done.called_with(None, "result")


class TestSerialAsynchronous:
    def test_completions_from_threads(self) -> None:
        finished = threading.Event()
        order: list[int] = []

        def step(i: int):
            def run(*args):
                next = args[-1]
                value = args[0] if len(args) == 2 else 0

                def work() -> None:
                    order.append(i)
                    next(None, value + i)

                threading.Timer(0.01, work).start()
            return run

        results: list[tuple[object, object]] = []

        def done(error, value):
            results.append((error, value))
            finished.set()

        serial([step(i) for i in range(1, 6)], done)
        assert finished.wait(5)
        assert order == [1, 2, 3, 4, 5]
        assert results == [(None, 15)]

    def test_next_task_waits_for_deferred_callback(self, deferred) -> None:
        second = Spy(consume)
        done = Spy()
        serial([deferred.task, second], done)
        assert not second.called
        assert not done.called
        deferred.complete(0, None, "data")
        assert second.called_with("data")
        assert done.args_list() == [(None, "result")]


class TestSerialMisuse:
    def test_duplicate_callback_raises(self) -> None:
        def twice(next):
            next(None, 1)
            next(None, 2)

        with pytest.raises(CallbackAlreadyCalled) as exc_info:
            serial([twice], Spy())
        assert exc_info.value.error.combinator == "serial"

    def test_duplicate_callback_ignored_when_lenient(self, lenient, logs) -> None:
        def twice(next):
            next(None, 1)
            next(None, 2)

        done = Spy()
        serial([twice], done)
        assert done.args_list() == [(None, 1)]
        assert "duplicate callback ignored" in logs.events("warning")

    def test_non_callable_task(self) -> None:
        done = Spy()
        with pytest.raises(InvalidTaskError):
            serial([produce, "nope"], done)
        assert not done.called

    def test_non_callable_done(self) -> None:
        with pytest.raises(TypeError):
            serial([produce], None)

    def test_task_exception_propagates(self) -> None:
        def boom(next):
            raise RuntimeError("boom")

        done = Spy()
        with pytest.raises(RuntimeError, match="boom"):
            serial([boom], done)
        assert not done.called

    def test_logs_lifecycle(self, logs) -> None:
        serial([produce, consume], Spy())
        assert logs.events("debug") == ["started", "completed"]
        assert all(e.context["combinator"] == "serial" for e in logs.entries)
