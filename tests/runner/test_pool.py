"""Tests for runner/pool.py module."""

from __future__ import annotations

import contextvars
import threading
import time

import pytest

from testweave.runner.pool import pmap, run_all

_marker: contextvars.ContextVar[str] = contextvars.ContextVar("marker", default="unset")


class TestRunAll:
    """Tests for run_all."""

    def test_returns_results_in_submission_order(self) -> None:
        """Results line up with the callables, not with completion order."""

        def after(delay: float, value: int):
            def fn() -> int:
                time.sleep(delay)
                return value

            return fn

        results = run_all(4, [after(0.05, 1), after(0.02, 2), after(0.0, 3)])
        assert results == [1, 2, 3]

    def test_empty(self) -> None:
        """No callables, no results."""
        assert run_all(2, []) == []

    def test_runs_in_parallel(self) -> None:
        """All workers can be busy at once."""
        barrier = threading.Barrier(4, timeout=5)

        def wait() -> int:
            return barrier.wait()

        results = run_all(4, [wait] * 4)
        assert sorted(results) == [0, 1, 2, 3]

    def test_propagates_first_failure(self) -> None:
        """An exception from a task reaches the caller."""

        def fail() -> None:
            raise ValueError("task failed")

        with pytest.raises(ValueError, match="task failed"):
            run_all(2, [lambda: 1, fail, lambda: 3])

    def test_cancels_queued_tasks_on_failure(self) -> None:
        """Tasks that have not started when a sibling fails never run."""
        release = threading.Event()
        started: list[str] = []

        def fail() -> None:
            raise ValueError("first")

        def block() -> None:
            started.append("block")
            release.wait(5)

        def queued() -> None:
            started.append("queued")

        try:
            with pytest.raises(ValueError):
                run_all(1, [fail, block, queued, queued])
        finally:
            release.set()

        time.sleep(0.1)
        assert "queued" not in started

    def test_tasks_see_caller_bindings(self) -> None:
        """Context variables set by the caller are visible in workers."""
        token = _marker.set("from-caller")
        try:
            results = run_all(2, [_marker.get, _marker.get])
        finally:
            _marker.reset(token)
        assert results == ["from-caller", "from-caller"]

    def test_worker_bindings_do_not_leak(self) -> None:
        """Bindings made inside a task stay in that task."""

        def rebind() -> str:
            _marker.set("inside")
            return _marker.get()

        assert run_all(1, [rebind]) == ["inside"]
        assert _marker.get() == "unset"


class TestPmap:
    """Tests for pmap."""

    def test_maps_in_order(self) -> None:
        """pmap behaves like map."""
        assert pmap(3, lambda x: x * 2, [1, 2, 3, 4]) == [2, 4, 6, 8]
