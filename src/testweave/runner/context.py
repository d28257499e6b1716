"""Run-scoped state and the scoped bindings used while tests execute.

A ``RunContext`` is created by every call to ``run_tests`` and handed to each
engine component. The narrower scopes (which report sink is active, which
namespace counters receive results, which namespace/unit is running) are
bound with ``binding()`` on top of ``contextvars`` so that they follow work
onto pool threads via ``bound()``.
"""

from __future__ import annotations

import contextvars
import functools
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from testweave.runner.models import Counters, TestingPath

if TYPE_CHECKING:
    from testweave.config.models import RunOptions
    from testweave.runner.models import ReportEvent

ReportSink = Callable[["ReportEvent"], Any]


@dataclass
class RunContext:
    """State shared by every thread of one run.

    ``synchronized_lock`` is held around every synchronized unit, so no two of
    them overlap even when their namespaces run in parallel.
    """

    options: RunOptions
    _failed: threading.Event = field(default_factory=threading.Event, init=False, repr=False)
    synchronized_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def record_failure(self) -> None:
        self._failed.set()

    @property
    def has_failed(self) -> bool:
        """Whether any failure or error was reported so far in this run.

        Read without synchronizing with dispatch; a unit already handed to a
        worker may still start after a failure is recorded.
        """
        return self._failed.is_set()


class CounterAccumulator:
    """Thread-safe counters for one namespace."""

    _FIELDS = frozenset(("test", "passed", "failed", "error"))

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = dict.fromkeys(self._FIELDS, 0)

    def inc(self, name: str, amount: int = 1) -> None:
        if name not in self._FIELDS:
            raise KeyError(name)
        with self._lock:
            self._counts[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counts[name]

    def snapshot(self) -> Counters:
        with self._lock:
            return Counters(**self._counts)


_run_context: contextvars.ContextVar[RunContext | None] = contextvars.ContextVar(
    "testweave_run_context", default=None
)
_report: contextvars.ContextVar[ReportSink | None] = contextvars.ContextVar(
    "testweave_report", default=None
)
_counters: contextvars.ContextVar[CounterAccumulator | None] = contextvars.ContextVar(
    "testweave_counters", default=None
)
_testing_path: contextvars.ContextVar[TestingPath] = contextvars.ContextVar(
    "testweave_testing_path", default=()
)

_UNSET: Any = object()


@contextmanager
def binding(
    *,
    run_context: RunContext | None = _UNSET,
    report: ReportSink | None = _UNSET,
    counters: CounterAccumulator | None = _UNSET,
    testing_path: TestingPath = _UNSET,
) -> Iterator[None]:
    """Bind any of the scoped values for the duration of the block."""
    tokens: list[tuple[contextvars.ContextVar[Any], contextvars.Token[Any]]] = []
    for var, value in (
        (_run_context, run_context),
        (_report, report),
        (_counters, counters),
        (_testing_path, testing_path),
    ):
        if value is not _UNSET:
            tokens.append((var, var.set(value)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def current_run_context() -> RunContext | None:
    return _run_context.get()


def current_report() -> ReportSink | None:
    return _report.get()


def current_counters() -> CounterAccumulator | None:
    return _counters.get()


def current_testing_path() -> TestingPath:
    return _testing_path.get()


def bound[T](fn: Callable[[], T]) -> Callable[[], T]:
    """Capture the caller's bindings so ``fn`` sees them on another thread."""
    return functools.partial(contextvars.copy_context().run, fn)
