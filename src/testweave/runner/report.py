"""Report dispatch.

``do_report`` is how every event leaves the engine: it updates the bound
namespace counters, records failures on the run context, and hands the event
to the bound report sink. ``synchronize`` makes any sink safe to call from
several worker threads at once.
"""

from __future__ import annotations

import dataclasses
import threading
from typing import Any

from testweave.runner.context import (
    ReportSink,
    current_counters,
    current_report,
    current_run_context,
    current_testing_path,
)
from testweave.runner.models import Error, Fail, Pass, ReportEvent

_COUNTED: dict[type[ReportEvent], str] = {Pass: "passed", Fail: "failed", Error: "error"}


def synchronize(report: ReportSink) -> ReportSink:
    """Wrap ``report`` so that at most one thread is inside it at a time."""
    lock = threading.Lock()

    def synchronized_report(event: ReportEvent) -> Any:
        with lock:
            return report(event)

    synchronized_report.__wrapped__ = report  # type: ignore[attr-defined]
    return synchronized_report


def inc_counter(name: str, amount: int = 1) -> None:
    counters = current_counters()
    if counters is not None:
        counters.inc(name, amount)


def do_report(event: ReportEvent) -> None:
    """Count, record and forward ``event`` to the currently bound sink."""
    if (name := _COUNTED.get(type(event))) is not None:
        inc_counter(name)
    if isinstance(event, (Fail, Error)):
        ctx = current_run_context()
        if ctx is not None:
            ctx.record_failure()
        if not event.testing_path:
            event = dataclasses.replace(event, testing_path=current_testing_path())
    report = current_report()
    if report is not None:
        report(event)
