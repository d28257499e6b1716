"""Top-level entry point for running a collection of test units."""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from testweave.config.models import RunOptions
from testweave.core.logging import clear_run_id, set_run_id
from testweave.core.progress import status
from testweave.runner.context import RunContext, binding
from testweave.runner.execution import execute_unit
from testweave.runner.fixtures import UnitExecutor
from testweave.runner.models import BeginRun, Summary, TestUnit
from testweave.runner.orchestrator import run_namespaces
from testweave.runner.report import do_report, synchronize

logger = structlog.get_logger()


def _resolve_options(options: RunOptions | Mapping[str, Any] | None) -> RunOptions:
    if options is None:
        return RunOptions()
    if isinstance(options, RunOptions):
        return options
    return RunOptions.model_validate(dict(options))


def _default_report() -> Any:
    from testweave.report.progress import ProgressReporter

    return ProgressReporter()


def run_tests(
    units: Iterable[TestUnit],
    options: RunOptions | Mapping[str, Any] | None = None,
    *,
    executor: UnitExecutor = execute_unit,
) -> Summary:
    """Run the supplied test units and return the run summary.

    Args:
        units: Units to run, typically from ``find_tests``.
        options: A ``RunOptions``, or a mapping of option names merged over
            the defaults (``fail_fast``, ``capture_output``, ``multithread``,
            ``threads``, ``report``, ``test_warn_time_ms``).
        executor: Runs one unit and reports its outcome.

    Returns:
        Summary with the run-wide counters and wall-clock duration.
    """
    start = time.perf_counter_ns()
    units = list(units)
    if not units:
        status("No tests found.", style="none")
        return Summary()

    opts = _resolve_options(options)
    report = synchronize(opts.report if opts.report is not None else _default_report())
    ctx = RunContext(options=opts)
    set_run_id()
    logger.debug(
        "run_started",
        units=len(units),
        multithread=str(opts.multithread),
        threads=opts.threads,
        fail_fast=opts.fail_fast,
    )
    try:
        with binding(run_context=ctx, report=report):
            do_report(BeginRun(count=len(units)))
            counters = run_namespaces(ctx, units, report, executor)
            duration_ms = (time.perf_counter_ns() - start) / 1e6
            summary = Summary(counters=counters, duration_ms=duration_ms)
            do_report(summary)
    finally:
        clear_run_id()
    logger.debug("run_finished", test=counters.test, failed=counters.failed, error=counters.error)
    return summary
