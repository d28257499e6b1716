"""Scheduling of namespaces and their units across the worker pool."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import nullcontext

import structlog

from testweave.runner import capture
from testweave.runner.context import CounterAccumulator, ReportSink, RunContext, binding
from testweave.runner.execution import execute_unit
from testweave.runner.fixtures import UnitExecutor, run_with_once_fixtures, unit_runner
from testweave.runner.models import (
    BeginNamespace,
    Counters,
    EndNamespace,
    NamespaceGroup,
    TestUnit,
    group_by_namespace,
    merge_counters,
)
from testweave.runner.pool import pmap
from testweave.runner.report import do_report

logger = structlog.get_logger()


def run_units(
    ctx: RunContext,
    group: NamespaceGroup,
    report: ReportSink,
    executor: UnitExecutor = execute_unit,
) -> None:
    """Run a namespace's units inside its once-fixtures.

    With per-unit parallelism, synchronized units run serially first and the
    rest go through the pool afterwards. Synchronized units also hold the
    run-wide lock, which keeps them apart across parallel namespaces.
    """
    options = ctx.options
    timed = unit_runner(ctx, group.namespace, report, executor)

    def run(unit: TestUnit) -> None:
        if unit.synchronized:
            with ctx.synchronized_lock:
                timed(unit)
        else:
            timed(unit)

    def body() -> None:
        if options.multithread.vars:
            serial = [u for u in group.units if u.synchronized]
            parallel = [u for u in group.units if not u.synchronized]
            for unit in serial:
                run(unit)
            pmap(options.threads, run, parallel)
        else:
            for unit in group.units:
                run(unit)

    run_with_once_fixtures(group.namespace, body)


def run_namespace(
    ctx: RunContext,
    group: NamespaceGroup,
    report: ReportSink,
    executor: UnitExecutor = execute_unit,
) -> Counters:
    """Run one namespace and return its counters once its fixtures are done."""
    counters = CounterAccumulator()
    log = logger.bind(namespace=group.namespace.name)
    with binding(counters=counters):
        log.debug("namespace_started", units=len(group.units))
        do_report(BeginNamespace(namespace=group.namespace))
        run_units(ctx, group, report, executor)
        do_report(EndNamespace(namespace=group.namespace))
    result = counters.snapshot()
    log.debug("namespace_finished", test=result.test, failed=result.failed, error=result.error)
    return result


def run_namespaces(
    ctx: RunContext,
    units: Iterable[TestUnit],
    report: ReportSink,
    executor: UnitExecutor = execute_unit,
) -> Counters:
    """Run every unit, grouped by namespace, and sum the namespace counters.

    ``report`` must already be serialized with ``synchronize``.
    """
    options = ctx.options
    groups = group_by_namespace(units)

    def run_group(group: NamespaceGroup) -> Counters:
        return run_namespace(ctx, group, report, executor)

    with (
        binding(report=report),
        capture.with_capture() if options.capture_output else nullcontext(),
    ):
        if options.multithread.namespaces:
            results = pmap(options.threads, run_group, groups)
        else:
            results = [run_group(group) for group in groups]
    return merge_counters(results)
