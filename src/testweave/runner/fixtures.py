"""Fixture application around namespaces and units.

Once-fixtures wrap all of a namespace's units; each-fixtures wrap a single
unit. An exception escaping either kind is reported as one ``Error`` scoped
to the namespace and fixture kind, and never unwinds past that namespace.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from enum import StrEnum

import structlog

from testweave.runner import capture
from testweave.runner.context import ReportSink, RunContext, binding
from testweave.runner.execution import execute_unit
from testweave.runner.models import Error, Namespace, TestUnit
from testweave.runner.report import do_report
from testweave.runner.timing import wrap_with_timer

logger = structlog.get_logger()

FIXTURE_ERROR_MESSAGE = "Uncaught exception during fixture initialization."

UnitExecutor = Callable[[TestUnit], object]


class FixtureScope(StrEnum):
    ONCE = "once-fixtures"
    EACH = "each-fixtures"


def report_fixture_error(
    namespace: Namespace, scope: FixtureScope, exc: Exception | SystemExit
) -> None:
    logger.warning("fixture_error", namespace=namespace.name, scope=str(scope), error=repr(exc))
    do_report(Error(message=FIXTURE_ERROR_MESSAGE, actual=exc, testing_path=(namespace, scope)))


def run_unit(
    ctx: RunContext,
    namespace: Namespace,
    unit: TestUnit,
    report: ReportSink,
    executor: UnitExecutor = execute_unit,
) -> None:
    """Run one unit inside its namespace's each-fixtures.

    Skips the unit when fail-fast is on and the run has already failed.
    """
    options = ctx.options
    if options.fail_fast and ctx.has_failed:
        logger.debug("unit_skipped", unit=unit.id, reason="fail_fast")
        return

    def body() -> None:
        with binding(report=report, testing_path=(namespace, unit)):
            if options.capture_output:
                with capture.with_test_buffer():
                    executor(unit)
            else:
                executor(unit)

    with binding(testing_path=(namespace, FixtureScope.EACH)):
        try:
            namespace.each_fixture(body)
        except (Exception, SystemExit) as e:
            report_fixture_error(namespace, FixtureScope.EACH, e)


def unit_runner(
    ctx: RunContext,
    namespace: Namespace,
    report: ReportSink,
    executor: UnitExecutor = execute_unit,
) -> Callable[[TestUnit], None]:
    """``run_unit`` for ``namespace``, timed against the slow-test threshold."""
    return wrap_with_timer(
        functools.partial(run_unit, ctx, namespace, report=report, executor=executor),
        ctx.options.test_warn_time_ms,
    )


def run_with_once_fixtures(namespace: Namespace, body: Callable[[], None]) -> None:
    with binding(testing_path=(namespace, FixtureScope.ONCE)):
        try:
            namespace.once_fixture(body)
        except (Exception, SystemExit) as e:
            report_fixture_error(namespace, FixtureScope.ONCE, e)
