"""Slow test detection."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable

import structlog

from testweave.runner.context import binding
from testweave.runner.models import LongTest, TestUnit
from testweave.runner.report import do_report

logger = structlog.get_logger()


def wrap_with_timer[R](
    test_fn: Callable[[TestUnit], R], test_warn_time_ms: float | None
) -> Callable[[TestUnit], R]:
    """Report a ``LongTest`` for units that take at least ``test_warn_time_ms``.

    Units marked slow are never reported. The wrapped function's result is
    returned unchanged and its exceptions propagate without a report.
    """

    @functools.wraps(test_fn)
    def timed(unit: TestUnit) -> R:
        start = time.perf_counter_ns()
        result = test_fn(unit)
        duration_ms = (time.perf_counter_ns() - start) / 1e6
        if (
            not unit.slow
            and test_warn_time_ms is not None
            and test_warn_time_ms <= duration_ms
        ):
            path = (unit.namespace, unit)
            logger.debug("long_test", unit=unit.id, duration_ms=duration_ms)
            with binding(testing_path=path):
                do_report(LongTest(unit=unit, duration_ms=duration_ms, testing_path=path))
        return result

    return timed
