"""Execution of a single test unit.

A unit passes when its function returns, fails when it raises
``AssertionError`` and errors on any other exception, ``SystemExit``
included. Outcomes are reported, never raised.
"""

from __future__ import annotations

from testweave.runner.models import BeginTest, EndTest, Error, Fail, Pass, TestUnit
from testweave.runner.report import do_report, inc_counter


def execute_unit(unit: TestUnit) -> None:
    inc_counter("test")
    do_report(BeginTest(unit=unit))
    try:
        unit.fn()
    except AssertionError as e:
        do_report(Fail(unit=unit, message=str(e) or None, actual=e))
    except (Exception, SystemExit) as e:
        do_report(Error(unit=unit, message="Uncaught exception, not in assertion.", actual=e))
    else:
        do_report(Pass(unit=unit))
    finally:
        do_report(EndTest(unit=unit))
