"""Runner module - concurrent execution of test units."""

from testweave.runner.context import RunContext
from testweave.runner.discovery import find_tests
from testweave.runner.engine import run_tests
from testweave.runner.models import (
    BeginNamespace,
    BeginRun,
    BeginTest,
    Counters,
    EndNamespace,
    EndTest,
    Error,
    Fail,
    LongTest,
    Namespace,
    NamespaceGroup,
    Pass,
    ReportEvent,
    Summary,
    TestUnit,
    join_fixtures,
    merge_counters,
)
from testweave.runner.report import do_report, synchronize

__all__ = [
    "run_tests",
    "find_tests",
    "do_report",
    "synchronize",
    "join_fixtures",
    "merge_counters",
    "RunContext",
    "Counters",
    "Namespace",
    "NamespaceGroup",
    "TestUnit",
    "ReportEvent",
    "BeginRun",
    "BeginNamespace",
    "EndNamespace",
    "BeginTest",
    "EndTest",
    "Pass",
    "Fail",
    "Error",
    "LongTest",
    "Summary",
]
