"""TestWeave - concurrent test runner with namespace and per-test parallelism."""

from testweave.config.models import MultithreadMode, RunOptions
from testweave.markers import slow, synchronized
from testweave.runner import (
    Counters,
    Namespace,
    Summary,
    TestUnit,
    find_tests,
    run_tests,
)

__version__ = "0.1.0"

__all__ = [
    "run_tests",
    "find_tests",
    "synchronized",
    "slow",
    "RunOptions",
    "MultithreadMode",
    "Counters",
    "Namespace",
    "Summary",
    "TestUnit",
]
