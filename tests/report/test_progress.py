"""Tests for report/progress.py module."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from testweave.report.progress import ProgressReporter, describe_path
from testweave.runner import capture
from testweave.runner.fixtures import FixtureScope
from testweave.runner.models import (
    BeginRun,
    Counters,
    EndTest,
    Error,
    Fail,
    LongTest,
    Namespace,
    Summary,
    TestUnit,
)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> ProgressReporter:
    console = Console(file=output, width=120, color_system=None, force_terminal=False)
    return ProgressReporter(console, live=False)


@pytest.fixture
def unit() -> TestUnit:
    return TestUnit.create(Namespace(name="pkg.mod"), "test_thing", lambda: None)


class TestDescribePath:
    """Tests for describe_path."""

    def test_unit(self, unit: TestUnit) -> None:
        """A unit path names the unit."""
        assert describe_path((unit.namespace, unit)) == "pkg.mod::test_thing"

    def test_fixture_scope(self) -> None:
        """A fixture path names the namespace and scope."""
        ns = Namespace(name="pkg.mod")
        assert describe_path((ns, FixtureScope.ONCE)) == "pkg.mod (once-fixtures)"

    def test_namespace_only(self) -> None:
        """A bare namespace path names the namespace."""
        assert describe_path((Namespace(name="pkg.mod"),)) == "pkg.mod"

    def test_empty(self) -> None:
        """An empty path is unknown."""
        assert describe_path(()) == "<unknown>"


class TestProgressReporter:
    """Tests for ProgressReporter."""

    def test_fail_shows_location_and_message(
        self, reporter: ProgressReporter, output: io.StringIO, unit: TestUnit
    ) -> None:
        """Failures print their location, message and actual value."""
        reporter(
            Fail(
                unit=unit,
                message="values differ",
                actual=AssertionError("values differ"),
                testing_path=(unit.namespace, unit),
            )
        )
        text = output.getvalue()
        assert "FAIL in pkg.mod::test_thing" in text
        assert "values differ" in text
        assert "actual:" in text

    def test_error_shows_traceback(
        self, reporter: ProgressReporter, output: io.StringIO, unit: TestUnit
    ) -> None:
        """Errors print the exception traceback."""
        try:
            raise KeyError("missing-key")
        except KeyError as e:
            exc = e
        reporter(Error(unit=unit, message="Uncaught", actual=exc, testing_path=(unit,)))
        text = output.getvalue()
        assert "ERROR in pkg.mod::test_thing" in text
        assert "KeyError" in text
        assert "missing-key" in text

    def test_failure_includes_test_output(
        self, reporter: ProgressReporter, output: io.StringIO, unit: TestUnit
    ) -> None:
        """Output captured for a failing test follows its report."""
        with capture.with_test_buffer() as buffer:
            buffer.write("debug line\n")
            reporter(Fail(unit=unit, message="nope", testing_path=(unit,)))
        text = output.getvalue()
        assert "--- Test output ---" in text
        assert "debug line" in text

    def test_long_test(
        self, reporter: ProgressReporter, output: io.StringIO, unit: TestUnit
    ) -> None:
        """Long tests print their duration in seconds."""
        reporter(LongTest(unit=unit, duration_ms=1500.0))
        text = output.getvalue()
        assert "LONG TEST in pkg.mod::test_thing" in text
        assert "Test took 1.500 seconds to run" in text

    def test_summary(self, reporter: ProgressReporter, output: io.StringIO) -> None:
        """The summary prints totals."""
        reporter(BeginRun(count=4))
        reporter(Summary(counters=Counters(test=4, passed=2, failed=1, error=1), duration_ms=250))
        text = output.getvalue()
        assert "Ran 4 tests in 0.250 seconds" in text
        assert "2 passed, 1 failure, 1 error." in text

    def test_live_progress(self, output: io.StringIO, unit: TestUnit) -> None:
        """A live reporter drives a progress bar and stops it at the summary."""
        console = Console(file=output, width=120, force_terminal=True)
        reporter = ProgressReporter(console, live=True)
        reporter(BeginRun(count=1))
        reporter(EndTest(unit=unit))
        reporter(Summary(counters=Counters(test=1, passed=1), duration_ms=10))
        assert "Ran 1 test in" in output.getvalue()
