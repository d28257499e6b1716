"""Default console reporter: a progress bar plus failure details.

Output written by a failing test is printed after its failure report. The
reporter writes through ``capture.passthrough()`` so that its own output is
never swallowed by a test buffer.
"""

from __future__ import annotations

import traceback
from contextlib import ExitStack

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn

from testweave.core.progress import get_console, is_tty, pluralize, suppress_console_logs
from testweave.runner import capture
from testweave.runner.models import (
    BeginRun,
    EndTest,
    Error,
    Fail,
    LongTest,
    Namespace,
    ReportEvent,
    Summary,
    TestingPath,
    TestUnit,
)


def describe_path(path: TestingPath) -> str:
    """Human-readable location for a testing path."""
    namespace: Namespace | None = None
    parts: list[str] = []
    for item in path:
        if isinstance(item, Namespace):
            namespace = item
        elif isinstance(item, TestUnit):
            parts.append(item.id)
        elif namespace is not None:
            parts.append(f"{namespace.name} ({item})")
        else:
            parts.append(str(item))
    if not parts and namespace is not None:
        parts.append(namespace.name)
    return " ".join(parts) or "<unknown>"


class ProgressReporter:
    """Report sink rendering a run to the console.

    Not thread-safe on its own; the engine always calls it through
    ``synchronize``.
    """

    def __init__(self, console: Console | None = None, *, live: bool | None = None) -> None:
        self._console = console or get_console()
        self._live = is_tty() if live is None else live
        self._progress: Progress | None = None
        self._task: TaskID | None = None
        self._stack = ExitStack()

    def __call__(self, event: ReportEvent) -> None:
        output = capture.read_test_buffer() if isinstance(event, (Fail, Error)) else ""
        with capture.passthrough():
            match event:
                case BeginRun(count=count):
                    self._begin(count)
                case EndTest():
                    self._advance()
                case Fail() | Error():
                    self._print_failure(event, output)
                case LongTest(unit=unit, duration_ms=duration_ms):
                    self._print(
                        f"[yellow]LONG TEST[/yellow] in {escape(unit.id)}\n"
                        f"Test took {duration_ms / 1000:.3f} seconds to run"
                    )
                case Summary():
                    self._end(event)

    def _print(self, message: str) -> None:
        self._console.print(message, highlight=False)

    def _begin(self, count: int) -> None:
        if not self._live:
            return
        self._progress = Progress(
            TextColumn("[cyan]{task.description}"),
            BarColumn(bar_width=40, style="cyan", complete_style="green"),
            MofNCompleteColumn(),
            console=self._console,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        self._task = self._progress.add_task("Testing", total=count)
        self._stack.enter_context(suppress_console_logs())
        self._stack.enter_context(self._progress)

    def _advance(self) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.advance(self._task)

    def _stop(self) -> None:
        self._stack.close()
        self._progress = None
        self._task = None

    def _print_failure(self, event: Fail | Error, output: str) -> None:
        label = "[red]FAIL[/red]" if isinstance(event, Fail) else "[red]ERROR[/red]"
        lines = [f"{label} in {escape(describe_path(event.testing_path))}"]
        if event.message:
            lines.append(escape(event.message))
        if event.actual is not None:
            if isinstance(event, Error):
                lines.append(escape("".join(traceback.format_exception(event.actual)).rstrip()))
            else:
                lines.append(escape(f"actual: {event.actual!r}"))
        if output:
            lines.append(f"[dim]--- Test output ---[/dim]\n{escape(output.rstrip())}")
        self._print("\n".join(lines))

    def _end(self, summary: Summary) -> None:
        self._stop()
        counters = summary.counters
        style = "red" if counters.has_failures else "green"
        self._console.print(
            f"\nRan {pluralize(counters.test, 'test')} in {summary.duration_ms / 1000:.3f} seconds",
            highlight=False,
        )
        self._console.print(
            f"[{style}]{counters.passed} passed, "
            f"{pluralize(counters.failed, 'failure')}, "
            f"{pluralize(counters.error, 'error')}.[/{style}]",
            highlight=False,
        )
