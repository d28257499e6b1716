"""TestWeave CLI - testweave command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from testweave.config.loader import load_config
from testweave.config.models import MultithreadMode, RunOptions
from testweave.core.errors import DiscoveryError, TestWeaveError
from testweave.core.logging import configure_logging
from testweave.core.progress import status
from testweave.runner.discovery import find_tests
from testweave.runner.engine import run_tests

DEFAULT_SOURCE = "test"


@click.command()
@click.version_option(version="0.1.0", prog_name="testweave")
@click.argument("sources", nargs=-1)
@click.option(
    "--fail-fast/--no-fail-fast",
    default=None,
    help="Stop after the first failure or error.",
)
@click.option(
    "--capture/--no-capture",
    "capture_output",
    default=None,
    help="Show test output only for failing tests.",
)
@click.option(
    "--multithread",
    type=click.Choice([m.value for m in MultithreadMode], case_sensitive=False),
    default=None,
    help="Which levels run in parallel.",
)
@click.option("--threads", type=click.IntRange(min=1), default=None, help="Worker pool size.")
@click.option(
    "--test-warn-time",
    "test_warn_time_ms",
    type=click.FloatRange(min=0),
    default=None,
    help="Warn about tests taking at least this many milliseconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    sources: tuple[str, ...],
    fail_fast: bool | None,
    capture_output: bool | None,
    multithread: str | None,
    threads: int | None,
    test_warn_time_ms: float | None,
    verbose: bool,
) -> None:
    """Run the tests found in SOURCES (directories, files or module names).

    Defaults to the ``test`` directory, which must then exist.
    """
    overrides: dict[str, Any] = {
        "fail_fast": fail_fast,
        "capture_output": capture_output,
        "multithread": multithread,
        "threads": threads,
        "test_warn_time_ms": test_warn_time_ms,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        config = load_config(Path.cwd())
    except TestWeaveError as e:
        status(escape(str(e)), style="error")
        sys.exit(2)

    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)

    try:
        if not sources and not Path(DEFAULT_SOURCE).is_dir():
            raise DiscoveryError.not_found(DEFAULT_SOURCE)
        units = find_tests(list(sources) or [DEFAULT_SOURCE])
    except TestWeaveError as e:
        status(escape(str(e)), style="error")
        sys.exit(2)

    options = RunOptions.model_validate({**config.runner.model_dump(), **overrides})
    summary = run_tests(units, options)
    sys.exit(1 if summary.counters.has_failures else 0)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
