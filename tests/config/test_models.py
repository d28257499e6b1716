"""Tests for config/models.py module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from testweave.config.models import (
    LogOutputConfig,
    MultithreadMode,
    RunOptions,
    default_threads,
)


class TestMultithreadMode:
    """Tests for MultithreadMode."""

    @pytest.mark.parametrize(
        ("mode", "namespaces", "vars_"),
        [
            (MultithreadMode.ALL, True, True),
            (MultithreadMode.NAMESPACES, True, False),
            (MultithreadMode.VARS, False, True),
            (MultithreadMode.NONE, False, False),
        ],
    )
    def test_levels(self, mode: MultithreadMode, namespaces: bool, vars_: bool) -> None:
        """Each mode parallelizes the expected levels."""
        assert mode.namespaces is namespaces
        assert mode.vars is vars_


class TestRunOptions:
    """Tests for RunOptions."""

    def test_defaults(self) -> None:
        """Defaults run everything in parallel with capture on."""
        options = RunOptions()
        assert options.fail_fast is False
        assert options.capture_output is True
        assert options.multithread == MultithreadMode.ALL
        assert options.threads == default_threads()
        assert options.test_warn_time_ms is None
        assert options.report is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, MultithreadMode.ALL),
            (False, MultithreadMode.NONE),
            (None, MultithreadMode.NONE),
            ("VARS", MultithreadMode.VARS),
            ("namespaces", MultithreadMode.NAMESPACES),
            ("true", MultithreadMode.ALL),
            ("false", MultithreadMode.NONE),
        ],
    )
    def test_multithread_coercion(self, value: object, expected: MultithreadMode) -> None:
        """Booleans and strings are accepted for multithread."""
        assert RunOptions.model_validate({"multithread": value}).multithread == expected

    def test_rejects_unknown_mode(self) -> None:
        """Unknown modes fail validation."""
        with pytest.raises(ValidationError):
            RunOptions.model_validate({"multithread": "sometimes"})

    def test_rejects_zero_threads(self) -> None:
        """The pool needs at least one worker."""
        with pytest.raises(ValidationError):
            RunOptions(threads=0)

    def test_rejects_negative_warn_time(self) -> None:
        """A negative slow-test threshold is invalid."""
        with pytest.raises(ValidationError):
            RunOptions(test_warn_time_ms=-1)

    def test_report_is_not_serialized(self) -> None:
        """The report sink is excluded from dumps."""
        dumped = RunOptions(report=print).model_dump()
        assert "report" not in dumped


class TestLogOutputConfig:
    """Tests for LogOutputConfig."""

    def test_relative_file_rejected(self) -> None:
        """File destinations must be absolute."""
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/run.log")

    def test_streams_accepted(self) -> None:
        """stderr and stdout are valid destinations."""
        assert LogOutputConfig(destination="stdout").destination == "stdout"
