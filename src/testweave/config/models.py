"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TESTWEAVE__SECTION__KEY)
3. Repo YAML (.testweave/config.yaml)
4. Global YAML (~/.config/testweave/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TESTWEAVE__<SECTION>__<KEY>=<VALUE>

Examples:
    TESTWEAVE__LOGGING__LEVEL=DEBUG
    TESTWEAVE__RUNNER__THREADS=8
    TESTWEAVE__RUNNER__MULTITHREAD=vars
    TESTWEAVE__RUNNER__TEST_WARN_TIME_MS=500
"""

from __future__ import annotations

import os
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TESTWEAVE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every namespace and pool dispatch.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class MultithreadMode(StrEnum):
    """Which levels of a run are dispatched through a worker pool."""

    ALL = "all"
    NAMESPACES = "namespaces"
    VARS = "vars"
    NONE = "none"

    @property
    def namespaces(self) -> bool:
        return self in (MultithreadMode.ALL, MultithreadMode.NAMESPACES)

    @property
    def vars(self) -> bool:
        return self in (MultithreadMode.ALL, MultithreadMode.VARS)


def default_threads() -> int:
    """Available parallelism plus two."""
    return (os.cpu_count() or 1) + 2


class RunOptions(BaseModel):
    """Options for a single test run.

    Env vars (through the ``runner`` section):
        TESTWEAVE__RUNNER__FAIL_FAST: Stop dispatching after the first failure
        TESTWEAVE__RUNNER__CAPTURE_OUTPUT: Print unit output only on failure
        TESTWEAVE__RUNNER__MULTITHREAD: all, namespaces, vars or none
        TESTWEAVE__RUNNER__THREADS: Worker pool size
        TESTWEAVE__RUNNER__TEST_WARN_TIME_MS: Slow test threshold
    """

    fail_fast: bool = Field(
        default=False,
        description="Stop dispatching new tests after the first failure or error.",
    )
    capture_output: bool = Field(
        default=True,
        description="Buffer test output and print it only if the test fails.",
    )
    multithread: MultithreadMode = Field(
        default=MultithreadMode.ALL,
        description="all: namespaces and tests in parallel; namespaces: namespaces in "
        "parallel, their tests serially; vars: namespaces serially, their tests in "
        "parallel; none: fully serial.",
    )
    threads: int = Field(
        default_factory=default_threads,
        description="Worker pool size. Defaults to available CPUs + 2.",
    )
    test_warn_time_ms: float | None = Field(
        default=None,
        description="Report any test that takes at least this long (milliseconds).",
    )
    report: Callable[..., Any] | None = Field(
        default=None,
        exclude=True,
        description="Report sink. Defaults to the progress reporter.",
    )

    @field_validator("multithread", mode="before")
    @classmethod
    def coerce_multithread(cls, v: Any) -> Any:
        if v is True:
            return MultithreadMode.ALL
        if v is False or v is None:
            return MultithreadMode.NONE
        if isinstance(v, str):
            v = v.lower()
            return {"true": "all", "false": "none"}.get(v, v)
        return v

    @field_validator("threads")
    @classmethod
    def validate_threads(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"threads must be at least 1, got {v}")
        return v

    @field_validator("test_warn_time_ms")
    @classmethod
    def validate_warn_time(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError(f"test_warn_time_ms must be non-negative, got {v}")
        return v


class TestWeaveConfig(BaseModel):
    """Root configuration for TestWeave.

    All settings can be configured via:
    1. Environment variables: TESTWEAVE__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    __test__ = False

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunOptions = Field(default_factory=RunOptions)
