"""Config module exports."""

from testweave.config.loader import load_config
from testweave.config.models import (
    LoggingConfig,
    LogOutputConfig,
    MultithreadMode,
    RunOptions,
    TestWeaveConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "MultithreadMode",
    "RunOptions",
    "TestWeaveConfig",
]
