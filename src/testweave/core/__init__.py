"""Core module exports."""

from testweave.core.errors import (
    ConfigError,
    DiscoveryError,
    ErrorCode,
    TestWeaveError,
)
from testweave.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from testweave.core.progress import pluralize, status

__all__ = [
    # Errors
    "TestWeaveError",
    "ConfigError",
    "DiscoveryError",
    "ErrorCode",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "status",
]
