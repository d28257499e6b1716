"""TestWeave error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Test discovery
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Test discovery (7xxx)
    DISCOVERY_SOURCE_NOT_FOUND = 7001
    DISCOVERY_IMPORT_FAILED = 7002
    DISCOVERY_UNSUPPORTED_SOURCE = 7003


@dataclass(frozen=True, slots=True)
class TestWeaveError(Exception):
    """Base error with structured context."""

    __test__ = False

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TestWeaveError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DiscoveryError(TestWeaveError):
    """Errors raised while resolving test sources into test units."""

    @classmethod
    def not_found(cls, source: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_SOURCE_NOT_FOUND,
            message=f"No module, test or path named '{source}'",
            details={"source": source},
        )

    @classmethod
    def import_failed(cls, module: str, reason: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_IMPORT_FAILED,
            message=f"Failed to import test module {module}: {reason}",
            details={"module": module, "reason": reason},
        )

    @classmethod
    def unsupported(cls, source: Any) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_UNSUPPORTED_SOURCE,
            message=f"Cannot find tests in object of type {type(source).__name__}",
            details={"type": type(source).__name__},
        )
