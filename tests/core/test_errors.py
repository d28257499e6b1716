"""Tests for core/errors.py module."""

from __future__ import annotations

from testweave.core.errors import ConfigError, DiscoveryError, ErrorCode, TestWeaveError


class TestTestWeaveError:
    """Tests for the base error."""

    def test_str_includes_code_and_name(self) -> None:
        """String form carries code, name and message."""
        err = ConfigError.parse_error("/tmp/config.yaml", "bad indent")
        assert str(err) == (
            "[2001] CONFIG_PARSE_ERROR: Failed to parse config at /tmp/config.yaml: bad indent"
        )

    def test_to_dict(self) -> None:
        """to_dict serializes every field."""
        err = DiscoveryError.not_found("pkg.mod")
        assert err.to_dict() == {
            "code": 7001,
            "error": "DISCOVERY_SOURCE_NOT_FOUND",
            "message": "No module, test or path named 'pkg.mod'",
            "details": {"source": "pkg.mod"},
        }

    def test_subclasses_share_base(self) -> None:
        """All errors can be caught as TestWeaveError."""
        assert isinstance(ConfigError.parse_error("x", "y"), TestWeaveError)
        assert isinstance(DiscoveryError.unsupported(1), TestWeaveError)


class TestDiscoveryError:
    """Tests for DiscoveryError factories."""

    def test_import_failed(self) -> None:
        """import_failed names the module and reason."""
        err = DiscoveryError.import_failed("pkg.tests", "SyntaxError")
        assert err.code == ErrorCode.DISCOVERY_IMPORT_FAILED
        assert err.details == {"module": "pkg.tests", "reason": "SyntaxError"}

    def test_unsupported(self) -> None:
        """unsupported records the offending type."""
        err = DiscoveryError.unsupported(3.5)
        assert err.code == ErrorCode.DISCOVERY_UNSUPPORTED_SOURCE
        assert err.details == {"type": "float"}
