"""Tests for the testweave command."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from testweave.cli.main import cli

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory used as the working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "testweave.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"
    )
    return tmp_path


def _write(path: Path, source: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source)


class TestCli:
    """Tests for the testweave command."""

    def test_passing_suite_exits_zero(self, project: Path) -> None:
        """A suite with only passing tests exits 0 and prints a summary."""
        _write(
            project / "test" / "test_cli_passing.py",
            "def test_one():\n    pass\n\ndef test_two():\n    pass\n",
        )
        result = runner.invoke(cli, [])

        assert result.exit_code == 0, result.output
        assert "Ran 2 tests" in result.output
        assert "2 passed, 0 failures, 0 errors." in result.output

    def test_failing_suite_exits_one(self, project: Path) -> None:
        """Any failure makes the exit code 1."""
        _write(
            project / "suite" / "test_cli_failing.py",
            "def test_bad():\n    raise AssertionError('broken')\n",
        )
        result = runner.invoke(cli, ["suite", "--multithread", "none"])

        assert result.exit_code == 1
        assert "FAIL in test_cli_failing::test_bad" in result.output
        assert "broken" in result.output

    def test_no_tests_found(self, project: Path) -> None:
        """An empty source directory reports that nothing was found."""
        (project / "test").mkdir()
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "No tests found." in result.output

    def test_missing_default_directory_exits_two(self, project: Path) -> None:
        """Without sources and without a ./test directory, discovery fails."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 2
        assert "DISCOVERY_SOURCE_NOT_FOUND" in result.output
        assert "No tests found." not in result.output

    def test_missing_source_exits_two(self, project: Path) -> None:
        """An unresolvable source is a usage error."""
        result = runner.invoke(cli, ["tw_cli_no_such_module"])

        assert result.exit_code == 2
        assert "DISCOVERY_SOURCE_NOT_FOUND" in result.output

    def test_invalid_config_exits_two(self, project: Path) -> None:
        """Invalid config is reported before any tests run."""
        _write(project / ".testweave" / "config.yaml", "runner:\n  threads: 0\n")
        result = runner.invoke(cli, [])

        assert result.exit_code == 2
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_options_override_config(self, project: Path) -> None:
        """Command-line flags win over the config file."""
        _write(project / ".testweave" / "config.yaml", "runner:\n  fail_fast: true\n")
        _write(
            project / "test" / "test_cli_override.py",
            "def test_a():\n    raise AssertionError('a')\n\n"
            "def test_b():\n    raise AssertionError('b')\n",
        )
        result = runner.invoke(cli, ["--no-fail-fast", "--multithread", "none"])

        assert result.exit_code == 1
        assert "Ran 2 tests" in result.output

    def test_fail_fast_from_config(self, project: Path) -> None:
        """fail_fast from the config file stops after the first failure."""
        _write(project / ".testweave" / "config.yaml", "runner:\n  fail_fast: true\n")
        _write(
            project / "test" / "test_cli_fail_fast.py",
            "def test_a():\n    raise AssertionError('a')\n\n"
            "def test_b():\n    raise AssertionError('b')\n",
        )
        result = runner.invoke(cli, ["--multithread", "none"])

        assert result.exit_code == 1
        assert "Ran 1 test " in result.output

    def test_rejects_zero_threads(self, project: Path) -> None:
        """click validates the thread count."""
        result = runner.invoke(cli, ["--threads", "0"])
        assert result.exit_code == 2
