"""Tests for the main CLI entry point."""

import logging

import pytest
from typer.testing import CliRunner

from pidmark import __version__
from pidmark.cli.exit_codes import ExitCode
from pidmark.config import clear_config_cache
from pidmark.main import _setup_logging, app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at an empty temporary directory."""
    monkeypatch.setenv("PIDMARK_CONFIG_DIR", str(tmp_path / "config"))
    clear_config_cache()
    yield
    clear_config_cache()


class TestMainApp:
    """Tests for the top-level app."""

    def test_version(self):
        """Test --version output."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == ExitCode.SUCCESS
        assert __version__ in result.output

    def test_help_lists_commands(self):
        """Test that help lists every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("status", "check", "read", "stop", "remove", "clean", "config"):
            assert command in result.output

    def test_quiet_and_verbose_conflict(self):
        """Test that --quiet and --verbose are mutually exclusive."""
        result = runner.invoke(app, ["--quiet", "--verbose", "config"])

        assert result.exit_code == ExitCode.INVALID_ARGUMENT

    def test_quiet_and_debug_conflict(self):
        """Test that --quiet and --debug are mutually exclusive."""
        result = runner.invoke(app, ["--quiet", "--debug", "config"])

        assert result.exit_code == ExitCode.INVALID_ARGUMENT


class TestSetupLogging:
    """Tests for _setup_logging."""

    def test_debug_level(self):
        """Test that --debug sets DEBUG."""
        _setup_logging(debug=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_default_level_from_config(self):
        """Test that the configured level is used without flags."""
        _setup_logging(default_level="error")

        assert logging.getLogger().level == logging.ERROR

    def test_invalid_default_level_falls_back(self):
        """Test that an unknown level falls back to WARNING."""
        _setup_logging(default_level="LOUD")

        assert logging.getLogger().level == logging.WARNING

    def test_log_file_created(self, tmp_path):
        """Test that the log file directory is created."""
        log_file = tmp_path / "logs" / "pidmark.log"

        _setup_logging(log_file=log_file)

        assert log_file.parent.exists()
        assert logging.getLogger().level == logging.DEBUG
