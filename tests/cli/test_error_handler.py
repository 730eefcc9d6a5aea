"""Tests for error handler module."""

import pytest
import typer

from pidmark.cli.error_handler import (
    PidmarkError,
    ConfigurationError,
    ValidationError,
    handle_errors,
)
from pidmark.cli.exit_codes import ExitCode
from pidmark.pidfile.exceptions import (
    AlreadyExistsError,
    NotFoundError,
    PermissionDeniedError,
    ProcessNotFoundError,
)


class TestPidmarkError:
    """Test base PidmarkError class."""

    def test_basic_error(self) -> None:
        """Test basic error creation."""
        error = PidmarkError("Test error")
        assert error.message == "Test error"
        assert error.exit_code == ExitCode.GENERAL_ERROR
        assert error.details == {}

    def test_error_with_exit_code(self) -> None:
        """Test error with custom exit code."""
        error = PidmarkError("Test error", exit_code=ExitCode.CONFIGURATION_ERROR)
        assert error.exit_code == ExitCode.CONFIGURATION_ERROR

    def test_error_str_with_details(self) -> None:
        """Test string representation with details."""
        error = PidmarkError("Test error", details={"key": "value"})
        assert "Test error" in str(error)
        assert "key=value" in str(error)

    def test_subclass_exit_codes(self) -> None:
        """Test subclass default exit codes."""
        assert ConfigurationError("x").exit_code == ExitCode.CONFIGURATION_ERROR
        assert ValidationError("x").exit_code == ExitCode.INVALID_ARGUMENT


class TestHandleErrors:
    """Test handle_errors decorator."""

    def test_passes_through_return_value(self) -> None:
        """Test that successful calls are untouched."""
        @handle_errors
        def ok() -> int:
            return 42

        assert ok() == 42

    def test_pidmark_error(self) -> None:
        """Test that PidmarkError exits with its code."""
        @handle_errors
        def fail() -> None:
            raise ValidationError("bad input", details={"arg": "x"})

        with pytest.raises(typer.Exit) as exc_info:
            fail()

        assert exc_info.value.exit_code == ExitCode.INVALID_ARGUMENT

    @pytest.mark.parametrize(
        "error, expected",
        [
            (NotFoundError("missing", path="/tmp/x.pid"), ExitCode.NOT_FOUND),
            (AlreadyExistsError("taken"), ExitCode.ALREADY_EXISTS),
            (PermissionDeniedError("denied", pid=1), ExitCode.PERMISSION_DENIED),
            (ProcessNotFoundError("gone", pid=9), ExitCode.PROCESS_NOT_FOUND),
        ],
    )
    def test_pid_file_errors(self, error, expected) -> None:
        """Test that PID file errors exit with the code for their kind."""
        @handle_errors
        def fail() -> None:
            raise error

        with pytest.raises(typer.Exit) as exc_info:
            fail()

        assert exc_info.value.exit_code == expected

    def test_keyboard_interrupt(self) -> None:
        """Test that Ctrl+C exits with the cancelled code."""
        @handle_errors
        def interrupted() -> None:
            raise KeyboardInterrupt()

        with pytest.raises(typer.Exit) as exc_info:
            interrupted()

        assert exc_info.value.exit_code == ExitCode.CANCELLED

    def test_typer_exit_passes_through(self) -> None:
        """Test that typer.Exit is re-raised unchanged."""
        @handle_errors
        def exits() -> None:
            raise typer.Exit(code=ExitCode.NOT_RUNNING)

        with pytest.raises(typer.Exit) as exc_info:
            exits()

        assert exc_info.value.exit_code == ExitCode.NOT_RUNNING

    def test_unexpected_error(self) -> None:
        """Test that other exceptions exit with the general error code."""
        @handle_errors
        def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(typer.Exit) as exc_info:
            boom()

        assert exc_info.value.exit_code == ExitCode.GENERAL_ERROR
