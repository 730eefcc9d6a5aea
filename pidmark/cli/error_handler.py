"""Global exception handling for pidmark.

This module provides the CLI's own exception classes and a decorator that
turns both those and the PID file errors into consistent messages and
exit codes.
"""

from functools import wraps
from typing import Callable, TypeVar, Any
import logging

import typer
from rich.console import Console

from pidmark.cli.exit_codes import ExitCode
from pidmark.pidfile.exceptions import PidFileError

# Console for error output (stderr)
console = Console(stderr=True)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class PidmarkError(Exception):
    """Base exception for the pidmark CLI.

    Attributes:
        message: Error message
        exit_code: Exit code to use when exiting
        details: Optional dictionary of additional error details
    """

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message
            exit_code: Optional override for exit code
            details: Optional dictionary of additional error details
        """
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(PidmarkError):
    """Configuration-related error.

    Examples:
        - Unknown default signal in config file
        - Invalid log level
    """

    exit_code = ExitCode.CONFIGURATION_ERROR


class ValidationError(PidmarkError):
    """Validation error for user input.

    Examples:
        - Unknown signal name
        - PID argument that is not a number
    """

    exit_code = ExitCode.INVALID_ARGUMENT


def _report(message: str, details: dict[str, Any]) -> None:
    console.print(f"[red]Error:[/red] {message}")
    for key, value in details.items():
        console.print(f"  [dim]{key}:[/dim] {value}")


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling across CLI commands.

    Handles:
    - PidmarkError subclasses: message plus their own exit code
    - PidFileError subclasses: message plus the exit code for their kind
    - KeyboardInterrupt: cancellation message with exit code 130
    - Other exceptions: generic error with exit code 1

    Example:
        @app.command()
        @handle_errors
        def my_command():
            raise ValidationError("Unknown signal: FOO")
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except PidmarkError as e:
            logger.error(
                f"PidmarkError: {e.message}",
                extra={"exit_code": e.exit_code, "details": e.details},
            )
            _report(e.message, e.details)
            raise typer.Exit(code=e.exit_code)

        except PidFileError as e:
            exit_code = ExitCode.for_error_kind(e.kind)
            logger.error(f"{type(e).__name__}: {e}", extra={"exit_code": exit_code})

            details: dict[str, Any] = {}
            if e.path:
                details["path"] = e.path
            if e.pid is not None:
                details["pid"] = e.pid
            _report(e.message, details)
            raise typer.Exit(code=exit_code)

        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user.[/yellow]")
            logger.info("Operation cancelled by user (KeyboardInterrupt)")
            raise typer.Exit(code=ExitCode.CANCELLED)

        except typer.Exit:
            raise

        except Exception as e:
            logger.exception("Unexpected error occurred")
            console.print(f"[red]Unexpected error:[/red] {e}")
            console.print("[dim]Run with --debug for more details[/dim]")
            raise typer.Exit(code=ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore[return-value]
