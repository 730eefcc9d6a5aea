"""CLI command modules for pidmark.

This package contains the command implementations and the supporting
exit codes and error handling.
"""

from pidmark.cli import pid

from pidmark.cli.exit_codes import ExitCode
from pidmark.cli.error_handler import (
    PidmarkError,
    ConfigurationError,
    ValidationError,
    handle_errors,
)

__all__ = [
    # Command modules
    "pid",
    # Exit codes
    "ExitCode",
    # Error handling
    "PidmarkError",
    "ConfigurationError",
    "ValidationError",
    "handle_errors",
]
