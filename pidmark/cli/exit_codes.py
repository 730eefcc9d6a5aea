"""Standard exit codes for pidmark.

This module defines the exit codes used across the pidmark CLI so shell
scripts can branch on the outcome of a command.
"""

from pidmark.pidfile.exceptions import ErrorKind


class ExitCode:
    """Standard exit codes for pidmark.

    These codes follow common Unix conventions where possible:
    - 0: Success
    - 1: General error
    - 3: Program is not running (LSB init-script status convention)
    - 130: Script terminated by Ctrl+C (SIGINT)

    pidmark-specific codes:
    - 2: Configuration error
    - 4: PID file already exists
    - 5: Recorded process not found
    - 6: Other I/O error
    - 7: Invalid argument
    - 8: Not found
    - 9: Permission denied
    - 10: PID file content is not a PID
    """

    # Standard success
    SUCCESS = 0

    # General errors
    GENERAL_ERROR = 1

    # pidmark-specific errors
    CONFIGURATION_ERROR = 2
    NOT_RUNNING = 3
    ALREADY_EXISTS = 4
    PROCESS_NOT_FOUND = 5
    IO_ERROR = 6
    INVALID_ARGUMENT = 7
    NOT_FOUND = 8
    PERMISSION_DENIED = 9
    INVALID_CONTENT = 10

    # Signal-based exits (128 + signal number)
    CANCELLED = 130  # Ctrl+C (SIGINT = 2)

    @classmethod
    def get_name(cls, code: int) -> str:
        """Get the name of an exit code.

        Args:
            code: The exit code value

        Returns:
            Human-readable name for the exit code
        """
        names = {
            cls.SUCCESS: "SUCCESS",
            cls.GENERAL_ERROR: "GENERAL_ERROR",
            cls.CONFIGURATION_ERROR: "CONFIGURATION_ERROR",
            cls.NOT_RUNNING: "NOT_RUNNING",
            cls.ALREADY_EXISTS: "ALREADY_EXISTS",
            cls.PROCESS_NOT_FOUND: "PROCESS_NOT_FOUND",
            cls.IO_ERROR: "IO_ERROR",
            cls.INVALID_ARGUMENT: "INVALID_ARGUMENT",
            cls.NOT_FOUND: "NOT_FOUND",
            cls.PERMISSION_DENIED: "PERMISSION_DENIED",
            cls.INVALID_CONTENT: "INVALID_CONTENT",
            cls.CANCELLED: "CANCELLED",
        }
        return names.get(code, f"UNKNOWN({code})")

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get the description of an exit code.

        Args:
            code: The exit code value

        Returns:
            Human-readable description for the exit code
        """
        descriptions = {
            cls.SUCCESS: "Operation completed successfully",
            cls.GENERAL_ERROR: "An unexpected error occurred",
            cls.CONFIGURATION_ERROR: "Configuration error or invalid config file",
            cls.NOT_RUNNING: "The recorded process is not running",
            cls.ALREADY_EXISTS: "PID file already exists",
            cls.PROCESS_NOT_FOUND: "The recorded process does not exist",
            cls.IO_ERROR: "File or signal operation failed",
            cls.INVALID_ARGUMENT: "Invalid command-line argument",
            cls.NOT_FOUND: "PID file not found",
            cls.PERMISSION_DENIED: "Permission denied",
            cls.INVALID_CONTENT: "PID file does not contain a PID",
            cls.CANCELLED: "Operation cancelled by user",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

    @classmethod
    def for_error_kind(cls, kind: ErrorKind) -> int:
        """Map a PID file error kind to its exit code."""
        codes = {
            ErrorKind.NOT_FOUND: cls.NOT_FOUND,
            ErrorKind.ALREADY_EXISTS: cls.ALREADY_EXISTS,
            ErrorKind.PERMISSION_DENIED: cls.PERMISSION_DENIED,
            ErrorKind.PROCESS_NOT_FOUND: cls.PROCESS_NOT_FOUND,
            ErrorKind.IO_ERROR: cls.IO_ERROR,
            ErrorKind.INVALID_CONTENT: cls.INVALID_CONTENT,
        }
        return codes.get(kind, cls.GENERAL_ERROR)
