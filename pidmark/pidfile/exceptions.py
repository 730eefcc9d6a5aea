"""Exceptions for PID file operations."""

import errno as errno_codes
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Union


class ErrorKind(Enum):
    """Classified failure kinds for PID file operations."""

    NOT_FOUND = auto()          # Path or content absent when a read was required
    ALREADY_EXISTS = auto()     # Exclusive create collided
    PERMISSION_DENIED = auto()  # OS denied stat/read/write/signal
    PROCESS_NOT_FOUND = auto()  # Signal target absent
    IO_ERROR = auto()           # Any other OS failure
    INVALID_CONTENT = auto()    # File read fine but holds no PID


class PidFileError(Exception):
    """Base exception for PID file errors."""

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        pid: Optional[int] = None,
        errno: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.pid = pid
        self.errno = errno

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"(path: {self.path})")
        if self.pid is not None:
            parts.append(f"(pid: {self.pid})")
        return " ".join(parts)


class NotFoundError(PidFileError):
    """Raised when the PID file is missing."""
    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(PidFileError):
    """Raised when an exclusive create finds the path taken."""
    kind = ErrorKind.ALREADY_EXISTS


class PermissionDeniedError(PidFileError):
    """Raised when the OS refuses a file operation or signal."""
    kind = ErrorKind.PERMISSION_DENIED


class ProcessNotFoundError(PidFileError):
    """Raised when the recorded process does not exist."""
    kind = ErrorKind.PROCESS_NOT_FOUND


class PidIOError(PidFileError):
    """Raised for any other OS-level failure."""
    kind = ErrorKind.IO_ERROR


class InvalidContentError(PidFileError):
    """Raised when a PID file does not contain a decimal PID."""
    kind = ErrorKind.INVALID_CONTENT


_ERRNO_CLASSES: dict[int, type[PidFileError]] = {
    errno_codes.ENOENT: NotFoundError,
    errno_codes.ENOTDIR: NotFoundError,
    errno_codes.EEXIST: AlreadyExistsError,
    errno_codes.EACCES: PermissionDeniedError,
    errno_codes.EPERM: PermissionDeniedError,
    errno_codes.ESRCH: ProcessNotFoundError,
}


def error_from_os_error(
    exc: OSError,
    path: Optional[Union[str, Path]] = None,
    pid: Optional[int] = None,
) -> PidFileError:
    """Classify an OSError into the matching PidFileError subclass.

    Args:
        exc: The OS error raised by a file or signal primitive
        path: PID file path involved, if any
        pid: Process identifier involved, if any

    Returns:
        A PidFileError subclass instance chained to ``exc``
    """
    error_class = _ERRNO_CLASSES.get(exc.errno, PidIOError)
    message = exc.strerror or str(exc)
    error = error_class(message, path=path, pid=pid, errno=exc.errno)
    error.__cause__ = exc
    return error
