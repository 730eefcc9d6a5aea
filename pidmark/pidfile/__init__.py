"""PID file module for pidmark.

This module records the running process in a PID file, checks whether a
recorded process is still alive, and signals or cleans up recorded
instances.
"""

from pidmark.pidfile.exceptions import (
    AlreadyExistsError,
    ErrorKind,
    InvalidContentError,
    NotFoundError,
    PermissionDeniedError,
    PidFileError,
    PidIOError,
    ProcessNotFoundError,
)
from pidmark.pidfile.handle import PidHandle
from pidmark.pidfile.hooks import ExitHookRegistry, ExitReason
from pidmark.pidfile.results import OpResult
from pidmark.pidfile.store import (
    clear_if_stale,
    create,
    exists,
    is_running,
    parse_pid,
    read_pid,
    remove,
    resolve_signal,
    terminate,
)

__all__ = [
    "AlreadyExistsError",
    "ErrorKind",
    "ExitHookRegistry",
    "ExitReason",
    "InvalidContentError",
    "NotFoundError",
    "OpResult",
    "PermissionDeniedError",
    "PidFileError",
    "PidHandle",
    "PidIOError",
    "ProcessNotFoundError",
    "clear_if_stale",
    "create",
    "exists",
    "is_running",
    "parse_pid",
    "read_pid",
    "remove",
    "resolve_signal",
    "terminate",
]
