"""PID file operations.

Stateless functions over a filesystem path. ``exists``, ``remove``,
``is_running``, ``read_pid`` and ``clear_if_stale`` never raise and fold
every failure into their return value. ``create`` and ``terminate`` raise
a classified ``PidFileError`` so callers can tell "already running" from
"permission denied".

Only the exclusive create is atomic. ``exists`` (stat, then read) and
``terminate`` (read, then signal) are best-effort and can race with
another process rewriting the same file.
"""

import errno
import logging
import os
import re
import signal
import stat
from pathlib import Path
from typing import Callable, Optional, TypeVar, Union

from pidmark.pidfile.exceptions import (
    ErrorKind,
    InvalidContentError,
    PidFileError,
    PidIOError,
    error_from_os_error,
)
from pidmark.pidfile.handle import PidHandle
from pidmark.pidfile.hooks import ExitHookRegistry
from pidmark.pidfile.results import OpResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, os.PathLike]
PidLike = Union[int, str]
SignalLike = Union[int, str, signal.Signals]

_PID_PATTERN = re.compile(r"-?[0-9]+")


def _attempt(
    action: Callable[[], T],
    path: Optional[PathLike] = None,
    pid: Optional[int] = None,
) -> OpResult[T]:
    """Run an OS call and classify any OSError it raises."""
    try:
        return OpResult.success(action())
    except OSError as e:
        return OpResult.failure(error_from_os_error(e, path=path, pid=pid))


def _kill(pid: int, signum: int) -> None:
    try:
        os.kill(pid, signum)
    except OverflowError as e:
        # Outside the platform's pid_t range, so it cannot name a process
        raise ProcessLookupError(errno.ESRCH, os.strerror(errno.ESRCH)) from e


def _read_text(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def parse_pid(value: PidLike) -> int:
    """Parse a PID from an int or its decimal text form.

    Args:
        value: PID as an int or decimal string (whitespace is ignored)

    Returns:
        The PID as an int

    Raises:
        ValueError: If the value is not a decimal integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid PID: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not _PID_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid PID: {value!r}")
    return int(text)


def resolve_signal(sig: SignalLike) -> int:
    """Resolve a signal given by number or name.

    Accepts ``signal.Signals`` members, ints, decimal strings and names with
    or without the ``SIG`` prefix in any case (``"TERM"``, ``"sigkill"``).

    Raises:
        ValueError: If the name is not a known signal
    """
    if isinstance(sig, int):
        return int(sig)

    name = str(sig).strip()
    if name.isdigit():
        return int(name)

    name = name.upper()
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    try:
        return int(signal.Signals[name])
    except KeyError:
        raise ValueError(f"Unknown signal: {sig!r}") from None


def is_running(pid: PidLike) -> bool:
    """Check if a process is alive using signal 0.

    A process owned by another user still counts as running. Any failure
    other than a permission error reports False, so False does not always
    mean the process is confirmed gone.

    Args:
        pid: PID as an int or decimal string

    Returns:
        True if the process exists
    """
    try:
        pid = parse_pid(pid)
    except ValueError:
        logger.debug(f"Not a PID: {pid!r}")
        return False

    result = _attempt(lambda: _kill(pid, 0), pid=pid)
    if result.ok:
        return True
    return result.kind is ErrorKind.PERMISSION_DENIED


def exists(path: PathLike) -> bool:
    """Check if a PID file exists and its process is running.

    A missing path reports False. Any other stat or read failure reports
    True, since absence cannot be confirmed. A path that exists but is not
    a regular file (a directory, a FIFO) reports False; this differs from
    the stat-failure case and is kept deliberately, so nothing but a
    regular file should live at a PID file path.

    Args:
        path: Path to the PID file

    Returns:
        True if the file is present and names a live process
    """
    stat_result = _attempt(lambda: os.stat(path), path=path)
    if stat_result.failed:
        logger.debug(f"stat failed for {path}: {stat_result.error}")
        # ENOENT and ENOTDIR both mean nothing is there
        return stat_result.kind is not ErrorKind.NOT_FOUND

    if not stat.S_ISREG(stat_result.value.st_mode):
        logger.debug(f"{path} is not a regular file")
        return False

    content = _attempt(lambda: _read_text(path), path=path)
    if content.failed:
        logger.debug(f"read failed for {path}: {content.error}")
        return True

    return is_running(content.value)


def _write_all(fd: int, data: bytes, path: PathLike) -> None:
    view = memoryview(data)
    offset = 0
    while offset < len(data):
        written = _attempt(lambda: os.write(fd, view[offset:]), path=path).unwrap()
        if written == 0:
            raise PidIOError(
                f"Wrote 0 bytes after {offset} of {len(data)}", path=path
            )
        offset += written


def create(
    path: PathLike,
    force: bool = False,
    registry: Optional[ExitHookRegistry] = None,
) -> PidHandle:
    """Create a PID file holding the current process ID.

    If writing fails after an exclusive create, the partial file is
    removed so a later create is not blocked by it.

    Args:
        path: Path to the PID file
        force: Overwrite an existing file instead of failing
        registry: Exit hook registry handed to the returned handle

    Returns:
        Handle bound to ``path``

    Raises:
        AlreadyExistsError: If ``force`` is False and the path exists
        PermissionDeniedError: If the file cannot be opened or written
        NotFoundError: If the parent directory does not exist
        PidIOError: For any other OS failure
    """
    data = f"{os.getpid()}\n".encode("utf-8")
    flags = os.O_WRONLY | os.O_CREAT | (os.O_TRUNC if force else os.O_EXCL)

    fd = _attempt(lambda: os.open(path, flags, 0o666), path=path).unwrap()
    try:
        _write_all(fd, data, path)
    except PidFileError:
        # The file is ours only if we created it exclusively
        if not force:
            logger.warning(f"Write to {path} failed, removing the partial PID file")
            _attempt(lambda: os.unlink(path), path=path)
        raise
    finally:
        _attempt(lambda: os.close(fd), path=path).unwrap()

    logger.info(f"Created PID file {path} (PID: {os.getpid()}, force={force})")
    return PidHandle(path, registry=registry)


def remove(path: PathLike) -> bool:
    """Remove a PID file. Does not raise.

    Returns:
        True if the file was removed, False otherwise (including when it
        was already gone)
    """
    result = _attempt(lambda: os.unlink(path), path=path)
    if result.failed:
        logger.debug(f"Could not remove {path}: {result.error}")
        return False

    logger.info(f"Removed PID file {path}")
    return True


def terminate(path: PathLike, sig: SignalLike = signal.SIGTERM) -> int:
    """Send a signal to the process recorded in a PID file.

    The PID is read as-is, with no staleness check and no range check.
    As with ``os.kill``, a recorded 0 signals the caller's process group
    and a negative value signals a group or, for -1, every process the
    caller may signal. Callers that cannot trust the file should check
    ``read_pid`` first.

    Args:
        path: Path to the PID file
        sig: Signal number or name

    Returns:
        The PID that was signalled

    Raises:
        ValueError: If ``sig`` is not a known signal
        NotFoundError: If the PID file is missing
        InvalidContentError: If the file does not hold a PID
        ProcessNotFoundError: If the recorded process does not exist
        PermissionDeniedError: If reading or signalling is not permitted
        PidIOError: For any other OS failure
    """
    signum = resolve_signal(sig)
    text = _attempt(lambda: _read_text(path), path=path).unwrap()

    try:
        pid = parse_pid(text)
    except ValueError as e:
        raise InvalidContentError(str(e), path=path) from e

    _attempt(lambda: _kill(pid, signum), path=path, pid=pid).unwrap()
    logger.info(f"Sent signal {signum} to PID {pid} from {path}")
    return pid


def read_pid(path: PathLike) -> Optional[int]:
    """Read the PID recorded in a file. Does not raise.

    Returns:
        The PID, or None if the file is missing, unreadable or malformed
    """
    content = _attempt(lambda: _read_text(path), path=path)
    if content.failed:
        return None

    try:
        return parse_pid(content.value)
    except ValueError:
        return None


def clear_if_stale(path: PathLike) -> bool:
    """Remove a PID file whose process is no longer running.

    Returns:
        True if the file was stale and has been removed
    """
    pid = read_pid(path)
    if pid is None:
        return False

    if is_running(pid):
        return False

    logger.info(f"Clearing stale PID file {path} (PID: {pid})")
    return remove(path)
