"""Handle for a PID file created by this process."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from pidmark.pidfile.hooks import ExitHookRegistry

logger = logging.getLogger(__name__)


class PidHandle:
    """Reference to a PID file created by ``store.create``.

    The handle only remembers the path. It holds no file descriptor, and
    removing the file behind its back does not invalidate it; a second
    removal simply returns False.

    Example:
        handle = create(Path("/run/app.pid"))
        handle.remove_on_exit()
    """

    def __init__(
        self,
        path: Union[str, os.PathLike],
        registry: Optional[ExitHookRegistry] = None,
    ):
        """Initialize the handle.

        Args:
            path: Path of the PID file
            registry: Exit hook registry used by remove_on_exit(). Defaults
                to the process-wide registry.
        """
        self.path = Path(path)
        self._registry = registry
        self._registered = False

    def __repr__(self) -> str:
        return f"PidHandle({str(self.path)!r})"

    @property
    def registered(self) -> bool:
        """Whether remove() is registered to run at exit."""
        return self._registered

    def remove(self) -> bool:
        """Remove the PID file. Does not raise.

        Returns:
            True if the file was removed
        """
        from pidmark.pidfile import store

        return store.remove(self.path)

    def remove_on_exit(self) -> None:
        """Remove the PID file on normal exit or on SIGTERM."""
        if self._registered:
            return

        registry = self._registry or ExitHookRegistry.get_instance()
        registry.register(self.remove)
        self._registered = True
        logger.debug(f"Registered exit cleanup for {self.path}")
