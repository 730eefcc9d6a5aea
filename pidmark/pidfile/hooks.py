"""Process-exit cleanup registry.

The registry collects cleanup callbacks and fires them when the
interpreter exits normally or when a termination signal arrives. Handles
receive the registry at construction, so tests can pass an instance with
``install_handlers=False`` and never touch real signal handlers.
"""

import atexit
import logging
import signal
from enum import Enum
from types import FrameType
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]


class ExitReason(Enum):
    """Why the registry fired."""

    EXIT = "exit"
    SIGNAL = "signal"


class ExitHookRegistry:
    """Registry of callbacks run at process exit.

    Example:
        registry = ExitHookRegistry.get_instance()
        registry.register(lambda: print("bye"))
    """

    _instance: Optional["ExitHookRegistry"] = None

    def __init__(
        self,
        signals: Iterable[signal.Signals] = (signal.SIGTERM,),
        install_handlers: bool = True,
    ):
        """Initialize the registry.

        Args:
            signals: Signals that trigger cleanup
            install_handlers: Install the atexit hook and signal handlers
                on first registration
        """
        self._signals = tuple(signals)
        self._install_handlers = install_handlers
        self._callbacks: List[Callback] = []
        self._previous_handlers: Dict[int, Any] = {}
        self._installed = False

    @classmethod
    def get_instance(cls) -> "ExitHookRegistry":
        """Get the process-wide registry, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide registry."""
        cls._instance = None

    @property
    def callbacks(self) -> Tuple[Callback, ...]:
        """Registered callbacks in registration order."""
        return tuple(self._callbacks)

    @property
    def installed(self) -> bool:
        """Whether the OS-level hooks are in place."""
        return self._installed

    def register(self, callback: Callback) -> None:
        """Register a cleanup callback.

        Args:
            callback: Zero-argument callable run when the registry fires
        """
        self._callbacks.append(callback)
        if self._install_handlers and not self._installed:
            self.install()

    def install(self) -> None:
        """Install the atexit hook and signal handlers. Safe to repeat."""
        if self._installed:
            return

        atexit.register(self.fire, ExitReason.EXIT)

        for sig in self._signals:
            try:
                self._previous_handlers[sig] = signal.getsignal(sig)
                signal.signal(sig, self._on_signal)
            except (ValueError, OSError) as e:
                # Only the main thread may install handlers
                logger.warning(f"Cannot install handler for {sig.name}: {e}")

        self._installed = True

    def fire(self, reason: ExitReason) -> None:
        """Run every registered callback.

        A failing callback is logged and does not prevent the rest from
        running.

        Args:
            reason: What triggered the cleanup
        """
        logger.debug(f"Running {len(self._callbacks)} exit hook(s) ({reason.value})")
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                logger.exception(f"Exit hook {callback!r} failed")

    def _on_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        logger.info(f"Received signal {signal.Signals(signum).name}, running exit hooks")
        self.fire(ExitReason.SIGNAL)

        previous = self._previous_handlers.get(signum, signal.SIG_DFL)
        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_IGN:
            return
        else:
            raise SystemExit(128 + signum)
