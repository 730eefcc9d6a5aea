"""Tests for the exit hook registry."""

import os
import signal
import subprocess
import sys
import textwrap
from pathlib import Path
import pytest
from unittest.mock import Mock, patch

from pidmark.pidfile.hooks import ExitHookRegistry, ExitReason

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Runs in a child interpreter so the test process keeps its own handlers
CHILD_SCRIPT = textwrap.dedent("""
    import os
    import signal
    import sys
    import time

    from pidmark.pidfile import create

    path, mode = sys.argv[1], sys.argv[2]
    create(path).remove_on_exit()
    assert os.path.exists(path)

    if mode == "signal":
        os.kill(os.getpid(), signal.SIGTERM)
        time.sleep(30)
""")


def run_child(path, mode):
    """Run CHILD_SCRIPT and return the finished process."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(PROJECT_ROOT), env.get("PYTHONPATH")) if p
    )
    return subprocess.run(
        [sys.executable, "-c", CHILD_SCRIPT, str(path), mode],
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )


@pytest.fixture(autouse=True)
def reset_registry():
    """Forget the process-wide registry between tests."""
    ExitHookRegistry.reset_instance()
    yield
    ExitHookRegistry.reset_instance()


class TestRegister:
    """Tests for callback registration."""

    def test_register_keeps_order(self):
        """Test that callbacks are kept in registration order."""
        registry = ExitHookRegistry(install_handlers=False)
        first, second = Mock(), Mock()

        registry.register(first)
        registry.register(second)

        assert registry.callbacks == (first, second)

    def test_no_install_when_disabled(self):
        """Test that nothing OS-level happens with install_handlers=False."""
        registry = ExitHookRegistry(install_handlers=False)

        with patch("pidmark.pidfile.hooks.atexit.register") as mock_atexit, \
                patch("pidmark.pidfile.hooks.signal.signal") as mock_signal:
            registry.register(Mock())

        mock_atexit.assert_not_called()
        mock_signal.assert_not_called()
        assert registry.installed is False

    def test_first_register_installs_hooks(self):
        """Test that the first registration installs atexit and signal hooks."""
        registry = ExitHookRegistry()

        with patch("pidmark.pidfile.hooks.atexit.register") as mock_atexit, \
                patch("pidmark.pidfile.hooks.signal.getsignal", return_value=signal.SIG_DFL), \
                patch("pidmark.pidfile.hooks.signal.signal") as mock_signal:
            registry.register(Mock())
            registry.register(Mock())

        mock_atexit.assert_called_once_with(registry.fire, ExitReason.EXIT)
        mock_signal.assert_called_once_with(signal.SIGTERM, registry._on_signal)
        assert registry.installed is True

    def test_install_outside_main_thread_keeps_atexit(self):
        """Test that a signal install failure is tolerated."""
        registry = ExitHookRegistry()

        with patch("pidmark.pidfile.hooks.atexit.register") as mock_atexit, \
                patch("pidmark.pidfile.hooks.signal.getsignal", return_value=signal.SIG_DFL), \
                patch("pidmark.pidfile.hooks.signal.signal", side_effect=ValueError("main thread only")):
            registry.register(Mock())

        mock_atexit.assert_called_once()
        assert registry.installed is True


class TestFire:
    """Tests for firing the registry."""

    def test_fire_runs_all_callbacks(self):
        """Test that every callback runs."""
        registry = ExitHookRegistry(install_handlers=False)
        first, second = Mock(), Mock()
        registry.register(first)
        registry.register(second)

        registry.fire(ExitReason.EXIT)

        first.assert_called_once_with()
        second.assert_called_once_with()

    def test_failing_callback_does_not_stop_others(self):
        """Test that one failing callback does not block the rest."""
        registry = ExitHookRegistry(install_handlers=False)
        failing = Mock(side_effect=RuntimeError("boom"))
        after = Mock()
        registry.register(failing)
        registry.register(after)

        registry.fire(ExitReason.EXIT)

        after.assert_called_once_with()

    def test_fire_with_no_callbacks(self):
        """Test that firing an empty registry is a no-op."""
        ExitHookRegistry(install_handlers=False).fire(ExitReason.EXIT)


class TestSignalHandler:
    """Tests for the termination signal handler."""

    def test_default_handler_exits(self):
        """Test that SIG_DFL leads to SystemExit after cleanup."""
        registry = ExitHookRegistry(install_handlers=False)
        callback = Mock()
        registry.register(callback)
        registry._previous_handlers[signal.SIGTERM] = signal.SIG_DFL

        with pytest.raises(SystemExit) as exc_info:
            registry._on_signal(signal.SIGTERM, None)

        callback.assert_called_once_with()
        assert exc_info.value.code == 128 + signal.SIGTERM

    def test_previous_python_handler_is_chained(self):
        """Test that an earlier Python handler still runs."""
        registry = ExitHookRegistry(install_handlers=False)
        callback = Mock()
        previous = Mock()
        registry.register(callback)
        registry._previous_handlers[signal.SIGTERM] = previous

        registry._on_signal(signal.SIGTERM, None)

        callback.assert_called_once_with()
        previous.assert_called_once_with(signal.SIGTERM, None)

    def test_ignored_signal_keeps_running(self):
        """Test that SIG_IGN means the process carries on."""
        registry = ExitHookRegistry(install_handlers=False)
        callback = Mock()
        registry.register(callback)
        registry._previous_handlers[signal.SIGTERM] = signal.SIG_IGN

        registry._on_signal(signal.SIGTERM, None)

        callback.assert_called_once_with()


class TestInstance:
    """Tests for the process-wide instance."""

    def test_get_instance_is_singleton(self):
        """Test that get_instance returns the same registry."""
        assert ExitHookRegistry.get_instance() is ExitHookRegistry.get_instance()

    def test_reset_instance(self):
        """Test that reset_instance creates a fresh registry next time."""
        first = ExitHookRegistry.get_instance()
        ExitHookRegistry.reset_instance()

        assert ExitHookRegistry.get_instance() is not first


class TestProcessExit:
    """Tests that run the real exit paths in a child interpreter."""

    def test_normal_exit_removes_file(self, tmp_path):
        """Test that atexit removes the PID file."""
        path = tmp_path / "child.pid"

        result = run_child(path, "exit")

        assert result.returncode == 0, result.stderr
        assert not path.exists()

    def test_sigterm_removes_file(self, tmp_path):
        """Test that SIGTERM removes the PID file and still terminates."""
        path = tmp_path / "child.pid"

        result = run_child(path, "signal")

        assert result.returncode == 128 + signal.SIGTERM, result.stderr
        assert not path.exists()
