"""pidmark - PID file management for single-instance processes."""

__app_name__ = "pidmark"
__version__ = "0.1.0"
