"""
pidmark Configuration Management.

Handles loading and validating configuration for the command-line layer:
- Default values
- Configuration file (TOML)
- Environment variables

The PID file store itself reads no configuration.
"""

from __future__ import annotations

import logging
import os
import signal
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from pidmark.pidfile.store import resolve_signal

logger = logging.getLogger(__name__)


# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "pidmark"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_PID_DIR = Path.home() / ".local" / "share" / "pidmark" / "run"
PID_SUFFIX = ".pid"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ValidationError:
    """Validation error for configuration."""
    field: str
    message: str
    severity: str  # "error" or "warning"

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.field}: {self.message}"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[Path] = None


@dataclass
class PidmarkConfig:
    """Main configuration container for pidmark."""

    # Paths
    config_dir: Path = DEFAULT_CONFIG_DIR
    pid_dir: Path = DEFAULT_PID_DIR

    # Signal sent by `pidmark stop` when none is given
    default_signal: str = "SIGTERM"

    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(
    config_path: Optional[Path] = None,
    env_prefix: str = "PIDMARK_"
) -> PidmarkConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Default values

    Args:
        config_path: Path to config file (default: ~/.config/pidmark/config.toml)
        env_prefix: Prefix for environment variables

    Returns:
        Loaded configuration
    """
    config = PidmarkConfig()

    if config_path is None:
        env_config_dir = os.environ.get(f"{env_prefix}CONFIG_DIR")
        if env_config_dir:
            config_path = Path(env_config_dir) / DEFAULT_CONFIG_FILE
        else:
            config_path = DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE

    if config_path.exists():
        config = _load_from_file(config_path, config)

    return _load_from_env(config, env_prefix)


def _file_value(data: dict[str, Any], key: str, types: tuple, path: Path) -> Any:
    """Return ``data[key]`` if it has one of ``types``, else None with a warning."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, types):
        logger.warning(
            f"Ignoring '{key}' in {path}: expected {' or '.join(t.__name__ for t in types)}, "
            f"got {type(value).__name__}"
        )
        return None
    return value


def _load_from_file(path: Path, config: PidmarkConfig) -> PidmarkConfig:
    """Load configuration from a TOML file.

    Values of the wrong type are logged and leave the default in place.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return config

    logging_data = _file_value(data, "logging", (dict,), path) or {}
    if (level := _file_value(logging_data, "level", (str,), path)) is not None:
        config.logging.level = level
    if (fmt := _file_value(logging_data, "format", (str,), path)) is not None:
        config.logging.format = fmt
    if (log_file := _file_value(logging_data, "file", (str,), path)) is not None:
        config.logging.file = Path(log_file).expanduser() if log_file else None

    if (config_dir := _file_value(data, "config_dir", (str,), path)) is not None:
        config.config_dir = Path(config_dir).expanduser()
    if (pid_dir := _file_value(data, "pid_dir", (str,), path)) is not None:
        config.pid_dir = Path(pid_dir).expanduser()
    if (default_signal := _file_value(data, "default_signal", (str, int), path)) is not None:
        config.default_signal = str(default_signal)

    return config


def _load_from_env(config: PidmarkConfig, prefix: str) -> PidmarkConfig:
    """Load configuration from environment variables."""
    if env_val := os.environ.get(f"{prefix}CONFIG_DIR"):
        config.config_dir = Path(env_val)
    if env_val := os.environ.get(f"{prefix}PID_DIR"):
        config.pid_dir = Path(env_val).expanduser()
    if env_val := os.environ.get(f"{prefix}DEFAULT_SIGNAL"):
        config.default_signal = env_val

    # Logging settings
    if env_val := os.environ.get(f"{prefix}LOG_LEVEL"):
        config.logging.level = env_val.upper()
    if env_val := os.environ.get(f"{prefix}LOG_FILE"):
        config.logging.file = Path(env_val)

    return config


def resolve_pid_path(target: Union[str, Path], config: PidmarkConfig) -> Path:
    """Turn a command-line target into a PID file path.

    Absolute paths and anything containing a directory separator are used
    as given. A bare name such as ``worker`` resolves to
    ``<pid_dir>/worker.pid``.

    Args:
        target: Path or bare instance name
        config: Configuration providing ``pid_dir``

    Returns:
        Path to the PID file
    """
    path = Path(target)
    if path.is_absolute() or os.sep in str(target):
        return path

    name = path.name if path.suffix == PID_SUFFIX else f"{path.name}{PID_SUFFIX}"
    return config.pid_dir / name


def validate_config(config: Optional[PidmarkConfig] = None) -> List[ValidationError]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate (default: loaded from file)

    Returns:
        List of validation errors (empty if valid)
    """
    if config is None:
        config = load_config()

    errors: List[ValidationError] = []

    if not _validate_signal(config.default_signal):
        errors.append(ValidationError(
            field="default_signal",
            message=f"Unknown signal: {config.default_signal}",
            severity="error"
        ))

    if config.logging.level.upper() not in LOG_LEVELS:
        errors.append(ValidationError(
            field="logging.level",
            message=f"Invalid log level: {config.logging.level}",
            severity="error"
        ))

    if not config.pid_dir.exists():
        errors.append(ValidationError(
            field="pid_dir",
            message=f"PID directory does not exist: {config.pid_dir}",
            severity="warning"
        ))

    return errors


def _validate_signal(value: str) -> bool:
    """Validate a signal name or number."""
    try:
        signum = resolve_signal(value)
    except ValueError:
        return False
    return signum in {int(s) for s in signal.Signals}


def config_to_dict(config: PidmarkConfig) -> dict[str, Any]:
    """Convert configuration to a plain dictionary."""
    return {
        "config_dir": str(config.config_dir),
        "pid_dir": str(config.pid_dir),
        "default_signal": config.default_signal,
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
            "file": str(config.logging.file) if config.logging.file else None,
        },
    }


# Global configuration instance (lazy-loaded)
_global_config: Optional[PidmarkConfig] = None


def get_config() -> PidmarkConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: PidmarkConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def clear_config_cache() -> None:
    """Clear the global configuration cache."""
    global _global_config
    _global_config = None
