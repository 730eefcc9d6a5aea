"""Main CLI entry point for pidmark."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from pidmark import __app_name__, __version__
from pidmark.cli import pid
from pidmark.cli.exit_codes import ExitCode

# Create the main Typer app
app = typer.Typer(
    name=__app_name__,
    help="pidmark - Inspect, signal and clean up PID files.",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Console for CLI output
console = Console()

# Register commands
app.command("status")(pid.status)
app.command("check")(pid.check)
app.command("read")(pid.read)
app.command("stop")(pid.stop)
app.command("remove")(pid.remove)
app.command("clean")(pid.clean)
app.command("config")(pid.show_config)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"{__app_name__} v{__version__}")
        raise typer.Exit(code=ExitCode.SUCCESS)


def _setup_logging(
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    default_level: str = "WARNING",
) -> None:
    """Set up logging configuration based on CLI options.

    Args:
        verbose: Enable INFO level logging
        debug: Enable DEBUG level logging
        quiet: Suppress non-error output (ERROR and above)
        log_file: Optional log file path
        default_level: Level used when no flag is given
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if debug:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        handlers.append(console_handler)
    elif not log_file:
        # Quiet without a log file still needs a handler to avoid warnings
        handlers.append(logging.NullHandler())

    root_level = logging.DEBUG if log_file else level
    logging.basicConfig(
        level=root_level,
        format=format_str,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={logging.getLevelName(level)}, debug={debug}")


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output (INFO level logging).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (DEBUG level logging).",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error log output.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log to file (logs DEBUG level regardless of console settings).",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """pidmark - Inspect, signal and clean up PID files.

    [bold]Commands:[/bold]

    • [cyan]status[/cyan] - Is the recorded process running?
    • [cyan]check[/cyan] - Is a given PID alive?
    • [cyan]read[/cyan] - Print the recorded PID
    • [cyan]stop[/cyan] - Signal the recorded process
    • [cyan]remove[/cyan] - Delete a PID file
    • [cyan]clean[/cyan] - Delete a PID file whose process is gone
    • [cyan]config[/cyan] - Show the effective configuration

    [bold]Examples:[/bold]

        pidmark status /run/worker.pid
        pidmark stop worker --signal HUP
        pidmark clean worker
    """
    from pidmark.config import load_config, set_config

    if quiet and verbose:
        console.print("[red]Error:[/red] --quiet and --verbose are mutually exclusive")
        raise typer.Exit(code=ExitCode.INVALID_ARGUMENT)

    if quiet and debug:
        console.print("[red]Error:[/red] --quiet and --debug are mutually exclusive")
        raise typer.Exit(code=ExitCode.INVALID_ARGUMENT)

    config = load_config(config_file)
    set_config(config)

    _setup_logging(
        verbose=verbose,
        debug=debug,
        quiet=quiet,
        log_file=log_file or config.logging.file,
        default_level=config.logging.level,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"pidmark v{__version__} starting")
    logger.debug(f"Options: verbose={verbose}, debug={debug}, quiet={quiet}")


if __name__ == "__main__":
    app()
