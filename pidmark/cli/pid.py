"""pidmark PID file commands - inspect, signal and clean up PID files."""

import logging
from typing import Optional

import typer
from rich.console import Console

from pidmark.cli.error_handler import ConfigurationError, ValidationError, handle_errors
from pidmark.cli.exit_codes import ExitCode

console = Console()
logger = logging.getLogger(__name__)

TARGET_HELP = "PID file path, or a bare name resolved inside the configured PID directory."


@handle_errors
def status(
    target: str = typer.Argument(..., help=TARGET_HELP),
) -> None:
    """Show whether the process recorded in a PID file is running.

    Exits with code 3 when the process is not running.

    Example:
        pidmark status /run/worker.pid
        pidmark status worker
    """
    from pidmark.config import get_config, resolve_pid_path
    from pidmark.pidfile import exists, read_pid

    path = resolve_pid_path(target, get_config())

    if exists(path):
        pid = read_pid(path)
        if pid is not None:
            console.print(f"[green]● Running[/green] (PID: {pid})")
        else:
            console.print("[yellow]● Present[/yellow] (PID file could not be read)")
        console.print(f"  PID file: {path}")
        return

    pid = read_pid(path)
    if pid is not None:
        console.print(f"[yellow]○ Not running[/yellow] (stale PID file, PID: {pid})")
        console.print(f"  [dim]Run 'pidmark clean {target}' to remove it[/dim]")
    else:
        console.print("[yellow]○ Not running[/yellow]")
    raise typer.Exit(code=ExitCode.NOT_RUNNING)


@handle_errors
def check(
    pid: str = typer.Argument(..., help="Process ID to check."),
) -> None:
    """Check whether a process ID is alive (signal 0).

    Example:
        pidmark check 4242
    """
    from pidmark.pidfile import is_running, parse_pid

    try:
        parse_pid(pid)
    except ValueError as e:
        raise ValidationError(str(e))

    if is_running(pid):
        console.print(f"[green]● Process {pid.strip()} is running[/green]")
        return

    console.print(f"[yellow]○ Process {pid.strip()} is not running[/yellow]")
    raise typer.Exit(code=ExitCode.NOT_RUNNING)


@handle_errors
def read(
    target: str = typer.Argument(..., help=TARGET_HELP),
) -> None:
    """Print the PID recorded in a PID file.

    Example:
        pidmark read worker
    """
    from pidmark.config import get_config, resolve_pid_path
    from pidmark.pidfile import read_pid

    path = resolve_pid_path(target, get_config())
    pid = read_pid(path)

    if pid is None:
        console.print(f"[yellow]No readable PID in {path}[/yellow]")
        raise typer.Exit(code=ExitCode.NOT_FOUND)

    console.print(str(pid))


@handle_errors
def stop(
    target: str = typer.Argument(..., help=TARGET_HELP),
    sig: Optional[str] = typer.Option(
        None,
        "--signal",
        "-s",
        help="Signal to send, by name or number (default from config, SIGTERM).",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Send SIGKILL.",
    ),
) -> None:
    """Send a signal to the process recorded in a PID file.

    The recorded PID is signalled as-is; a stale file reports that the
    process was not found. PIDs of 1 or lower are refused.

    Example:
        pidmark stop worker
        pidmark stop /run/worker.pid --signal HUP
        pidmark stop worker --force
    """
    from pidmark.config import get_config, resolve_pid_path
    from pidmark.pidfile import read_pid, resolve_signal, terminate

    config = get_config()
    path = resolve_pid_path(target, config)

    if force and sig:
        raise ValidationError("--force and --signal are mutually exclusive")

    requested = "SIGKILL" if force else (sig or config.default_signal)
    try:
        signum = resolve_signal(requested)
    except ValueError as e:
        raise ValidationError(str(e))

    # 0 and negative PIDs address process groups, 1 is init
    recorded = read_pid(path)
    if recorded is not None and recorded <= 1:
        raise ValidationError(f"Refusing to signal PID {recorded} recorded in {path}")

    pid = terminate(path, signum)
    console.print(f"[green]Sent signal {signum} to PID {pid}[/green]")


@handle_errors
def remove(
    target: str = typer.Argument(..., help=TARGET_HELP),
) -> None:
    """Delete a PID file.

    Example:
        pidmark remove worker
    """
    from pidmark.config import get_config, resolve_pid_path
    from pidmark.pidfile import remove as remove_pid_file

    path = resolve_pid_path(target, get_config())

    if remove_pid_file(path):
        console.print(f"[green]Removed {path}[/green]")
        return

    console.print(f"[yellow]Nothing removed at {path}[/yellow]")
    raise typer.Exit(code=ExitCode.NOT_FOUND)


@handle_errors
def clean(
    target: str = typer.Argument(..., help=TARGET_HELP),
) -> None:
    """Remove a PID file if its process is no longer running.

    Example:
        pidmark clean worker
    """
    from pidmark.config import get_config, resolve_pid_path
    from pidmark.pidfile import clear_if_stale

    path = resolve_pid_path(target, get_config())

    if clear_if_stale(path):
        console.print(f"[green]Removed stale PID file {path}[/green]")
    else:
        console.print("[dim]Nothing to clean[/dim]")


@handle_errors
def show_config() -> None:
    """Show the effective configuration and any validation problems.

    Example:
        pidmark config
    """
    from pidmark.config import config_to_dict, get_config, validate_config

    config = get_config()
    console.print_json(data=config_to_dict(config))

    problems = validate_config(config)
    for problem in problems:
        style = "red" if problem.severity == "error" else "yellow"
        console.print(f"[{style}]{problem}[/{style}]")

    errors = [p for p in problems if p.severity == "error"]
    if errors:
        raise ConfigurationError(
            f"Configuration has {len(errors)} error(s)",
            details={"fields": ", ".join(p.field for p in errors)},
        )
