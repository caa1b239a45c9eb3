"""Focus session commands with the fullscreen timer."""

from datetime import datetime

import typer
from rich.prompt import Confirm
from rich.table import Table

from zenfocus.models.focus.analytics import format_duration
from zenfocus.models.focus.exceptions import SessionValidationError
from zenfocus.models.focus.state import Phase
from zenfocus.models.focus.ui import (
    TimerDisplay,
    format_clock,
    show_completion_message,
    show_stopped_message,
)
from zenfocus.services.session_service import SessionService, get_session_service
from zenfocus.utils import exit_codes
from zenfocus.utils.typer_helpers import did_you_mean
from zenfocus.utils.ui.console import get_console
from zenfocus.utils.ui.formatters import format_output, format_warning

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Focus sessions with a countdown timer")


def _run_session(service: SessionService) -> str:
    """Run the fullscreen timer for the engine's live session and report the outcome."""
    engine = service.engine
    display = TimerDisplay(console)
    result = display.run(engine, today_line=service.today_line())

    if result == "completed":
        record = engine.last_record
        if engine.last_persistence_error is not None:
            format_warning(
                f"Could not save the session: {engine.last_persistence_error}. "
                "Run 'zenfocus focus resume' to retry."
            )
            show_completion_message(record, console=console)
        else:
            show_completion_message(record, service.summary(), console)
        engine.dismiss_completion()

    elif result == "stopped":
        if display.stopped_state is not None:
            show_stopped_message(display.stopped_state, console)

    else:
        console.print("\n[yellow]Session saved.[/yellow]")
        console.print("Use 'zenfocus focus resume' to continue.")
        engine.teardown()

    return result


@app.command("start")
@command_wrapper
def start_focus(
    task: str = typer.Argument(None, help="Task id or name to focus on"),
    duration: int = typer.Option(
        None, "--duration", "-d", help="Duration in minutes (default from config)"
    ),
    seconds: int = typer.Option(
        None, "--seconds", help="Duration in seconds, overrides --duration"
    ),
    ambient: str = typer.Option(None, "--ambient", "-a", help="Ambient track"),
    silent: bool = typer.Option(False, "--silent", help="No ambient track"),
):
    """Start a focus session on a task."""
    service = get_session_service(console)

    if service.persistence.has_active_snapshot():
        raise AppError(
            "Another focus session is already active. Use 'zenfocus focus resume' "
            "to continue or 'zenfocus focus stop' to cancel it.",
            exit_codes.ERROR_SESSION_ACTIVE,
        )

    duration_seconds = seconds
    if duration_seconds is None and duration is not None:
        duration_seconds = duration * 60

    try:
        config = service.build_config(task, duration_seconds, ambient, silent)
        service.engine.start(config)
    except SessionValidationError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    except ValueError as e:
        hint = did_you_mean((task or "").lower(), service.config.task_ids())
        raise AppError(f"{e}.{hint}", exit_codes.ERROR_NOT_FOUND) from e

    console.print("\n[bold green]🎯 Focus session started[/bold green]")
    console.print(f"Task: {config.task_label}")
    console.print(f"Duration: {format_duration(config.total_duration_seconds)}")
    console.print("\nStarting fullscreen timer...\n")

    _run_session(service)


@app.command("resume")
@command_wrapper
def resume_focus():
    """Resume a session saved when the timer was detached or interrupted."""
    service = get_session_service(console)
    engine = service.engine

    if not engine.did_resume(known_task_ids=service.config.task_ids()):
        console.print("[yellow]No active focus session found[/yellow]")
        raise typer.Exit(exit_codes.SUCCESS)

    state = engine.state
    console.print("\n[bold cyan]Resuming focus session[/bold cyan]")
    console.print(f"Task: {state.config.task_label}")
    console.print(f"Time remaining: {format_clock(state.remaining_seconds)}")
    if state.phase == Phase.PAUSED:
        console.print("[yellow]Session is paused, press 'r' to continue[/yellow]")
    console.print()

    _run_session(service)


@app.command("status")
@command_wrapper
def focus_status():
    """Show current focus session status."""
    service = get_session_service(console)
    snapshot = service.persistence.load_snapshot()

    if snapshot is None or not snapshot.is_active:
        console.print("[yellow]No active focus session[/yellow]")
        console.print(service.today_line())
        return

    state = snapshot.state
    now = datetime.now().astimezone()
    color = "yellow" if state.phase == Phase.PAUSED else "green"

    console.print("\n[bold]Focus Session Status[/bold]")
    console.print(f"Status: [{color}]{state.phase.value}[/{color}]")
    console.print(f"Task: {state.config.task_label}")
    console.print(f"Time remaining: {format_clock(state.remaining_seconds)}")
    console.print(f"Focused: {format_duration(state.elapsed_seconds)}")
    if state.pause_count:
        console.print(f"Pauses: {state.pause_count}")
    if state.phase == Phase.PAUSED:
        console.print(f"Paused for: {format_clock(state.paused_for(now))}")
    console.print(f"\n{service.today_line()}\n")


@app.command("stop")
@command_wrapper
def stop_focus():
    """Stop the saved focus session without recording it."""
    service = get_session_service(console)
    engine = service.engine

    if not engine.restore():
        if service.persistence.load_snapshot() is not None:
            service.persistence.clear()
        console.print("[yellow]No active focus session found[/yellow]")
        raise typer.Exit(exit_codes.SUCCESS)

    state = engine.state
    engine.reset()
    show_stopped_message(state, console)


@app.command("history")
@command_wrapper
def focus_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
    task: str = typer.Option(None, "--task", help="Filter by task name"),
    output: str = typer.Option(None, "--output", "-o", help="table, json or yaml"),
):
    """Show completed focus sessions."""
    service = get_session_service(console)
    records = service.persistence.history_store.query(task_label=task, limit=limit)
    output = output or service.config.output.format

    if output in ("json", "yaml"):
        format_output([r.to_dict() for r in records], output)
        return

    if not records:
        console.print("[yellow]No focus sessions found[/yellow]")
        return

    table = Table(title=f"Recent Focus Sessions ({len(records)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Task")
    table.add_column("Focused", justify="right")
    table.add_column("Pauses", justify="right")
    table.add_column("Paused", justify="right")

    for record in records:
        table.add_row(
            record.session_date.astimezone().strftime("%Y-%m-%d %H:%M"),
            record.task_label[:30],
            format_duration(record.actual_duration_seconds),
            str(record.pause_count),
            format_duration(record.total_paused_seconds),
        )

    console.print(table)


@app.command("clear-history")
@command_wrapper
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete all completed sessions. Tasks and settings are kept."""
    if not yes and not Confirm.ask(
        "Delete all focus history? This cannot be undone", default=False
    ):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(exit_codes.SUCCESS)

    service = get_session_service(console)
    deleted = service.persistence.clear_history()
    console.print(f"[green]✓ Deleted {deleted} session(s)[/green]")
