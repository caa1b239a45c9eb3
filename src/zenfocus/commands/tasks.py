"""Manage the tasks focus sessions are started on."""

import typer
from rich.table import Table

from zenfocus.services.config_service import get_config_service
from zenfocus.utils import exit_codes
from zenfocus.utils.typer_helpers import did_you_mean
from zenfocus.utils.ui.console import get_console
from zenfocus.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Manage focus tasks")


@app.command("list")
@command_wrapper
def list_tasks():
    """List focus tasks."""
    tasks = get_config_service().list_tasks()
    if not tasks:
        console.print("[yellow]No tasks. Add one with 'zenfocus tasks add'.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Task")
    for task in tasks:
        table.add_row(task.id, f"{task.icon} {task.name}")
    console.print(table)


@app.command("add")
@command_wrapper
def add_task(
    name: str = typer.Argument(..., help="Task name"),
    icon: str = typer.Option("•", "--icon", help="Icon shown next to the name"),
):
    """Add a focus task."""
    try:
        task = get_config_service().add_task(name, icon)
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Task '{task.name}' added ({task.id})")


@app.command("remove")
@command_wrapper
def remove_task(
    task: str = typer.Argument(..., help="Task id or name"),
):
    """Remove a focus task. Its history is kept."""
    service = get_config_service()
    try:
        removed = service.remove_task(task)
    except ValueError as e:
        hint = did_you_mean(task.lower(), service.config.task_ids())
        raise AppError(f"{e}.{hint}", exit_codes.ERROR_NOT_FOUND) from e
    format_success(f"Task '{removed.name}' removed")
