"""Main entry point for ZenFocus."""

import typer

from zenfocus import __version__
from zenfocus.commands import config, focus, stats, tasks
from zenfocus.utils.logger import get_logger, log_file_path
from zenfocus.utils.typer_helpers import SuggestingGroup
from zenfocus.utils.ui.console import get_console, set_color

app = typer.Typer(
    name="zenfocus",
    cls=SuggestingGroup,
    help="A focus timer for the terminal with streaks and session history",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(focus.app, name="focus", help="Focus sessions with a countdown timer")
app.add_typer(tasks.app, name="tasks", help="Manage focus tasks")
app.add_typer(config.app, name="config", help="Configuration management")
app.command("stats")(stats.show_stats)


@app.callback()
def main_callback(
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
) -> None:
    """ZenFocus - stay on one task at a time."""
    get_logger()
    if no_color:
        set_color(False)


@app.command()
def version(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show file locations"),
) -> None:
    """Show version information."""
    console.print(f"[bold]ZenFocus[/bold] version [cyan]{__version__}[/cyan]")
    if verbose:
        console.print(f"Log file: {log_file_path()}")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
