"""Focus statistics: daily target, streaks and the current week."""

import typer
from rich.table import Table

from zenfocus.models.focus.analytics import format_duration
from zenfocus.services.session_service import get_session_service
from zenfocus.utils.ui.console import get_console
from zenfocus.utils.ui.formatters import format_output, get_progress_bar

from .decorators import command_wrapper

console = get_console()


@command_wrapper
def show_stats(
    output: str = typer.Option(None, "--output", "-o", help="table, json or yaml"),
):
    """Show today's progress, streaks and totals."""
    service = get_session_service(console)
    summary = service.summary()
    output = output or service.config.output.format

    if output in ("json", "yaml"):
        format_output(summary.to_dict(), output)
        return

    target_pct = (
        summary.today_sessions * 100 / summary.daily_target if summary.daily_target else 0
    )
    console.print("\n[bold]Focus Summary[/bold]\n")
    console.print(
        f"Today: {summary.today_sessions} of {summary.daily_target} "
        f"{get_progress_bar(target_pct)}"
        + (" [green]✓ target reached[/green]" if summary.target_reached else "")
    )
    streak_color = "orange1" if summary.current_streak > 0 else "dim"
    console.print(
        f"Current streak: [{streak_color}]{summary.current_streak} days[/{streak_color}]"
    )
    console.print(f"Longest streak: {summary.longest_streak} days")
    console.print()
    console.print(f"Total sessions: {summary.total_sessions}")
    console.print(f"Total focus time: {format_duration(summary.total_seconds)}")
    console.print(f"Average session: {format_duration(summary.average_seconds)}")
    if summary.top_task:
        console.print(
            f"Top task: {summary.top_task} ({format_duration(summary.top_task_seconds)})"
        )

    table = Table(
        title=f"This Week ({summary.active_days_this_week}/7 days)", show_header=True
    )
    table.add_column("Day", style="cyan")
    table.add_column("Sessions", justify="right")
    table.add_column("Focused", justify="right")
    for day, count, seconds in summary.week:
        table.add_row(
            day.strftime("%a %d"),
            str(count) if count else "-",
            format_duration(seconds) if seconds else "-",
        )
    console.print()
    console.print(table)
