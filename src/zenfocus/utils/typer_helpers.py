"""Typer helper utilities: typo suggestions for commands, tasks and config keys."""

from collections.abc import Iterable
from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from zenfocus.utils.ui.console import get_console


def close_matches(word: str, choices: Iterable[str], n: int = 3) -> list[str]:
    """Choices that look like a typo of *word*, best first."""
    return get_close_matches(word, list(choices), n=n, cutoff=0.6)


def did_you_mean(word: str, choices: Iterable[str]) -> str:
    """Hint suffix for error messages, empty when nothing is close."""
    matches = close_matches(word, choices, n=1)
    return f" Did you mean '{matches[0]}'?" if matches else ""


class SuggestingGroup(TyperGroup):
    """Typer group that suggests commands on typos."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            if not args:
                raise
            attempted = args[0]
            suggestions = close_matches(attempted, self.commands.keys())
            if not suggestions:
                raise

            console = get_console()
            console.print(
                f'[red]Error:[/red] unknown command "{attempted}" for "{ctx.info_name}"'
            )
            console.print()
            if len(suggestions) == 1:
                console.print("[yellow]Did you mean this?[/yellow]")
            else:
                console.print("[yellow]Did you mean one of these?[/yellow]")
            for suggestion in suggestions:
                console.print(f"        {suggestion}")
            raise typer.Exit(1) from e
