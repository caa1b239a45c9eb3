"""Shared Rich consoles for ZenFocus output."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get the shared Rich Console used by commands, formatters and the timer."""
    return Console(highlight=highlight)


def set_color(enabled: bool) -> None:
    """Turn color output on or off for every shared console."""
    for highlight in (True, False):
        get_console(highlight).no_color = not enabled
