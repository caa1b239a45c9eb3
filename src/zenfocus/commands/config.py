"""Configuration management commands."""

import typer
from pydantic import BaseModel, ValidationError

from zenfocus.services.config_service import get_config_service
from zenfocus.utils import exit_codes
from zenfocus.utils.typer_helpers import did_you_mean
from zenfocus.utils.ui.console import get_console
from zenfocus.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Configuration management commands")


def _key_not_found(key: str) -> AppError:
    hint = did_you_mean(key, get_config_service().keys())
    return AppError(f"Configuration key '{key}' not found.{hint}", exit_codes.ERROR_NOT_FOUND)


def _parse_value(value: str):
    """Convert CLI text to bool, int or None where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.lower() in ("none", "null"):
        return None
    if value.isdigit():
        return int(value)
    return value


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("yaml", "--output", "-o", help="Output format"),
):
    """Show the current configuration."""
    format_output(get_config_service().config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., focus.daily_target_sessions)"),
):
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        raise _key_not_found(key) from e
    if isinstance(value, BaseModel):
        format_output(value.model_dump(), "yaml")
    else:
        console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="Configuration value"),
):
    """Set a configuration value."""
    parsed_value = _parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        raise _key_not_found(key) from e
    except ValidationError as e:
        message = e.errors()[0]["msg"] if e.errors() else str(e)
        raise AppError(f"Invalid value for '{key}': {message}", exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(exit_codes.SUCCESS)

    try:
        get_config_service().reset_config(key)
    except KeyError as e:
        raise _key_not_found(key) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
