"""Unit tests for command_wrapper error handling."""

from __future__ import annotations

import pytest
import typer

from zenfocus.commands.decorators import AppError, command_wrapper
from zenfocus.models.focus.exceptions import PersistenceError
from zenfocus.utils import exit_codes


def test_returns_result():
    @command_wrapper
    def ok():
        return 42

    assert ok() == 42


def test_app_error_uses_its_exit_code(capsys):
    @command_wrapper
    def fails():
        raise AppError("bad input", exit_codes.ERROR_INVALID_ARGS)

    with pytest.raises(typer.Exit) as exc_info:
        fails()
    assert exc_info.value.exit_code == exit_codes.ERROR_INVALID_ARGS
    assert "bad input" in capsys.readouterr().out


def test_persistence_error_maps_to_storage_code():
    @command_wrapper
    def fails():
        raise PersistenceError("disk full")

    with pytest.raises(typer.Exit) as exc_info:
        fails()
    assert exc_info.value.exit_code == exit_codes.ERROR_STORAGE


def test_exit_passes_through():
    @command_wrapper
    def exits():
        raise typer.Exit(0)

    with pytest.raises(typer.Exit) as exc_info:
        exits()
    assert exc_info.value.exit_code == 0


def test_unexpected_error(capsys):
    @command_wrapper
    def boom():
        raise RuntimeError("kaboom")

    with pytest.raises(typer.Exit) as exc_info:
        boom()
    assert exc_info.value.exit_code == exit_codes.ERROR_GENERAL
    assert "An unexpected error occurred: kaboom" in capsys.readouterr().out


def test_logs_command_lifecycle(tmp_path):
    @command_wrapper
    def ok():
        return None

    ok()
    log_text = (tmp_path / "logs" / "zenfocus.log").read_text()
    assert "command started: ok" in log_text
    assert "command completed: ok" in log_text
