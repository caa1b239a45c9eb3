"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from zenfocus.models.focus.exceptions import PersistenceError
from zenfocus.utils import exit_codes
from zenfocus.utils.logger import get_logger
from zenfocus.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = exit_codes.ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def command_wrapper(func: Callable):
    """Log command timing and turn errors into formatted messages and exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger("commands")
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
            return result

        except AppError as e:
            logger.error(
                "command failed: %s (%.3fs) - %s", cmd, time.monotonic() - start, e
            )
            format_error(str(e))
            raise typer.Exit(code=e.exit_code) from e

        except PersistenceError as e:
            logger.error(
                "command failed: %s (%.3fs) - storage error: %s",
                cmd,
                time.monotonic() - start,
                e,
            )
            format_error(str(e))
            raise typer.Exit(code=exit_codes.ERROR_STORAGE) from e

        except typer.Exit:
            raise

        except Exception as e:
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                time.monotonic() - start,
                e,
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {e}")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

    return wrapper
