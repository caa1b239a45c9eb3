"""
Exit codes for ZenFocus.

Semantic exit codes so scripts wrapping the CLI can tell what happened.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error (no task selected, bad duration)
ERROR_INVALID_ARGS = 2

# Resource not found (unknown task, no session to resume)
ERROR_NOT_FOUND = 5

# Another session is already running or paused
ERROR_SESSION_ACTIVE = 7

# History or snapshot storage could not be read or written
ERROR_STORAGE = 8


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_SESSION_ACTIVE: "ERROR_SESSION_ACTIVE",
        ERROR_STORAGE: "ERROR_STORAGE",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def get_exit_code_description(code: int) -> str:
    """Get a human-readable description of an exit code."""
    descriptions = {
        SUCCESS: "Command executed successfully",
        ERROR_GENERAL: "A general error occurred",
        ERROR_INVALID_ARGS: "Invalid arguments or validation error",
        ERROR_NOT_FOUND: "Resource not found",
        ERROR_SESSION_ACTIVE: "A focus session is already in progress",
        ERROR_STORAGE: "Session storage could not be read or written",
    }
    return descriptions.get(code, "Unknown error")
