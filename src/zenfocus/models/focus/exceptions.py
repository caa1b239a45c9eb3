"""Custom exceptions for the focus session core."""


class ZenFocusError(Exception):
    """Base exception for all ZenFocus errors."""


class SessionValidationError(ZenFocusError, ValueError):
    """Raised when a session cannot start because its configuration is invalid."""


class NoTaskSelectedError(SessionValidationError):
    """Raised when a session is started without a task."""

    def __init__(self, message: str = "Select a task before starting a session"):
        super().__init__(message)


class InvalidConfigError(SessionValidationError):
    """Raised when the session duration is not a positive number of seconds."""


class InvalidTransitionError(ZenFocusError, ValueError):
    """Raised when an operation is not allowed in the current phase."""


class PersistenceError(ZenFocusError):
    """Raised when the snapshot or history store cannot be read or written."""
