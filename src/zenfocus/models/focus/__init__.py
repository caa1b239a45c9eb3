"""Focus mode - session lifecycle, persistence and statistics for ZenFocus."""

from .analytics import FocusAnalytics, FocusSummary
from .engine import SessionEngine
from .exceptions import (
    InvalidConfigError,
    InvalidTransitionError,
    NoTaskSelectedError,
    PersistenceError,
    SessionValidationError,
    ZenFocusError,
)
from .history import HistoryStore
from .persistence import SessionPersistence
from .snapshot import SnapshotStore
from .state import (
    FocusSessionRecord,
    Phase,
    SessionConfig,
    SessionRuntimeState,
    SessionSnapshot,
)

__all__ = [
    "FocusAnalytics",
    "FocusSummary",
    "FocusSessionRecord",
    "HistoryStore",
    "InvalidConfigError",
    "InvalidTransitionError",
    "NoTaskSelectedError",
    "PersistenceError",
    "Phase",
    "SessionConfig",
    "SessionEngine",
    "SessionPersistence",
    "SessionRuntimeState",
    "SessionSnapshot",
    "SessionValidationError",
    "SnapshotStore",
    "ZenFocusError",
]
