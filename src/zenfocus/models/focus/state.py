"""Session data model: configuration, runtime state, records and snapshots."""

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

SNAPSHOT_VERSION = 1


class Phase(str, Enum):
    """Discrete phase of the session state machine."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


def now_local() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO timestamp, got {type(value).__name__}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _format_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class SessionConfig:
    """Settings chosen before a run starts. Fixed for the lifetime of the run."""

    total_duration_seconds: int
    task_id: str | None
    task_label: str = ""
    ambient_track: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionConfig":
        """Create from dictionary."""
        return cls(
            total_duration_seconds=int(data["total_duration_seconds"]),
            task_id=data.get("task_id"),
            task_label=data.get("task_label") or "",
            ambient_track=data.get("ambient_track"),
        )


@dataclass
class SessionRuntimeState:
    """Mutable state of the current run, owned by the SessionEngine."""

    config: SessionConfig
    phase: Phase = Phase.IDLE
    remaining_seconds: int = 0
    pause_count: int = 0
    total_paused_seconds: int = 0
    pause_started_at: datetime | None = None
    started_at: datetime | None = None

    @classmethod
    def idle(cls, config: SessionConfig) -> "SessionRuntimeState":
        """Zero-configured idle state for *config*."""
        return cls(
            config=config,
            phase=Phase.IDLE,
            remaining_seconds=max(0, config.total_duration_seconds),
        )

    @property
    def total_duration_seconds(self) -> int:
        return self.config.total_duration_seconds

    @property
    def elapsed_seconds(self) -> int:
        """Seconds actually counted down so far."""
        return self.total_duration_seconds - self.remaining_seconds

    @property
    def is_active(self) -> bool:
        """Whether the run is live (running or paused)."""
        return self.phase in (Phase.RUNNING, Phase.PAUSED)

    def paused_for(self, now: datetime) -> int:
        """Whole seconds spent in the current pause, 0 when not paused."""
        if self.phase != Phase.PAUSED or self.pause_started_at is None:
            return 0
        return max(0, int((now - self.pause_started_at).total_seconds()))

    def copy(self) -> "SessionRuntimeState":
        """Detached copy safe to hand to subscribers."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "config": self.config.to_dict(),
            "phase": self.phase.value,
            "remaining_seconds": self.remaining_seconds,
            "pause_count": self.pause_count,
            "total_paused_seconds": self.total_paused_seconds,
            "pause_started_at": _format_dt(self.pause_started_at),
            "started_at": _format_dt(self.started_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionRuntimeState":
        """Create from dictionary."""
        config = SessionConfig.from_dict(data["config"])
        remaining = int(data["remaining_seconds"])
        if not 0 <= remaining <= config.total_duration_seconds:
            raise ValueError(f"remaining_seconds out of range: {remaining}")
        return cls(
            config=config,
            phase=Phase(data["phase"]),
            remaining_seconds=remaining,
            pause_count=max(0, int(data.get("pause_count", 0))),
            total_paused_seconds=max(0, int(data.get("total_paused_seconds", 0))),
            pause_started_at=_parse_dt(data.get("pause_started_at")),
            started_at=_parse_dt(data.get("started_at")),
        )


@dataclass(frozen=True)
class FocusSessionRecord:
    """Immutable history entry for one completed focus session."""

    completion_date: datetime
    task_label: str
    actual_duration_seconds: int
    pause_count: int = 0
    total_paused_seconds: int = 0
    task_id: str | None = None
    started_at: datetime | None = None
    planned_duration_seconds: int | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_state(
        cls, state: SessionRuntimeState, completion_date: datetime
    ) -> "FocusSessionRecord":
        """Build the record for a run that just completed."""
        return cls(
            completion_date=completion_date,
            task_label=state.config.task_label,
            actual_duration_seconds=state.elapsed_seconds,
            pause_count=state.pause_count,
            total_paused_seconds=state.total_paused_seconds,
            task_id=state.config.task_id,
            started_at=state.started_at,
            planned_duration_seconds=state.total_duration_seconds,
        )

    @property
    def session_date(self) -> datetime:
        """Timestamp used to attribute the session to a calendar day."""
        return self.started_at or self.completion_date

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["completion_date"] = _format_dt(self.completion_date)
        data["started_at"] = _format_dt(self.started_at)
        return data


@dataclass
class SessionSnapshot:
    """Serialized in-flight session used to survive process suspension."""

    state: SessionRuntimeState
    is_active: bool
    saved_at: datetime
    version: int = SNAPSHOT_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "is_active": self.is_active,
            "saved_at": _format_dt(self.saved_at),
            "state": self.state.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSnapshot":
        """Create from dictionary. Raises ValueError/KeyError/TypeError on bad data."""
        if not isinstance(data, dict):
            raise TypeError(f"snapshot must be an object, got {type(data).__name__}")
        version = int(data.get("version", SNAPSHOT_VERSION))
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version}")
        saved_at = _parse_dt(data.get("saved_at"))
        if saved_at is None:
            raise ValueError("Snapshot is missing saved_at")
        return cls(
            state=SessionRuntimeState.from_dict(data["state"]),
            is_active=bool(data.get("is_active", False)),
            saved_at=saved_at,
            version=version,
        )
