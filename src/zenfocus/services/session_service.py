"""Wires the session engine to the configured stores and terminal sinks."""

from __future__ import annotations

from datetime import date

from rich.console import Console

from zenfocus.models.config_models import AppConfig
from zenfocus.models.focus.analytics import FocusAnalytics, FocusSummary
from zenfocus.models.focus.engine import SessionEngine
from zenfocus.models.focus.exceptions import InvalidConfigError
from zenfocus.models.focus.history import HistoryStore
from zenfocus.models.focus.persistence import SessionPersistence
from zenfocus.models.focus.sinks import (
    AMBIENT_TRACKS,
    ConsoleNotifier,
    TerminalAmbientPlayer,
)
from zenfocus.models.focus.snapshot import SnapshotStore
from zenfocus.models.focus.state import SessionConfig


class SessionService:
    """Builds session configs from preferences and owns the engine for one CLI run."""

    def __init__(
        self,
        config: AppConfig,
        persistence: SessionPersistence | None = None,
        console: Console | None = None,
    ):
        self.config = config
        self.persistence = persistence or SessionPersistence(
            SnapshotStore(),
            HistoryStore(),
            catch_up_on_restore=config.focus.catch_up_on_restore,
        )
        self.ambient = TerminalAmbientPlayer()
        self.notifier = ConsoleNotifier(console, bell=config.focus.completion_bell)
        self.engine = SessionEngine(
            persistence=self.persistence,
            ambient=self.ambient,
            notifier=self.notifier,
            default_config=SessionConfig(
                total_duration_seconds=config.focus.default_duration_seconds,
                task_id=None,
            ),
        )

    def build_config(
        self,
        task: str | None,
        duration_seconds: int | None = None,
        ambient_track: str | None = None,
        silent: bool = False,
    ) -> SessionConfig:
        """
        Resolve CLI input into a SessionConfig.

        Args:
            task: Task id or name; None leaves the task unselected
            duration_seconds: Overrides the configured default duration
            ambient_track: Overrides the configured ambient track
            silent: Play no ambient track

        Raises:
            ValueError: If the task does not exist
            InvalidConfigError: If the ambient track is unknown
        """
        task_id = None
        task_label = ""
        if task:
            focus_task = self.config.get_task(task)
            task_id = focus_task.id
            task_label = focus_task.name

        if ambient_track and ambient_track.lower() not in AMBIENT_TRACKS:
            raise InvalidConfigError(
                f"Unknown ambient track '{ambient_track}', choose from: "
                f"{', '.join(AMBIENT_TRACKS)}"
            )
        if silent:
            track = None
        else:
            track = (ambient_track or self.config.focus.ambient_track or "").lower() or None

        return SessionConfig(
            total_duration_seconds=(
                duration_seconds
                if duration_seconds is not None
                else self.config.focus.default_duration_seconds
            ),
            task_id=task_id,
            task_label=task_label,
            ambient_track=track,
        )

    def analytics(self) -> FocusAnalytics:
        return FocusAnalytics(self.persistence.records())

    def summary(self, today: date | None = None) -> FocusSummary:
        """Statistics over the whole history against the configured daily target."""
        return self.analytics().summary(
            daily_target=self.config.focus.daily_target_sessions, today=today
        )

    def today_line(self, today: date | None = None) -> str:
        """One-line daily progress, e.g. ``Focus • 1 of 3 today • 🔥 4 days``."""
        summary = self.summary(today)
        line = f"Focus • {summary.today_sessions} of {summary.daily_target} today"
        if summary.current_streak > 0:
            days = summary.current_streak
            line += f" • 🔥 {days} day{'s' if days != 1 else ''}"
        return line


def get_session_service(console: Console | None = None) -> SessionService:
    """Create a SessionService from the current configuration."""
    from zenfocus.services.config_service import get_config_service

    return SessionService(get_config_service().config, console=console)
