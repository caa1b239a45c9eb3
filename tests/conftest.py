"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and a
controllable wall clock for the session engine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from zenfocus.models.focus.history import HistoryStore
from zenfocus.models.focus.persistence import SessionPersistence
from zenfocus.models.focus.snapshot import SnapshotStore


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 6, 16, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingSinks:
    """Ambient player and notifier that record every call."""

    def __init__(self):
        self.calls: list[tuple] = []

    def play_ambient(self, track_id: str) -> None:
        self.calls.append(("play_ambient", track_id))

    def pause_ambient(self) -> None:
        self.calls.append(("pause_ambient",))

    def resume_ambient(self) -> None:
        self.calls.append(("resume_ambient",))

    def stop_ambient(self) -> None:
        self.calls.append(("stop_ambient",))

    def play_completion_alert(self) -> None:
        self.calls.append(("play_completion_alert",))

    def set_keep_awake(self, enabled: bool) -> None:
        self.calls.append(("set_keep_awake", enabled))

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture(autouse=True)
def isolate_logger(tmp_path):
    """Keep the application log file inside tmp_path."""
    import zenfocus.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("zenfocus").handlers.clear()
    with patch("zenfocus.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    logging.getLogger("zenfocus").handlers.clear()
    logger_mod._logger = None


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sinks() -> RecordingSinks:
    return RecordingSinks()


@pytest.fixture()
def snapshot_store(tmp_path) -> SnapshotStore:
    return SnapshotStore(state_dir=tmp_path / "state")


@pytest.fixture()
def history_store(tmp_path) -> HistoryStore:
    return HistoryStore(db_path=tmp_path / "focus_history.db")


@pytest.fixture()
def persistence(snapshot_store, history_store) -> SessionPersistence:
    return SessionPersistence(snapshot_store, history_store)


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory."""
    from zenfocus.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path / "config")
    get_config_service.cache_clear()
    with patch("zenfocus.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("zenfocus.services.config_service.user_data_dir", return_value=tmpdir):
            svc = ConfigService()
            svc.load_config()
            with patch(
                "zenfocus.services.config_service.get_config_service",
                return_value=svc,
            ):
                yield svc
    get_config_service.cache_clear()
