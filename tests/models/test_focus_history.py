"""Unit tests for HistoryStore.

Uses a real SQLite database in a temporary directory. Tests cover schema
initialisation, inserts, filtered queries and deletion.

DB schema (from history.py _init_database):
    id, task_id, task_label, started_at, completion_date,
    planned_duration_seconds, actual_duration_seconds, pause_count,
    total_paused_seconds, created_at
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from zenfocus.models.focus.exceptions import PersistenceError
from zenfocus.models.focus.history import HistoryStore
from zenfocus.models.focus.state import FocusSessionRecord

T0 = datetime(2025, 6, 16, 9, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fixtures & helpers
# ---------------------------------------------------------------------------


def _record(
    *,
    offset_hours: float = 0,
    label: str = "Work",
    seconds: int = 1500,
    pauses: int = 0,
    started: bool = True,
) -> FocusSessionRecord:
    end = T0 + timedelta(hours=offset_hours)
    return FocusSessionRecord(
        completion_date=end,
        task_label=label,
        actual_duration_seconds=seconds,
        pause_count=pauses,
        task_id=label.lower(),
        started_at=end - timedelta(seconds=seconds) if started else None,
        planned_duration_seconds=seconds,
    )


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestSchema:
    def test_creates_table(self, history_store: HistoryStore):
        with sqlite3.connect(history_store.db_path) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert "focus_sessions" in tables

    def test_creates_parent_directory(self, tmp_path: Path):
        store = HistoryStore(db_path=tmp_path / "nested" / "dir" / "h.db")
        assert store.db_path.exists()

    def test_reopening_existing_db_keeps_rows(self, history_store: HistoryStore):
        history_store.insert(_record())
        again = HistoryStore(db_path=history_store.db_path)
        assert again.count() == 1


# ---------------------------------------------------------------------------
# Insert & get
# ---------------------------------------------------------------------------


class TestInsert:
    def test_insert_and_get_roundtrip(self, history_store: HistoryStore):
        record = _record(pauses=2)
        history_store.insert(record)
        assert history_store.get(record.id) == record

    def test_get_unknown_id(self, history_store: HistoryStore):
        assert history_store.get("missing") is None

    def test_record_without_start_time(self, history_store: HistoryStore):
        record = _record(started=False)
        history_store.insert(record)
        assert history_store.get(record.id).started_at is None

    def test_duplicate_id_raises_persistence_error(self, history_store: HistoryStore):
        record = _record()
        history_store.insert(record)
        with pytest.raises(PersistenceError):
            history_store.insert(record)
        assert history_store.count() == 1

    def test_sqlite_error_is_wrapped(self, history_store: HistoryStore):
        with patch.object(
            history_store, "_connect", side_effect=sqlite3.OperationalError("locked")
        ):
            with pytest.raises(PersistenceError, match="locked"):
                history_store.insert(_record())


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class TestQuery:
    def test_most_recent_first(self, history_store: HistoryStore):
        for hours in (0, 2, 1):
            history_store.insert(_record(offset_hours=hours))
        dates = [r.completion_date for r in history_store.query()]
        assert dates == sorted(dates, reverse=True)

    def test_limit(self, history_store: HistoryStore):
        for hours in range(5):
            history_store.insert(_record(offset_hours=hours))
        assert len(history_store.query(limit=2)) == 2

    def test_filter_by_task_label(self, history_store: HistoryStore):
        history_store.insert(_record(label="Work"))
        history_store.insert(_record(label="Study"))
        records = history_store.query(task_label="Study")
        assert [r.task_label for r in records] == ["Study"]

    def test_since_and_until_use_start_time(self, history_store: HistoryStore):
        history_store.insert(_record(offset_hours=-48))
        inside = _record(offset_hours=0)
        history_store.insert(inside)
        history_store.insert(_record(offset_hours=48))

        records = history_store.query(
            since=T0 - timedelta(hours=1), until=T0 + timedelta(hours=1)
        )
        assert [r.id for r in records] == [inside.id]

    def test_since_compares_across_offsets(self, history_store: HistoryStore):
        plus_two = timezone(timedelta(hours=2))
        record = FocusSessionRecord(
            completion_date=T0.astimezone(plus_two),
            task_label="Work",
            actual_duration_seconds=60,
        )
        history_store.insert(record)
        assert history_store.query(since=T0 - timedelta(seconds=1)) == [record]
        assert history_store.query(since=T0 + timedelta(seconds=1)) == []

    def test_empty(self, history_store: HistoryStore):
        assert history_store.query() == []


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_delete_one(self, history_store: HistoryStore):
        keep, drop = _record(), _record(offset_hours=1)
        history_store.insert(keep)
        history_store.insert(drop)
        assert history_store.delete(drop.id) is True
        assert [r.id for r in history_store.query()] == [keep.id]

    def test_delete_unknown(self, history_store: HistoryStore):
        assert history_store.delete("missing") is False

    def test_delete_all_returns_count(self, history_store: HistoryStore):
        for hours in range(3):
            history_store.insert(_record(offset_hours=hours))
        assert history_store.delete_all() == 3
        assert history_store.count() == 0
