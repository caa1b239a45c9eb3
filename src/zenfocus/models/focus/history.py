"""Focus session history with SQLite storage."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from .exceptions import PersistenceError
from .state import FocusSessionRecord

logger = logging.getLogger(__name__)


def _row_to_record(row: sqlite3.Row) -> FocusSessionRecord:
    started_at = row["started_at"]
    return FocusSessionRecord(
        id=row["id"],
        completion_date=datetime.fromisoformat(row["completion_date"]),
        task_label=row["task_label"] or "",
        actual_duration_seconds=row["actual_duration_seconds"],
        pause_count=row["pause_count"],
        total_paused_seconds=row["total_paused_seconds"],
        task_id=row["task_id"],
        started_at=datetime.fromisoformat(started_at) if started_at else None,
        planned_duration_seconds=row["planned_duration_seconds"],
    )


class HistoryStore:
    """Durable store of completed focus sessions in a SQLite database."""

    def __init__(self, db_path: Path | None = None):
        """Initialize history store."""
        if db_path is None:
            from platformdirs import user_data_dir

            db_path = Path(user_data_dir("zenfocus")) / "focus_history.db"

        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS focus_sessions (
                        id TEXT PRIMARY KEY,
                        task_id TEXT,
                        task_label TEXT NOT NULL,
                        started_at TEXT,
                        completion_date TEXT NOT NULL,
                        planned_duration_seconds INTEGER,
                        actual_duration_seconds INTEGER NOT NULL,
                        pause_count INTEGER NOT NULL DEFAULT 0,
                        total_paused_seconds INTEGER NOT NULL DEFAULT 0,
                        created_at TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_focus_sessions_completed
                    ON focus_sessions(completion_date)
                    """
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open history database: {e}") from e

    def insert(self, record: FocusSessionRecord) -> None:
        """Append a completed session. Records are never updated afterwards."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO focus_sessions (
                        id, task_id, task_label, started_at, completion_date,
                        planned_duration_seconds, actual_duration_seconds,
                        pause_count, total_paused_seconds, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.task_id,
                        record.task_label,
                        record.started_at.isoformat() if record.started_at else None,
                        record.completion_date.isoformat(),
                        record.planned_duration_seconds,
                        record.actual_duration_seconds,
                        record.pause_count,
                        record.total_paused_seconds,
                        datetime.now().astimezone().isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not save session {record.id}: {e}") from e
        logger.debug("Inserted focus session %s", record.id)

    def query(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        task_label: str | None = None,
        limit: int | None = None,
    ) -> list[FocusSessionRecord]:
        """
        Return records, most recent first.

        Args:
            since: Only sessions whose day timestamp is at or after this moment
            until: Only sessions whose day timestamp is before this moment
            task_label: Only sessions for this task label
            limit: Maximum number of records to return

        Returns:
            List of FocusSessionRecord
        """
        sql = "SELECT * FROM focus_sessions"
        params: tuple = ()
        if task_label is not None:
            sql += " WHERE task_label = ?"
            params = (task_label,)

        try:
            with self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read history: {e}") from e

        records = [_row_to_record(row) for row in rows]
        # Offsets may differ between rows, so compare as datetimes, not strings
        if since is not None:
            records = [r for r in records if r.session_date >= since]
        if until is not None:
            records = [r for r in records if r.session_date < until]
        records.sort(key=lambda r: r.completion_date, reverse=True)

        if limit is not None:
            records = records[:limit]
        return records

    def get(self, record_id: str) -> FocusSessionRecord | None:
        """Get a single record by id."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM focus_sessions WHERE id = ?", (record_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read history: {e}") from e
        return _row_to_record(row) if row else None

    def delete(self, record_id: str) -> bool:
        """Delete one record. Returns True when a row was removed."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM focus_sessions WHERE id = ?", (record_id,)
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not delete session {record_id}: {e}") from e
        return cursor.rowcount > 0

    def delete_all(self) -> int:
        """Delete every record. Returns the number of rows removed."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM focus_sessions")
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not clear history: {e}") from e
        logger.info("Cleared %d focus sessions from history", cursor.rowcount)
        return cursor.rowcount

    def count(self) -> int:
        """Number of stored records."""
        try:
            with self._connect() as conn:
                return conn.execute("SELECT COUNT(*) FROM focus_sessions").fetchone()[0]
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read history: {e}") from e
