"""Bridge between the in-memory session and its durable stores."""

import logging
from collections.abc import Collection
from datetime import datetime

from .exceptions import PersistenceError
from .history import HistoryStore
from .snapshot import SnapshotStore
from .state import FocusSessionRecord, Phase, SessionRuntimeState, SessionSnapshot

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "current_session"


class SessionPersistence:
    """Snapshots and restores the running session and commits finished ones."""

    def __init__(
        self,
        snapshot_store: SnapshotStore | None = None,
        history_store: HistoryStore | None = None,
        catch_up_on_restore: bool = False,
    ):
        self.snapshot_store = snapshot_store or SnapshotStore()
        self.history_store = history_store or HistoryStore()
        self.catch_up_on_restore = catch_up_on_restore

    def snapshot(self, state: SessionRuntimeState, now: datetime) -> None:
        """Overwrite the stored snapshot with *state* as of *now*."""
        snapshot = SessionSnapshot(state=state, is_active=state.is_active, saved_at=now)
        self.snapshot_store.set(SNAPSHOT_KEY, snapshot.to_dict())

    def load_snapshot(self) -> SessionSnapshot | None:
        """Read the raw snapshot. Unreadable snapshots are discarded."""
        data = self.snapshot_store.get(SNAPSHOT_KEY)
        if data is None:
            return None
        try:
            return SessionSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable session snapshot: %s", e)
            self.clear()
            return None

    def has_active_snapshot(self) -> bool:
        """Check if a restorable snapshot exists."""
        try:
            snapshot = self.load_snapshot()
        except PersistenceError:
            return False
        return snapshot is not None and snapshot.is_active

    def restore(
        self, now: datetime, known_task_ids: Collection[str] | None = None
    ) -> SessionRuntimeState | None:
        """
        Rebuild the runtime state saved before the process was suspended.

        A paused session stays paused; the time spent suspended is added to
        its paused total and its pause clock restarts at *now*. A running
        session keeps its remaining time unless catch-up is enabled.

        Args:
            now: Current wall-clock time
            known_task_ids: Task ids that still exist; a snapshot for any
                other task is discarded

        Returns:
            The restored state, or None when there is nothing to restore
        """
        snapshot = self.load_snapshot()
        if snapshot is None:
            return None
        if not snapshot.is_active or not snapshot.state.is_active:
            logger.debug("Ignoring inactive session snapshot")
            return None

        state = snapshot.state
        if known_task_ids is not None and state.config.task_id not in known_task_ids:
            logger.warning(
                "Snapshot refers to unknown task %r, starting fresh",
                state.config.task_id,
            )
            self.clear()
            return None

        if state.phase == Phase.PAUSED:
            pause_started_at = state.pause_started_at or snapshot.saved_at
            gap = max(0, int((now - pause_started_at).total_seconds()))
            state.total_paused_seconds += gap
            state.pause_started_at = now
        elif state.phase == Phase.RUNNING and self.catch_up_on_restore:
            gap = max(0, int((now - snapshot.saved_at).total_seconds()))
            state.remaining_seconds = max(0, state.remaining_seconds - gap)

        logger.info(
            "Restored %s session for %r with %ds remaining",
            state.phase.value,
            state.config.task_label,
            state.remaining_seconds,
        )
        return state

    def commit(self, record: FocusSessionRecord) -> None:
        """Append *record* to history, then drop the snapshot.

        When the insert fails the snapshot is kept so the completion can be
        recovered on the next restore.
        """
        self.history_store.insert(record)
        self.clear()

    def clear(self) -> None:
        """Remove the active snapshot."""
        self.snapshot_store.remove(SNAPSHOT_KEY)

    def clear_history(self) -> int:
        """Delete all records and the active snapshot. Preferences are untouched."""
        deleted = self.history_store.delete_all()
        self.clear()
        return deleted

    def records(self, since: datetime | None = None) -> list[FocusSessionRecord]:
        """All committed records, most recent first."""
        return self.history_store.query(since=since)
