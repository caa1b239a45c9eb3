"""Focus session state machine.

The engine owns the single SessionRuntimeState and moves it through
``idle -> running <-> paused -> completed``. It is driven by explicit user
actions, by a 1 Hz tick and by host lifecycle signals (suspend/resume).
Persistence and side-effect sinks are called one-way: their failures are
logged and recorded but never leave the state machine inconsistent.
"""

import logging
import threading
from collections.abc import Callable, Collection
from datetime import datetime

from .exceptions import (
    InvalidConfigError,
    InvalidTransitionError,
    NoTaskSelectedError,
    PersistenceError,
)
from .persistence import SessionPersistence
from .sinks import AmbientPlayer, Notifier, NullAmbientPlayer, NullNotifier
from .state import (
    FocusSessionRecord,
    Phase,
    SessionConfig,
    SessionRuntimeState,
    now_local,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 25 * 60

Listener = Callable[[SessionRuntimeState], None]


class SessionEngine:
    """Drives a countdown session through its lifecycle."""

    def __init__(
        self,
        persistence: SessionPersistence | None = None,
        ambient: AmbientPlayer | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = now_local,
        default_config: SessionConfig | None = None,
    ):
        self.persistence = persistence
        self.ambient = ambient or NullAmbientPlayer()
        self.notifier = notifier or NullNotifier()
        self.clock = clock

        config = default_config or SessionConfig(
            total_duration_seconds=DEFAULT_DURATION_SECONDS, task_id=None
        )
        self._state = SessionRuntimeState.idle(config)
        self._completion_signaled = False
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self.last_record: FocusSessionRecord | None = None
        self.last_persistence_error: PersistenceError | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionRuntimeState:
        """Copy of the current runtime state."""
        with self._lock:
            return self._state.copy()

    @property
    def phase(self) -> Phase:
        with self._lock:
            return self._state.phase

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every transition. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self, config: SessionConfig) -> None:
        """Start a new run. Raises a SessionValidationError and leaves state unchanged on bad input."""
        with self._lock:
            if self._state.phase != Phase.IDLE:
                raise InvalidTransitionError(
                    f"Cannot start a session while {self._state.phase.value}"
                )
            if not config.task_id:
                raise NoTaskSelectedError()
            if (
                isinstance(config.total_duration_seconds, bool)
                or not isinstance(config.total_duration_seconds, int)
                or config.total_duration_seconds <= 0
            ):
                raise InvalidConfigError(
                    f"Duration must be a positive number of seconds, "
                    f"got {config.total_duration_seconds!r}"
                )

            now = self.clock()
            self._state = SessionRuntimeState(
                config=config,
                phase=Phase.RUNNING,
                remaining_seconds=config.total_duration_seconds,
                started_at=now,
            )
            self._completion_signaled = False
            self.last_record = None
            logger.info(
                "Session started: %r for %ds",
                config.task_label,
                config.total_duration_seconds,
            )

            if config.ambient_track:
                self.ambient.play_ambient(config.ambient_track)
            self.notifier.set_keep_awake(True)
            self._snapshot(now)
            self._notify()

    def pause(self) -> None:
        """Pause a running session."""
        with self._lock:
            if self._state.phase != Phase.RUNNING:
                raise InvalidTransitionError("Can only pause running sessions")

            now = self.clock()
            self._state.phase = Phase.PAUSED
            self._state.pause_count += 1
            self._state.pause_started_at = now
            logger.debug("Session paused (%d)", self._state.pause_count)

            self.ambient.pause_ambient()
            self.notifier.set_keep_awake(False)
            self._snapshot(now)
            self._notify()

    def resume(self) -> None:
        """Resume a paused session, adding the pause to the paused total."""
        with self._lock:
            if self._state.phase != Phase.PAUSED:
                raise InvalidTransitionError("Can only resume paused sessions")

            now = self.clock()
            self._state.total_paused_seconds += self._state.paused_for(now)
            self._state.pause_started_at = None
            self._state.phase = Phase.RUNNING
            logger.debug(
                "Session resumed, paused %ds in total",
                self._state.total_paused_seconds,
            )

            self.ambient.resume_ambient()
            self.notifier.set_keep_awake(True)
            self._snapshot(now)
            self._notify()

    def toggle(self) -> None:
        """Pause when running, resume when paused."""
        with self._lock:
            if self._state.phase == Phase.RUNNING:
                self.pause()
            elif self._state.phase == Phase.PAUSED:
                self.resume()
            else:
                raise InvalidTransitionError(
                    f"Nothing to pause or resume while {self._state.phase.value}"
                )

    def reset(self) -> None:
        """Abandon the current run and return to idle. No record is written."""
        with self._lock:
            previous = self._state.phase
            self._completion_signaled = True
            self._state = SessionRuntimeState.idle(self._state.config)
            if previous != Phase.IDLE:
                logger.info("Session reset from %s", previous.value)

            self.ambient.stop_ambient()
            self.notifier.set_keep_awake(False)
            self._clear_snapshot()
            self._notify()

    def dismiss_completion(self) -> None:
        """Return to idle after the completion has been shown."""
        with self._lock:
            if self._state.phase != Phase.COMPLETED:
                raise InvalidTransitionError("No completed session to dismiss")
            self._state = SessionRuntimeState.idle(self._state.config)
            self._notify()

    # ------------------------------------------------------------------
    # Tick driver
    # ------------------------------------------------------------------

    def tick(self) -> FocusSessionRecord | None:
        """
        Advance a running session by one second.

        Ticks outside the running phase are ignored.

        Returns:
            The committed record when this tick completed the session
        """
        with self._lock:
            if self._state.phase != Phase.RUNNING:
                return None

            if self._state.remaining_seconds > 0:
                self._state.remaining_seconds -= 1

            if self._state.remaining_seconds == 0:
                return self._complete()

            self._snapshot(self.clock())
            self._notify()
            return None

    def _complete(self) -> FocusSessionRecord | None:
        if self._completion_signaled:
            return None
        self._completion_signaled = True

        now = self.clock()
        # A failed commit leaves this zero-remaining snapshot for the next restore
        self._snapshot(now)
        record = FocusSessionRecord.from_state(self._state, completion_date=now)
        self._state.phase = Phase.COMPLETED
        self.last_record = record
        logger.info(
            "Session completed: %r, %ds focused, %d pauses",
            record.task_label,
            record.actual_duration_seconds,
            record.pause_count,
        )

        self.ambient.stop_ambient()
        self.notifier.play_completion_alert()
        self.notifier.set_keep_awake(False)
        if self.persistence is not None:
            try:
                self.persistence.commit(record)
            except PersistenceError as e:
                self._persistence_failed("commit", e)
            else:
                self.last_persistence_error = None
        self._notify()
        return record

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    def will_suspend(self) -> None:
        """Snapshot the live session before the process may be suspended."""
        with self._lock:
            if self._state.is_active:
                self._snapshot(self.clock())

    def did_resume(self, known_task_ids: Collection[str] | None = None) -> bool:
        """Restore a suspended session unless one is already live in memory."""
        with self._lock:
            if self._state.phase != Phase.IDLE:
                return False
            return self.restore(known_task_ids)

    def restore(self, known_task_ids: Collection[str] | None = None) -> bool:
        """Adopt the snapshot saved before suspension. Returns True on success."""
        with self._lock:
            if self._state.phase != Phase.IDLE or self.persistence is None:
                return False
            try:
                restored = self.persistence.restore(self.clock(), known_task_ids)
            except PersistenceError as e:
                self._persistence_failed("restore", e)
                return False
            if restored is None:
                return False

            self._state = restored
            self._completion_signaled = False
            track = restored.config.ambient_track
            if restored.phase == Phase.RUNNING:
                if track:
                    self.ambient.play_ambient(track)
                self.notifier.set_keep_awake(True)
            self._notify()
            return True

    def teardown(self) -> None:
        """Discard the engine's state without writing a record or snapshot."""
        with self._lock:
            if self._state.is_active:
                logger.debug("Engine torn down with a %s session", self._state.phase.value)
            self._completion_signaled = True
            self._state = SessionRuntimeState.idle(self._state.config)
            self.ambient.stop_ambient()
            self.notifier.set_keep_awake(False)
            self._listeners.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _snapshot(self, now: datetime) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.snapshot(self._state, now)
        except PersistenceError as e:
            self._persistence_failed("snapshot", e)

    def _clear_snapshot(self) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.clear()
        except PersistenceError as e:
            self._persistence_failed("clear", e)

    def _persistence_failed(self, operation: str, error: PersistenceError) -> None:
        self.last_persistence_error = error
        logger.warning("Session %s failed, continuing in memory: %s", operation, error)

    def _notify(self) -> None:
        state = self._state.copy()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)
