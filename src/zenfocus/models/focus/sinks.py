"""Side-effect sinks signaled by the session engine.

The engine calls these one-way and never depends on them for correctness.
"""

import logging
from typing import Protocol

from rich.console import Console

logger = logging.getLogger(__name__)

AMBIENT_TRACKS = {
    "rain": "Rain",
    "forest": "Forest",
    "cafe": "Cafe",
}


class AmbientPlayer(Protocol):
    """Plays a looping ambient track during a session."""

    def play_ambient(self, track_id: str) -> None: ...

    def pause_ambient(self) -> None: ...

    def resume_ambient(self) -> None: ...

    def stop_ambient(self) -> None: ...


class Notifier(Protocol):
    """Completion alert and idle-sleep control."""

    def play_completion_alert(self) -> None: ...

    def set_keep_awake(self, enabled: bool) -> None: ...


class TerminalAmbientPlayer:
    """Tracks ambient playback state for display in the terminal UI."""

    def __init__(self):
        self.track_id: str | None = None
        self.playing = False

    @property
    def track_name(self) -> str | None:
        if self.track_id is None:
            return None
        return AMBIENT_TRACKS.get(self.track_id, self.track_id)

    def play_ambient(self, track_id: str) -> None:
        self.track_id = track_id
        self.playing = True
        logger.debug("Ambient track started: %s", track_id)

    def pause_ambient(self) -> None:
        if self.track_id is not None:
            self.playing = False
            logger.debug("Ambient track paused: %s", self.track_id)

    def resume_ambient(self) -> None:
        if self.track_id is not None:
            self.playing = True
            logger.debug("Ambient track resumed: %s", self.track_id)

    def stop_ambient(self) -> None:
        if self.track_id is not None:
            logger.debug("Ambient track stopped: %s", self.track_id)
        self.track_id = None
        self.playing = False


class ConsoleNotifier:
    """Rings the terminal bell on completion and records the keep-awake flag."""

    def __init__(self, console: Console | None = None, bell: bool = True):
        self.console = console or Console()
        self.bell = bell
        self.keep_awake = False

    def play_completion_alert(self) -> None:
        if self.bell:
            self.console.bell()

    def set_keep_awake(self, enabled: bool) -> None:
        if enabled != self.keep_awake:
            logger.debug("Keep awake %s", "enabled" if enabled else "disabled")
        self.keep_awake = enabled


class NullAmbientPlayer:
    """Ambient player that does nothing."""

    def play_ambient(self, track_id: str) -> None:
        pass

    def pause_ambient(self) -> None:
        pass

    def resume_ambient(self) -> None:
        pass

    def stop_ambient(self) -> None:
        pass


class NullNotifier:
    """Notifier that does nothing."""

    def play_completion_alert(self) -> None:
        pass

    def set_keep_awake(self, enabled: bool) -> None:
        pass
