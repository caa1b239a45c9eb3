"""Unit tests for the ambient player and notifier sinks."""

from __future__ import annotations

from unittest.mock import MagicMock

from zenfocus.models.focus.sinks import (
    ConsoleNotifier,
    NullAmbientPlayer,
    NullNotifier,
    TerminalAmbientPlayer,
)


class TestTerminalAmbientPlayer:
    def test_play_pause_resume_stop(self):
        player = TerminalAmbientPlayer()
        player.play_ambient("forest")
        assert player.playing
        assert player.track_name == "Forest"

        player.pause_ambient()
        assert not player.playing
        player.resume_ambient()
        assert player.playing

        player.stop_ambient()
        assert player.track_id is None
        assert player.track_name is None
        assert not player.playing

    def test_unknown_track_uses_id_as_name(self):
        player = TerminalAmbientPlayer()
        player.play_ambient("ocean")
        assert player.track_name == "ocean"

    def test_pause_without_track_is_noop(self):
        player = TerminalAmbientPlayer()
        player.pause_ambient()
        player.resume_ambient()
        assert not player.playing


class TestConsoleNotifier:
    def test_bell_on_completion(self):
        console = MagicMock()
        ConsoleNotifier(console).play_completion_alert()
        console.bell.assert_called_once()

    def test_bell_disabled(self):
        console = MagicMock()
        ConsoleNotifier(console, bell=False).play_completion_alert()
        console.bell.assert_not_called()

    def test_keep_awake_flag(self):
        notifier = ConsoleNotifier(MagicMock())
        assert notifier.keep_awake is False
        notifier.set_keep_awake(True)
        assert notifier.keep_awake is True
        notifier.set_keep_awake(False)
        assert notifier.keep_awake is False


def test_null_sinks_accept_every_call():
    player = NullAmbientPlayer()
    player.play_ambient("rain")
    player.pause_ambient()
    player.resume_ambient()
    player.stop_ambient()

    notifier = NullNotifier()
    notifier.play_completion_alert()
    notifier.set_keep_awake(True)
