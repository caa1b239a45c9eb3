"""Full-screen timer UI for focus mode."""

import time
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .analytics import FocusSummary, format_duration
from .engine import SessionEngine
from .keyboard import KeyboardHandler
from .sinks import AMBIENT_TRACKS
from .state import FocusSessionRecord, Phase, SessionRuntimeState

PAUSE_KEYS = ("p", " ")
RESUME_KEYS = ("r", " ")
STOP_KEYS = ("s",)
DETACH_KEYS = ("q",)


def format_clock(seconds: int) -> str:
    """``MM:SS`` countdown text."""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d}:{secs:02d}"


class TimerDisplay:
    """Manages the fullscreen timer display and forwards ticks to the engine."""

    def __init__(
        self,
        console: Console | None = None,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.console = console or Console()
        self.sleep = sleep
        self.monotonic = monotonic
        self.stopped_state: SessionRuntimeState | None = None

    def create_layout(
        self, state: SessionRuntimeState, paused_for: int = 0, today_line: str = ""
    ) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if state.phase == Phase.PAUSED:
            title, color = "⏸  PAUSED", "yellow"
        elif state.phase == Phase.RUNNING:
            title, color = "🎯  ZenFocus", "cyan"
        else:
            title, color = "✓  COMPLETED", "green"

        header_text = Text(title, style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        body_content = self._create_body_content(state, paused_for, today_line)
        layout["body"].update(Align.center(body_content, vertical="middle"))

        footer_text = self._create_footer_text(state.phase)
        layout["footer"].update(Align.center(footer_text, vertical="middle"))

        return layout

    def _create_body_content(
        self, state: SessionRuntimeState, paused_for: int, today_line: str
    ) -> Group:
        components = []

        if state.config.task_label:
            components.append(
                Text(state.config.task_label[:50], style="bold white", justify="center")
            )
            components.append(Text(""))

        remaining = state.remaining_seconds
        if state.phase == Phase.PAUSED:
            timer_color = "yellow"
        elif remaining < 60:
            timer_color = "red"
        elif remaining < 300:
            timer_color = "yellow"
        else:
            timer_color = "cyan"
        components.append(
            Text(format_clock(remaining), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        total = state.total_duration_seconds
        progress_pct = min(100, int(state.elapsed_seconds * 100 / total)) if total else 0
        bar_width = 40
        filled = int(bar_width * progress_pct / 100)
        progress_bar = "▓" * filled + "░" * (bar_width - filled)
        components.append(Text(f"{progress_bar}  {progress_pct}%", style="dim", justify="center"))

        details = []
        track = state.config.ambient_track
        if track:
            details.append(f"♪ {AMBIENT_TRACKS.get(track, track)}")
        if state.pause_count:
            details.append(f"{state.pause_count} pause{'s' if state.pause_count != 1 else ''}")
        if details:
            components.append(Text(""))
            components.append(Text("  •  ".join(details), style="dim", justify="center"))

        if state.phase == Phase.PAUSED and paused_for > 0:
            components.append(Text(""))
            components.append(
                Text(
                    f"Paused for: {format_clock(paused_for)}",
                    style="yellow dim",
                    justify="center",
                )
            )

        if today_line:
            components.append(Text(""))
            components.append(Text(today_line, style="dim", justify="center"))

        return Group(*components)

    def _create_footer_text(self, phase: Phase) -> Text:
        if phase == Phase.PAUSED:
            hints = "Press 'r' to resume  •  'q' to detach  •  's' to stop"
        else:
            hints = "Press 'p' to pause  •  'q' to detach  •  's' to stop"
        return Text(hints, style="dim", justify="center")

    def run(
        self,
        engine: SessionEngine,
        keyboard: KeyboardHandler | None = None,
        today_line: str = "",
        completion_hold: float = 2.0,
    ) -> str:
        """
        Run the fullscreen timer until the session ends or the user leaves.

        One tick is forwarded per elapsed second while running. After a long
        stall (e.g. the process was stopped) missed ticks are not replayed.

        Returns the outcome: 'completed', 'stopped', 'detached' or 'interrupted'.
        """
        keyboard = keyboard or KeyboardHandler()
        last_tick = self.monotonic()

        try:
            with Live(
                self.create_layout(engine.state, 0, today_line),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    key = keyboard.get_key()
                    phase = engine.phase

                    if key in PAUSE_KEYS and phase == Phase.RUNNING:
                        engine.pause()
                    elif key in RESUME_KEYS and phase == Phase.PAUSED:
                        engine.resume()
                        last_tick = self.monotonic()
                    elif key in STOP_KEYS:
                        self.stopped_state = engine.state
                        engine.reset()
                        return "stopped"
                    elif key in DETACH_KEYS:
                        engine.will_suspend()
                        return "detached"

                    now = self.monotonic()
                    if engine.phase != Phase.RUNNING:
                        last_tick = now
                    elif now - last_tick >= 1:
                        engine.tick()
                        last_tick = now if now - last_tick >= 2 else last_tick + 1

                    state = engine.state
                    live.update(
                        self.create_layout(state, state.paused_for(engine.clock()), today_line)
                    )
                    if state.phase == Phase.COMPLETED:
                        self.sleep(completion_hold)
                        return "completed"

                    self.sleep(0.25)

        except KeyboardInterrupt:
            engine.will_suspend()
            return "interrupted"
        finally:
            keyboard.stop()


def show_completion_message(
    record: FocusSessionRecord,
    summary: FocusSummary | None = None,
    console: Console | None = None,
):
    """Show the completion panel after a session ends."""
    console = console or Console()

    lines = [
        "[bold green]🎉 Focus Session Complete![/bold green]",
        "",
        f"Task: {record.task_label or 'N/A'}",
        f"Focused: {format_duration(record.actual_duration_seconds)}",
    ]
    if record.pause_count:
        lines.append(
            f"Pauses: {record.pause_count} ({format_duration(record.total_paused_seconds)})"
        )
    if summary is not None:
        lines.append(f"Today: {summary.today_sessions} of {summary.daily_target}")
        if summary.current_streak > 0:
            days = summary.current_streak
            lines.append(f"Current streak: {days} day{'s' if days != 1 else ''}")

    console.print(Panel("\n".join(lines), border_style="green", padding=(1, 2)))


def show_stopped_message(state: SessionRuntimeState, console: Console | None = None):
    """Show a message when a session is stopped early."""
    console = console or Console()

    console.print(
        Panel(
            f"""[bold yellow]Focus session stopped[/bold yellow]

Task: {state.config.task_label or "N/A"}
Focused: {format_duration(state.elapsed_seconds)} of {format_duration(state.total_duration_seconds)}

Stopped sessions are not saved to history.""",
            border_style="yellow",
            padding=(1, 2),
        )
    )
