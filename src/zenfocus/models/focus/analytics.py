"""Streak and statistics aggregation over focus session history."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from .state import FocusSessionRecord


def session_day(record: FocusSessionRecord) -> date:
    """Local calendar day a record counts towards (the day the session started)."""
    return record.session_date.astimezone().date()


def focus_days(records: Iterable[FocusSessionRecord]) -> dict[date, int]:
    """Map each day with at least one record to its focused seconds."""
    days: dict[date, int] = defaultdict(int)
    for record in records:
        days[session_day(record)] += record.actual_duration_seconds
    return dict(days)


def current_streak(days: Iterable[date], today: date) -> int:
    """
    Consecutive days with a record, counted backward.

    The count starts today, or yesterday when today has no record yet, and
    stops at the first day without one.
    """
    day_set = set(days)
    current = today if today in day_set else today - timedelta(days=1)

    streak = 0
    while current in day_set:
        streak += 1
        current -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive days with a record."""
    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(set(days)):
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def format_duration(seconds: int) -> str:
    """Compact human duration: ``1h 5m``, ``4m 12s`` or ``30s``."""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@dataclass
class FocusSummary:
    """Aggregated statistics for display."""

    today_sessions: int = 0
    daily_target: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_sessions: int = 0
    total_seconds: int = 0
    average_seconds: int = 0
    top_task: str | None = None
    top_task_seconds: int = 0
    week: list[tuple[date, int, int]] = field(default_factory=list)

    @property
    def target_reached(self) -> bool:
        return self.daily_target > 0 and self.today_sessions >= self.daily_target

    @property
    def active_days_this_week(self) -> int:
        return sum(1 for _, count, _ in self.week if count > 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "today_sessions": self.today_sessions,
            "daily_target": self.daily_target,
            "target_reached": self.target_reached,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_sessions": self.total_sessions,
            "total_seconds": self.total_seconds,
            "average_seconds": self.average_seconds,
            "top_task": self.top_task,
            "top_task_seconds": self.top_task_seconds,
            "week": [
                {"date": day.isoformat(), "sessions": count, "seconds": seconds}
                for day, count, seconds in self.week
            ],
        }


class FocusAnalytics:
    """Compute streaks and summaries from a list of records."""

    def __init__(self, records: Iterable[FocusSessionRecord]):
        self.records = list(records)

    def sessions_on(self, day: date) -> list[FocusSessionRecord]:
        """Records attributed to *day*."""
        return [r for r in self.records if session_day(r) == day]

    def today_count(self, today: date | None = None) -> int:
        """Number of sessions completed today."""
        today = today or datetime.now().date()
        return len(self.sessions_on(today))

    def current_streak(self, today: date | None = None) -> int:
        today = today or datetime.now().date()
        return current_streak(focus_days(self.records), today)

    def longest_streak(self) -> int:
        return longest_streak(focus_days(self.records))

    def task_totals(self) -> dict[str, int]:
        """Focused seconds per task label."""
        totals: dict[str, int] = defaultdict(int)
        for record in self.records:
            totals[record.task_label] += record.actual_duration_seconds
        return dict(totals)

    def week(self, today: date | None = None) -> list[tuple[date, int, int]]:
        """(day, sessions, seconds) for each day of the week containing *today*, Monday first."""
        today = today or datetime.now().date()
        monday = today - timedelta(days=today.weekday())
        counts: dict[date, int] = defaultdict(int)
        seconds: dict[date, int] = defaultdict(int)
        for record in self.records:
            day = session_day(record)
            counts[day] += 1
            seconds[day] += record.actual_duration_seconds

        days = [monday + timedelta(days=i) for i in range(7)]
        return [(day, counts[day], seconds[day]) for day in days]

    def summary(self, daily_target: int = 0, today: date | None = None) -> FocusSummary:
        """
        Build the full statistics summary.

        Args:
            daily_target: Sessions per day the user aims for
            today: Reference day (defaults to the local current date)

        Returns:
            FocusSummary
        """
        today = today or datetime.now().date()
        days = focus_days(self.records)
        total_seconds = sum(r.actual_duration_seconds for r in self.records)
        total_sessions = len(self.records)

        top_task = None
        top_seconds = 0
        task_totals = self.task_totals()
        if task_totals:
            top_task, top_seconds = max(task_totals.items(), key=lambda x: x[1])

        return FocusSummary(
            today_sessions=self.today_count(today),
            daily_target=daily_target,
            current_streak=current_streak(days, today),
            longest_streak=longest_streak(days),
            total_sessions=total_sessions,
            total_seconds=total_seconds,
            average_seconds=total_seconds // total_sessions if total_sessions else 0,
            top_task=top_task,
            top_task_seconds=top_seconds,
            week=self.week(today),
        )
