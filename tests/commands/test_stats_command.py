"""Unit tests for the stats command."""

from __future__ import annotations

import json
from datetime import date, datetime, time, timedelta
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from zenfocus.main import app
from zenfocus.models.config_models import AppConfig
from zenfocus.models.focus.state import FocusSessionRecord
from zenfocus.services.session_service import SessionService

runner = CliRunner()


@pytest.fixture()
def service(persistence) -> SessionService:
    svc = SessionService(AppConfig(), persistence=persistence, console=MagicMock())
    with patch("zenfocus.commands.stats.get_session_service", return_value=svc):
        yield svc


def _commit(service: SessionService, days_ago: int, label="Work", seconds=1500) -> None:
    day = date.today() - timedelta(days=days_ago)
    start = datetime.combine(day, time(10, 0)).astimezone()
    service.persistence.commit(
        FocusSessionRecord(
            completion_date=start + timedelta(seconds=seconds),
            task_label=label,
            actual_duration_seconds=seconds,
            started_at=start,
        )
    )


class TestStats:
    def test_empty_history(self, service):
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 0, result.output
        assert "Focus Summary" in result.output
        assert "Today: 0 of 3" in result.output
        assert "Current streak: 0 days" in result.output
        assert "Total sessions: 0" in result.output
        assert "This Week (0/7 days)" in result.output
        assert "Top task" not in result.output

    def test_with_history(self, service):
        _commit(service, 0, "Work", 1500)
        _commit(service, 1, "Coding", 3600)
        _commit(service, 2, "Work", 600)
        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0, result.output
        assert "Today: 1 of 3" in result.output
        assert "Current streak: 3 days" in result.output
        assert "Longest streak: 3 days" in result.output
        assert "Total sessions: 3" in result.output
        assert "Total focus time: 1h 35m" in result.output
        assert "Average session: 31m 40s" in result.output
        assert "Top task: Coding (1h 0m)" in result.output

    def test_target_reached(self, service):
        for _ in range(3):
            _commit(service, 0, seconds=60)
        result = runner.invoke(app, ["stats"])
        assert "target reached" in result.output

    def test_json_output(self, service):
        _commit(service, 0)
        result = runner.invoke(app, ["stats", "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["today_sessions"] == 1
        assert data["daily_target"] == 3
        assert len(data["week"]) == 7
