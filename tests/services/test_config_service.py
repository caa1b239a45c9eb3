"""Unit tests for services/config_service.py.

Covers loading and saving config.json, dot-key access, task management
and the lru-cached factory. Uses a real ConfigService pointed at tmp_path.
"""

from __future__ import annotations

import json
import stat
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from zenfocus.models.config_models import AppConfig
from zenfocus.services.config_service import ConfigService, get_config_service


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def svc(tmp_config) -> ConfigService:
    return tmp_config


def _reload(svc: ConfigService) -> AppConfig:
    svc._config = None
    return svc.config


# ===========================================================================
# Load & save
# ===========================================================================


class TestLoadSave:
    def test_first_run_writes_defaults(self, svc):
        assert svc.config_path.exists()
        data = json.loads(svc.config_path.read_text())
        assert data["focus"]["default_duration_seconds"] == 1500
        assert [t["id"] for t in data["tasks"]] == ["work", "study", "coding", "reading"]

    def test_config_file_is_private(self, svc):
        mode = stat.S_IMODE(svc.config_path.stat().st_mode)
        assert mode == 0o600

    def test_changes_survive_reload(self, svc):
        svc.set("focus.daily_target_sessions", 5)
        assert _reload(svc).focus.daily_target_sessions == 5

    def test_corrupt_file_raises_runtime_error(self, svc):
        svc.config_path.write_text("{broken", encoding="utf-8")
        svc._config = None
        with pytest.raises(RuntimeError, match="Failed to load config"):
            svc.load_config()

    def test_save_error_raises_runtime_error(self, svc):
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(RuntimeError, match="Failed to save config"):
                svc.save_config()


# ===========================================================================
# Key access
# ===========================================================================


class TestKeyAccess:
    def test_get_nested(self, svc):
        assert svc.get("focus.ambient_track") == "rain"
        assert svc.get("output.format") == "table"

    def test_get_section(self, svc):
        assert svc.get("focus").default_duration_seconds == 1500

    @pytest.mark.parametrize("key", ["nope", "focus.nope", "focus.ambient_track.x"])
    def test_get_unknown_key(self, svc, key):
        with pytest.raises(KeyError):
            svc.get(key)

    def test_keys_lists_sections_and_leaves(self, svc):
        keys = svc.keys()
        assert "focus" in keys
        assert "focus.default_duration_seconds" in keys
        assert "output.format" in keys
        assert "tasks" in keys
        assert all(svc._has_key(svc.config, key) for key in keys)

    def test_set_validates(self, svc):
        with pytest.raises(ValidationError):
            svc.set("focus.default_duration_seconds", 0)
        assert svc.get("focus.default_duration_seconds") == 1500

    def test_set_normalizes_ambient_track(self, svc):
        svc.set("focus.ambient_track", "none")
        assert svc.get("focus.ambient_track") is None

    def test_set_unknown_key(self, svc):
        with pytest.raises(KeyError):
            svc.set("focus.volume", 3)

    def test_reset_single_key(self, svc):
        svc.set("focus.default_duration_seconds", 600)
        svc.set("focus.daily_target_sessions", 8)
        svc.reset_config("focus.default_duration_seconds")
        assert svc.get("focus.default_duration_seconds") == 1500
        assert svc.get("focus.daily_target_sessions") == 8

    def test_reset_section(self, svc):
        svc.set("focus.completion_bell", False)
        svc.reset_config("focus")
        assert svc.get("focus.completion_bell") is True

    def test_reset_tasks(self, svc):
        svc.add_task("Music")
        svc.reset_config("tasks")
        assert len(svc.list_tasks()) == 4

    def test_reset_everything(self, svc):
        svc.set("output.format", "json")
        svc.add_task("Music")
        svc.reset_config()
        assert _reload(svc) == AppConfig()

    def test_reset_unknown_key(self, svc):
        with pytest.raises(KeyError):
            svc.reset_config("focus.nope")


# ===========================================================================
# Tasks
# ===========================================================================


class TestTasks:
    def test_add_task_persists(self, svc):
        task = svc.add_task("Side Project", icon="🚀")
        assert task.id == "side-project"
        assert _reload(svc).get_task("side-project").icon == "🚀"

    def test_remove_task_persists(self, svc):
        svc.remove_task("reading")
        assert "reading" not in _reload(svc).task_ids()

    def test_get_task(self, svc):
        assert svc.get_task("Work").id == "work"

    def test_remove_unknown_task(self, svc):
        with pytest.raises(ValueError):
            svc.remove_task("gardening")


# ===========================================================================
# Factory
# ===========================================================================


def test_get_config_service_is_cached(tmp_path):
    get_config_service.cache_clear()
    with patch(
        "zenfocus.services.config_service.user_config_dir", return_value=str(tmp_path)
    ):
        with patch(
            "zenfocus.services.config_service.user_data_dir", return_value=str(tmp_path)
        ):
            first = get_config_service()
            assert get_config_service() is first
    get_config_service.cache_clear()
