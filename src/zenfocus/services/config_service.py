"""Configuration service for ZenFocus preferences.

ConfigService is the single source of truth for user preferences. It handles:

- Loading and saving config.json
- Dot-separated key access for the ``config`` command
- The task list sessions are started on
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from zenfocus.models.config_models import AppConfig, FocusTask


class ConfigService:
    """Service for loading, saving and editing the application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("zenfocus"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("zenfocus"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self, key: str | None = None):
        """Reset the whole configuration, or a single key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return
        default_value = self.get_from_config(AppConfig(), key)
        if default_value is None and not self._has_key(AppConfig(), key):
            raise KeyError(f"Configuration key '{key}' not found")
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        elif isinstance(default_value, list):
            default_value = [
                v.model_dump() if isinstance(v, BaseModel) else v for v in default_value
            ]
        self.set(key, default_value)

    @staticmethod
    def _has_key(config: AppConfig, key: str) -> bool:
        value: Any = config
        for k in key.split("."):
            if not isinstance(value, BaseModel) or k not in type(value).model_fields:
                return False
            value = getattr(value, k)
        return True

    @staticmethod
    def get_from_config(config: AppConfig, key: str) -> Any:
        """Get value from a config object using dot notation."""
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value

    def keys(self) -> list[str]:
        """All dot-separated keys, sections included."""
        keys: list[str] = []

        def walk(model: BaseModel, prefix: str) -> None:
            for name in type(model).model_fields:
                key = f"{prefix}{name}"
                keys.append(key)
                value = getattr(model, name)
                if isinstance(value, BaseModel):
                    walk(value, f"{key}.")

        walk(self.config, "")
        return keys

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        if not self._has_key(self.config, key):
            raise KeyError(f"Configuration key '{key}' not found")
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        The whole configuration is re-validated, so an invalid value raises
        pydantic.ValidationError and leaves the stored config untouched.
        """
        if not self._has_key(self.config, key):
            raise KeyError(f"Configuration key '{key}' not found")

        keys = key.split(".")
        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()

    def list_tasks(self) -> list[FocusTask]:
        """List all tasks."""
        return self.config.tasks

    def get_task(self, key: str) -> FocusTask:
        """Get a task by id or name. Raises ValueError if not found."""
        return self.config.get_task(key)

    def add_task(self, name: str, icon: str = "•") -> FocusTask:
        """Add a task and persist it."""
        task = self.config.add_task(name, icon)
        self.save_config()
        return task

    def remove_task(self, key: str) -> FocusTask:
        """Remove a task and persist the change. History is not touched."""
        task = self.config.remove_task(key)
        self.save_config()
        return task


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
