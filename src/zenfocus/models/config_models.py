"""Configuration models for ZenFocus preferences.

Preferences are mutable user settings: the default session length, the daily
target, the ambient track and the list of tasks a session can be started on.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from zenfocus.models.focus.sinks import AMBIENT_TRACKS


def slugify(name: str) -> str:
    """Turn a task name into a stable identifier."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or "task"


class FocusTask(BaseModel):
    """Something the user focuses on."""

    id: str = Field(..., description="Stable task identifier")
    name: str = Field(..., description="Display label")
    icon: str = Field(default="•")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


def default_tasks() -> list[FocusTask]:
    return [
        FocusTask(id="work", name="Work", icon="💻"),
        FocusTask(id="study", name="Study", icon="📖"),
        FocusTask(id="coding", name="Coding", icon="⌨"),
        FocusTask(id="reading", name="Reading", icon="📕"),
    ]


class FocusConfig(BaseModel):
    """Focus session configuration."""

    default_duration_seconds: int = Field(default=1500, gt=0)
    daily_target_sessions: int = Field(default=3, ge=1)
    ambient_track: str | None = Field(default="rain")
    catch_up_on_restore: bool = Field(
        default=False,
        description="Subtract time spent suspended when restoring a running session",
    )
    completion_bell: bool = Field(default=True)

    @field_validator("ambient_track")
    @classmethod
    def validate_ambient_track(cls, v: str | None) -> str | None:
        if v is None or v.lower() in ("", "none", "off"):
            return None
        v = v.lower()
        if v not in AMBIENT_TRACKS:
            raise ValueError(
                f"unknown ambient track '{v}', choose from: {', '.join(AMBIENT_TRACKS)}"
            )
        return v


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="table")


class AppConfig(BaseModel):
    """Main ZenFocus configuration."""

    focus: FocusConfig = Field(default_factory=FocusConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    tasks: list[FocusTask] = Field(default_factory=default_tasks)

    def get_task(self, key: str) -> FocusTask:
        """Get a task by id or (case-insensitive) name."""
        for task in self.tasks:
            if task.id == key:
                return task
        for task in self.tasks:
            if task.name.lower() == key.lower():
                return task
        raise ValueError(f"Task '{key}' not found")

    def task_ids(self) -> set[str]:
        return {task.id for task in self.tasks}

    def add_task(self, name: str, icon: str = "•") -> FocusTask:
        """Add a task, deriving a unique id from its name."""
        if any(t.name.lower() == name.strip().lower() for t in self.tasks):
            raise ValueError(f"Task '{name}' already exists")
        base = slugify(name)
        task_id = base
        suffix = 2
        while task_id in self.task_ids():
            task_id = f"{base}-{suffix}"
            suffix += 1
        task = FocusTask(id=task_id, name=name, icon=icon)
        self.tasks.append(task)
        return task

    def remove_task(self, key: str) -> FocusTask:
        """Remove a task by id or name."""
        task = self.get_task(key)
        self.tasks = [t for t in self.tasks if t.id != task.id]
        return task
