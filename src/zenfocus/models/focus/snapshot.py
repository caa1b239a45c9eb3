"""File-backed key/value store for in-flight session snapshots."""

import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Small JSON key/value store that survives process restarts."""

    def __init__(self, state_dir: Path | None = None):
        """Initialize snapshot store."""
        if state_dir is None:
            from platformdirs import user_data_dir

            state_dir = Path(user_data_dir("zenfocus")) / "state"

        self.state_dir = state_dir
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_file = self.state_dir / "snapshots.json"

    def _read(self) -> dict[str, Any]:
        if not self.state_file.exists():
            return {}
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Snapshot file %s is corrupted, ignoring it", self.state_file)
            return {}
        except OSError as e:
            raise PersistenceError(f"Could not read snapshots: {e}") from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        tmp_file = self.state_file.with_suffix(".tmp")
        try:
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_file.chmod(0o600)
            tmp_file.replace(self.state_file)
        except OSError as e:
            raise PersistenceError(f"Could not write snapshots: {e}") from e

    def get(self, key: str) -> Any | None:
        """Return the value stored under *key*, or None."""
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, overwriting in place."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Remove *key* if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
