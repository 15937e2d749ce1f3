"""
Persisted local state.

A small JSON document on disk holding client-side state such as the
signed-in session and recent searches. Values are read and replaced
wholesale; two processes writing the same key race and the last write wins.
"""

import json
from pathlib import Path
from typing import Any

from staybook.logging import get_logger

logger = get_logger("storage")


class LocalStore:
    """Key/value state persisted as one JSON file (or kept in memory)."""

    def __init__(self, path: str | Path | None = None) -> None:
        """
        Args:
            path: JSON file to persist to; None keeps state in memory only
        """
        self.path = Path(path) if path is not None else None
        self._memory: dict[str, Any] = {}

    def _read_all(self) -> dict[str, Any]:
        if self.path is None:
            return dict(self._memory)
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable local state file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        if self.path is None:
            self._memory = data
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def clear(self) -> None:
        """Forget everything, as on a forced sign-out."""
        self._write_all({})
