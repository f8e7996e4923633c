"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as an int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default) or default)
        except (ValueError, TypeError):
            return default

    def get_float(self, key: str, default: float) -> float:
        """Return `key` as a float, falling back to `default` on bad values."""
        try:
            return float(self.get(key, default) or default)
        except (ValueError, TypeError):
            return default


class DefaultSettings(JsonSettings):
    """Settings used when no settings file is available; every key is unset."""

    def __init__(self) -> None:  # pylint: disable=super-init-not-called
        self._path = None
        self._data = {}
