"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_SETTINGS: dict[str, Any] = {
    "database": {"path": str(Path.home() / ".photomapper" / "photos.db")},
    "logging": {"dir": str(Path.home() / ".photomapper" / "logs"), "console": False},
    "thumbnail": {"width": 512, "height": 384, "quality": 50},
    "map": {"start_zoom": 13, "fallback_latitude": 0.0, "fallback_longitude": 0.0},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonSettings:
    """JSON settings reader with dotted-key access and built-in defaults."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path is not None else None
        data: dict[str, Any] = {}
        if self._path is not None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            else:
                logger.warning("settings.json not found: {}, using defaults", self._path)
        self._data = _merge(DEFAULT_SETTINGS, data)

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
        """Return `key` as int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Setting {} is not an integer, using {}", key, default)
            return default

    def get_float(self, key: str, default: float) -> float:
        """Return `key` as float, falling back to `default` on bad values."""
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Setting {} is not a number, using {}", key, default)
            return default

    def get_path(self, key: str) -> Path:
        """Return `key` as a path with `~` and environment variables expanded."""
        raw = str(self.get(key, ""))
        return Path(os.path.expandvars(raw)).expanduser()
