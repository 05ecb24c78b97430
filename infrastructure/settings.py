"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

APP_DIR = Path.home() / ".traveler"

DEFAULTS: dict[str, Any] = {
    "storage": {
        "data_dir": str(APP_DIR / "data"),
        "images_dir": str(APP_DIR / "data" / "images"),
    },
    "photos": {"delete_to_trash": False},
    "thumbnails": {"mem_cache": 256},
    "journal": {"cascade_deletes": False},
    "places": {
        "api_key": "",
        "radius_m": 5000,
        "placeholder_url": "https://example.com/default.jpg",
        "timeout": 10.0,
    },
    "location": {"latitude": 37.7749, "longitude": -122.4194},
    "logging": {"dir": str(APP_DIR / "logs"), "level": "INFO"},
}

ENV_OVERRIDES = {
    "places.api_key": "TRAVELER_PLACES_API_KEY",
}


def _merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge `extra` over `base` (in place) and return `base`."""
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    Values from the file are layered over `DEFAULTS`; a missing file leaves
    the defaults in place. Environment variables in `ENV_OVERRIDES` win over
    both.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(DEFAULTS)
        self._path = Path(settings_path) if settings_path else None
        if self._path is None:
            return
        if not self._path.exists():
            logger.info("settings.json not found, using defaults: {}", self._path)
            return
        with self._path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"settings.json must contain an object: {self._path}")
        _merge(self._data, loaded)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        env_name = ENV_OVERRIDES.get(key)
        if env_name and os.environ.get(env_name):
            return os.environ[env_name]
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_path(self, key: str) -> Path:
        """Return dotted `key` as an expanded filesystem path."""
        raw = str(self.get(key, "") or "")
        return Path(os.path.expanduser(os.path.expandvars(raw)))
