"""JSON-backed settings store."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from dirsize.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "dirsize"
_SETTINGS_FILE = "settings.json"

DEFAULTS: dict[str, Any] = {
    "log": {
        "path": "directory_sizes.log",
        "timestamps": True,
        "levels": True,
    },
    "report": {
        "jobs": 1,
        "truncate_sizes": False,
        "name_width": 30,
        "size_width": 10,
    },
}

_MISSING = object()


class SettingsError(ValueError):
    """Raised when a setting is unknown or holds a value of the wrong type."""


def _lookup(data: dict[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def check_value(key: str, value: Any) -> Any:
    """Validate *value* against the type of the built-in default for *key*.

    Raises:
        SettingsError: If *key* is unknown or *value* has the wrong type.
    """
    default = _lookup(DEFAULTS, key)
    if default is _MISSING or isinstance(default, dict):
        raise SettingsError(f"Unknown setting: {key}")
    if type(value) is not type(default):
        expected = type(default).__name__
        raise SettingsError(f"{key} expects {expected}, got {json.dumps(value)}")
    if type(value) is int and value < 1:
        raise SettingsError(f"{key} must be at least 1, got {value}")
    return value


def parse_value(key: str, raw: str) -> Any:
    """Parse command-line text for *key* and validate it.

    String settings keep the text as given; everything else is read as JSON.
    """
    default = _lookup(DEFAULTS, key)
    if isinstance(default, str):
        return check_value(key, raw)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return check_value(key, value)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access, falling back to
    ``DEFAULTS`` for anything the file does not set:
        settings.get("log.path")          # "directory_sizes.log" unless overridden
        settings.set("report.jobs", 4)    # writes + saves
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        value = _lookup(self._data, key)
        if value is _MISSING:
            value = _lookup(DEFAULTS, key)
        return default if value is _MISSING else value

    def checked(self, key: str) -> Any:
        """Get a value by dot-notation key, validated against its default.

        Raises:
            SettingsError: If the stored value has the wrong type.
        """
        return check_value(key, self.get(key))

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def effective(self) -> dict[str, Any]:
        """Defaults overlaid with stored values."""
        return _merge(DEFAULTS, self._data)

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self.path, e)
            return
        if not isinstance(data, dict):
            log.warning("Ignoring settings in %s: expected a JSON object", self.path)
            return
        self._data = data

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self.path, e)
