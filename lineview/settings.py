"""User settings for the viewer.

Settings live in a JSON file in the user's config directory. Missing,
unreadable or invalid entries fall back to their defaults with a warning,
so a broken settings file never stops the viewer from starting.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import ViewerConstants

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ViewerSettings:
    tab_stop: int = ViewerConstants.TAB_STOP
    message_timeout: float = ViewerConstants.STATUS_MESSAGE_TIMEOUT
    read_timeout: int = ViewerConstants.READ_TIMEOUT
    log_file: Optional[str] = None
    log_level: str = "WARNING"


def validate_setting(key: str, value: Any) -> bool:
    """Validate a setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if setting is valid, False otherwise.
    """
    if key == 'tab_stop':
        return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 32
    if key == 'message_timeout':
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
    if key == 'read_timeout':
        # VTIME is a single cc byte in tenths of a second
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255
    if key == 'log_file':
        return value is None or isinstance(value, str)
    if key == 'log_level':
        return isinstance(value, str) and value.upper() in LOG_LEVELS
    # Unknown settings are ignored by load() rather than rejected here
    return True


class SettingsStore:
    """Loads viewer settings from the user's config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("lineview"))
        self._settings_file = self._config_dir / "settings.json"
        self._cache: Optional[ViewerSettings] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _read_raw(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> ViewerSettings:
        """Return the settings, reading the file on first use."""
        if self._cache is not None:
            return self._cache

        raw = self._read_raw()
        known = {f.name for f in fields(ViewerSettings)}
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known:
                logger.warning(f"Unknown setting {key!r}, ignoring")
                continue
            if not validate_setting(key, value):
                logger.warning(f"Invalid value {value!r} for setting {key!r}, using default")
                continue
            values[key] = value.upper() if key == 'log_level' else value

        self._cache = ViewerSettings(**values)
        return self._cache

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._cache = None


# Global instance
_store: Optional[SettingsStore] = None


def get_settings_store() -> SettingsStore:
    """Get the global settings store instance."""
    global _store
    if _store is None:
        _store = SettingsStore()
    return _store
