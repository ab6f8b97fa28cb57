"""
Local durable key/value storage for Adducation.

A string-valued store that persists to a single JSON file. Every mutation is
written through to disk so a restart sees the latest values. With no path the
store lives in memory only.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


# Well-known keys
AUTH_TOKEN_KEY = "auth_token"
CURRENT_USER_KEY = "current_user"
API_KEY_KEY = "openrouter_api_key"
SELECTED_MODEL_KEY = "openrouter_selected_model"
THEME_KEY = "theme"
SHOW_DEBUG_KEY = "showDebug"
PROGRESS_KEY = "gamification_progress"


class LocalStore:
    """
    File-backed string key/value store.

    Values are always strings; helpers are provided for JSON payloads.
    """

    def __init__(self, path: str | Path | None = None):
        """
        Initialize the store, loading any existing file.

        Args:
            path: JSON file location, or None for an in-memory store
        """
        self.path = Path(path) if path else None
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read local storage at {self.path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed local storage file {self.path}")
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._save()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._save()

    def clear(self) -> None:
        self._data.clear()
        self._save()

    def keys(self) -> list[str]:
        return list(self._data)

    def get_json(self, key: str) -> Any:
        """Decode a JSON value, returning None when absent or corrupt."""
        value = self.get_item(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Discarding corrupt JSON under key '{key}'")
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))
