"""JSON-file-backed display preferences."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict

LOGGER = logging.getLogger(__name__)

SHOW_ORIGINAL_BACKGROUND_KEY = "wardrobe-show-original-bg"


class JSONPreferenceStore:
    """Flat string key/value preferences persisted to one JSON file.

    Values are stored as strings (``"true"``/``"false"`` for flags) so the file
    mirrors what the browser keeps in local storage.
    """

    def __init__(self, path: str | Path = "data/preferences.json") -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            LOGGER.warning("Preferences file unreadable, using defaults", extra={"path": str(self.path)}, exc_info=exc)
            return {}
        return {str(key): str(value) for key, value in payload.items()} if isinstance(payload, dict) else {}

    def _save(self, payload: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2))

    def get_flag(self, key: str, default: bool = False) -> bool:
        with self._lock:
            raw = self._load().get(key)
        return default if raw is None else raw == "true"

    def set_flag(self, key: str, value: bool) -> bool:
        with self._lock:
            payload = self._load()
            payload[key] = "true" if value else "false"
            self._save(payload)
        return value

    def show_original_background(self) -> bool:
        """Whether item images show the original photo instead of the cut-out."""

        return self.get_flag(SHOW_ORIGINAL_BACKGROUND_KEY, default=False)

    def set_show_original_background(self, value: bool) -> bool:
        return self.set_flag(SHOW_ORIGINAL_BACKGROUND_KEY, bool(value))


__all__ = ["JSONPreferenceStore", "SHOW_ORIGINAL_BACKGROUND_KEY"]
