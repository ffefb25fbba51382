from typing import Any

import structlog

from sharenote.client.models import Settings
from sharenote.client.storage import LocalStorage

logger = structlog.get_logger(__name__)

SETTINGS_KEY = "markdown_notes_settings"


class SettingsStore:
    """Persisted editor preferences. Stored values are merged over defaults."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self.settings = self.load()

    def load(self) -> Settings:
        stored = self._storage.get(SETTINGS_KEY, {})
        if not isinstance(stored, dict):
            stored = {}
        merged = Settings().to_json_dict() | stored
        try:
            return Settings.model_validate(merged)
        except ValueError as e:
            logger.error("settings_invalid", error=str(e))
            return Settings()

    def update(self, **changes: Any) -> Settings:
        """Apply changes (snake_case field names), validate and persist."""
        self.settings = Settings.model_validate(self.settings.model_dump() | changes)
        self._storage.set(SETTINGS_KEY, self.settings.to_json_dict())
        return self.settings
