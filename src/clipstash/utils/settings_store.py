import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from clipstash.models.settings import Settings

logger = logging.getLogger(__name__)


class SettingsStore:
    """JSON-backed persistence for :class:`Settings`."""

    def __init__(self, path: Path):
        self.path = path
        self._settings: Optional[Settings] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> Settings:
        if not self.path.exists():
            return Settings()

        try:
            return Settings.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable settings at {self.path}: {e}")
            return Settings()

    def save(self, settings: Settings) -> bool:
        self._settings = settings
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
            return True
        except OSError as e:
            logger.error(f"Failed to save settings to {self.path}: {e}")
            return False
