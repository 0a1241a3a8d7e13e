"""Settings persistence to JSON file."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tourdesk.domain.settings import AppSettings

logger = logging.getLogger(__name__)

API_URL_ENV = "TOURDESK_API_URL"


class SettingsStore:
    """Persists settings to JSON file.

    Settings are stored in the user's home directory by default. The
    ``TOURDESK_API_URL`` environment variable overrides the saved API base
    URL at load time without being written back.

    Example:
        >>> store = SettingsStore()
        >>> settings = store.load()
        >>> settings.ui_state.rows_per_page = 25
        >>> store.save(settings)
    """

    DEFAULT_PATH = Path.home() / ".tourdesk_settings.json"

    def __init__(self, path: Optional[Path] = None, environ: Optional[dict[str, str]] = None):
        """Initialize settings store.

        Args:
            path: Optional custom path for settings file.
                  Defaults to ~/.tourdesk_settings.json
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self._path = path or self.DEFAULT_PATH
        self._environ = os.environ if environ is None else environ

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Check if settings file exists (indicates not first run)."""
        return self._path.exists()

    def load(self) -> AppSettings:
        """Load settings from file.

        Returns:
            AppSettings instance. If the file doesn't exist or is invalid,
            returns default settings.
        """
        settings = AppSettings()
        if self._path.exists():
            try:
                data = json.loads(self._path.read_text())
                settings = AppSettings.model_validate(data)
            except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
                logger.warning(f"Could not load settings from {self._path}: {e}")
                settings = AppSettings()

        override = self._environ.get(API_URL_ENV)
        if override:
            try:
                settings.api.base_url = override
            except PydanticValidationError as e:
                logger.warning(f"Ignoring invalid {API_URL_ENV}={override!r}: {e}")
        return settings

    def save(self, settings: AppSettings) -> None:
        """Save settings to file.

        Args:
            settings: AppSettings to save
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(settings.model_dump_json(indent=2))

    def delete(self) -> bool:
        """Delete settings file.

        Returns:
            True if file was deleted, False if it didn't exist
        """
        if self._path.exists():
            self._path.unlink()
            return True
        return False
