"""Local persistence of the last go-live settings."""

from __future__ import annotations

from pathlib import Path

import orjson
from loguru import logger
from pydantic import ValidationError

from golive.app_config import get_app_environ_config
from golive.schemas import GoLiveSettings
from golive.utils.go_live_errors import PersistenceError


class SettingsStore:
    """Stores one GoLiveSettings snapshot as a JSON file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or get_app_environ_config().SETTINGS_STORE_PATH)

    def load(self) -> GoLiveSettings:
        """Return the persisted snapshot, or empty settings when none was saved.

        Raises:
            PersistenceError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            return GoLiveSettings()

        try:
            data = orjson.loads(self.path.read_bytes())
            return GoLiveSettings.model_validate(data)
        except (OSError, orjson.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load go-live settings from {self.path}: {e}")
            raise PersistenceError(f"Could not load settings from {self.path}") from e

    def save(self, settings: GoLiveSettings) -> None:
        """Replace the persisted snapshot.

        Raises:
            PersistenceError: If the file cannot be written
        """
        payload = orjson.dumps(settings.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error(f"Failed to save go-live settings to {self.path}: {e}")
            raise PersistenceError(f"Could not save settings to {self.path}") from e

        logger.debug(f"Saved go-live settings to {self.path}")
