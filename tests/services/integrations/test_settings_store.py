"""Tests for the local settings store."""

import pytest

from golive.schemas import GoLiveSettings, Platform
from golive.services.integrations.settings_store import SettingsStore
from golive.utils.go_live_errors import PersistenceError


class TestSettingsStore:
    def test_load_without_file_returns_empty_settings(self, tmp_path):
        store = SettingsStore(tmp_path / "missing.json")

        assert store.load() == GoLiveSettings()

    def test_saved_snapshot_is_loaded_back(self, tmp_path):
        # Arrange
        store = SettingsStore(tmp_path / "nested" / "settings.json")
        settings = GoLiveSettings(
            platforms=[Platform.TWITCH],
            destination_settings={Platform.TWITCH: {"title": "T", "tags": ["English"]}},
            advanced_mode=True,
        )

        # Act
        store.save(settings)

        # Assert
        assert store.load() == settings
        assert not (tmp_path / "nested" / "settings.json.tmp").exists()

    def test_corrupt_file_raises_persistence_error(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        with pytest.raises(PersistenceError):
            SettingsStore(path).load()

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(PersistenceError):
            SettingsStore(blocker / "settings.json").save(GoLiveSettings())
