"""
Raw key/value configuration of the go-live orchestrator.

Configuration is resolved from:
1) `env.example` (committed, safe placeholders)
2) `env.local` (optional, MUST NOT be committed)
3) System environment variables (highest priority)

Server keys (`DEBUG`, `API_HOST`, `API_PORT`, `API_WORKERS`, `API_CORS_ORIGINS`,
`API_DISABLED`, `LOGFIRE_ENABLE`, `LOGFIRE_TOKEN`) are read from `config` directly
by `golive.main` and `golive.shared.api.utils`. Go-live keys (`DEMO_MODE`, platform
API base URLs, `AUTH_BASE_URL`, `RESTREAM_API_BASE_URL`, `SETTINGS_STORE_PATH`,
`OVERLAY_DIR`, `PRIMARY_PLATFORM`) are typed in `golive.app_config`.
"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger


class EnvironConfig:
    """
    Singleton configuration class that loads environment variables from env files
    and system environment, providing dictionary-like access with default values.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(EnvironConfig, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = {}
            self._load_config()
            EnvironConfig._initialized = True

    def _load_config(self):
        """
        Load configuration from env files and system environment.

        Priority order (later overrides earlier):
        1. env.example (committed placeholders)
        2. env.local (developer-local, not committed)
        3. System environment variables (highest priority)
        """
        root = Path(__file__).parent.parent.parent

        example_path = root / "env.example"
        if example_path.exists():
            self._config.update(dotenv_values(example_path))
            logger.info("Loaded environment variables from {}", example_path)

        local_path = root / "env.local"
        if local_path.exists():
            self._config.update(dotenv_values(local_path))
            logger.info("Loaded and overrode environment variables from {}", local_path)

        self._config.update(os.environ)

    def __getitem__(self, key):
        """
        Get configuration value by key.

        Raises:
            KeyError: If key not found
        """
        if key not in self._config:
            raise KeyError(f"Configuration key '{key}' not found")

        return self._config[key]

    def get(self, key, default=None):
        """Get configuration value by key with optional default."""
        return self._config.get(key, default)

    def clear(self):
        """Clear configuration."""
        self._config.clear()
        logger.info("Configuration cleared")

    def reload(self):
        """
        Reload configuration from files and environment.
        Useful for testing or when configuration files change.
        """
        self._config.clear()
        self._load_config()
        logger.info("Configuration reloaded")

    def __contains__(self, key):
        return key in self._config

    def __iter__(self):
        return iter(self._config)

    def keys(self):
        return self._config.keys()

    def values(self):
        return self._config.values()

    def items(self):
        return self._config.items()

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Interpret a configuration value as a boolean flag."""
        value = self.get(key)
        if value is None:
            return default
        return str(value).strip().lower() in {"true", "1", "yes", "on"}

    def get_list(self, key: str, default: list[str] | None = None) -> list[str]:
        """Split a comma separated configuration value into a list."""
        value = self.get(key)
        if not value:
            return list(default or [])
        return [x.strip() for x in str(value).split(",") if x.strip()]


config = EnvironConfig()
