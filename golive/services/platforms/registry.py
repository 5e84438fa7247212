"""Registry mapping platform identifiers to adapters."""

from loguru import logger

from golive.schemas import Platform
from golive.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .base import CredentialsProvider, PlatformAdapter
from .facebook import FacebookAdapter
from .twitch import TwitchAdapter
from .youtube import YoutubeAdapter


class PlatformRegistry:
    """Platform identifier -> adapter lookup."""

    def __init__(self, adapters: list[PlatformAdapter] | None = None):
        self._adapters: dict[Platform, PlatformAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: PlatformAdapter) -> None:
        if adapter.platform in self._adapters:
            logger.warning(f"Replacing adapter for platform {adapter.platform}")
        self._adapters[adapter.platform] = adapter

    def get(self, platform: Platform) -> PlatformAdapter:
        """Return the adapter for a platform.

        Raises:
            AppError: If no adapter is registered for the platform
        """
        adapter = self._adapters.get(platform)
        if adapter is None:
            raise AppError(
                errcode=AppErrorCode.E_NOT_FOUND,
                errmesg=f"No adapter registered for platform {platform}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return adapter

    def platforms(self) -> list[Platform]:
        return list(self._adapters)

    def __contains__(self, platform: object) -> bool:
        return platform in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


def build_default_registry(credentials: CredentialsProvider | None = None) -> PlatformRegistry:
    """Registry with every built-in adapter, reading tokens from ``credentials``."""
    return PlatformRegistry(
        [
            TwitchAdapter(credentials),
            YoutubeAdapter(credentials),
            FacebookAdapter(credentials),
        ]
    )
