"""Client for the multistream relay that fans one stream out to several destinations."""

from __future__ import annotations

import httpx
from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import ErrorKind, Platform
from golive.utils.go_live_errors import MultistreamError


class RestreamClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        demo_mode: bool | None = None,
    ):
        app_config = get_app_environ_config()
        self.base_url = (base_url or app_config.RESTREAM_API_BASE_URL or "").rstrip("/")
        self.timeout = app_config.HTTP_TIMEOUT_SECONDS
        self.demo_mode = app_config.DEMO_MODE if demo_mode is None else demo_mode
        self._transport = transport

    async def is_enabled(self) -> bool:
        """Whether the account may relay to several destinations."""
        if self.demo_mode:
            return True
        if not self.base_url:
            logger.debug("RESTREAM_API_BASE_URL not configured, multistream unavailable")
            return False

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/api/v1/restream/settings")
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise MultistreamError(
                f"Could not read multistream settings: {e}",
                kind=ErrorKind.RESTREAM_SETUP_FAILED,
            ) from e
        return bool(response.json().get("enabled"))

    async def setup(self, platforms: list[Platform]) -> None:
        """Configure relay targets for the given destinations.

        Raises:
            MultistreamError: If the relay is disabled or setup fails
        """
        if not await self.is_enabled():
            raise MultistreamError(
                "Multistream is not enabled for this account",
                kind=ErrorKind.RESTREAM_DISABLED,
            )

        if self.demo_mode:
            logger.info(f"Restream client DEMO_MODE=true: stubbed setup for {[str(p) for p in platforms]}")
            return

        body = {"targets": [str(p) for p in platforms]}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/api/v1/restream/targets", json=body)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise MultistreamError(f"Multistream setup failed: {e}") from e

        logger.info(f"Multistream relay configured for {body['targets']}")
