"""Client for the browser-based OAuth flow.

The flow itself (opening the browser, handling the redirect) runs in an auth
broker service. This client starts an exchange and waits for its outcome.
"""

from __future__ import annotations

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from golive.app_config import get_app_environ_config
from golive.schemas import AuthMode, Platform


class AuthResult(BaseModel):
    """Token and granted scopes returned by a completed exchange."""

    access_token: str
    scopes: set[str] = Field(default_factory=set)


class AuthFlowClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        demo_mode: bool | None = None,
    ):
        app_config = get_app_environ_config()
        self.base_url = (base_url or app_config.AUTH_BASE_URL or "").rstrip("/")
        self.timeout = app_config.HTTP_TIMEOUT_SECONDS
        self.demo_mode = app_config.DEMO_MODE if demo_mode is None else demo_mode
        self._transport = transport

    async def start_external_auth(
        self,
        platform: Platform,
        mode: AuthMode,
        requested_scopes: set[str],
        *,
        merge: bool = False,
    ) -> AuthResult | None:
        """Run one auth exchange.

        Returns:
            AuthResult on success, None when the user cancelled

        Raises:
            httpx.HTTPError: If the broker is unreachable or rejects the exchange
            RuntimeError: If no auth broker is configured
        """
        if self.demo_mode:
            logger.info(f"Auth client DEMO_MODE=true: granting stubbed token for {platform}")
            return AuthResult(access_token=f"demo_{platform}_token", scopes=set(requested_scopes))

        if not self.base_url:
            raise RuntimeError("AUTH_BASE_URL is not configured")

        body = {
            "platform": str(platform),
            "mode": str(mode),
            "merge": merge,
            "scopes": sorted(requested_scopes),
        }
        # Waits until the user finishes (or abandons) the browser flow
        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            response = await client.post(f"{self.base_url}/api/v1/oauth/exchange", json=body)
            response.raise_for_status()
            data = response.json()

        if data.get("cancelled"):
            logger.info(f"Auth exchange for {platform} cancelled by user")
            return None

        return AuthResult(
            access_token=data["access_token"],
            scopes=set(data.get("scopes") or []),
        )
