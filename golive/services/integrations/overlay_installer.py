"""Installs overlay themes offered by the merge-platform onboarding flow."""

from __future__ import annotations

import re
from pathlib import Path

import httpx
from loguru import logger

from golive.app_config import get_app_environ_config
from golive.shared.api.utils import format_error
from golive.utils.go_live_errors import OverlayInstallError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class OverlayInstaller:
    def __init__(
        self,
        overlay_dir: str | Path | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        demo_mode: bool | None = None,
    ):
        app_config = get_app_environ_config()
        self.overlay_dir = Path(overlay_dir or app_config.OVERLAY_DIR)
        self.timeout = app_config.HTTP_TIMEOUT_SECONDS
        self.demo_mode = app_config.DEMO_MODE if demo_mode is None else demo_mode
        self._transport = transport

    def _target_path(self, name: str) -> Path:
        safe_name = _UNSAFE_CHARS.sub("_", name).strip("._") or "overlay"
        return self.overlay_dir / f"{safe_name}.overlay"

    async def install_overlay(self, url: str, name: str | None = None) -> Path:
        """Download an overlay archive into the overlay directory.

        Raises:
            OverlayInstallError: If the download or the write fails
        """
        target = self._target_path(name or url.rsplit("/", 1)[-1])
        if self.demo_mode:
            logger.info(f"Overlay installer DEMO_MODE=true: stubbed install of {url} as {target}")
            return target

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(url, follow_redirects=True)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Overlay download failed: url={url} error={e!r}")
            raise OverlayInstallError(f"Could not download overlay {name or url}") from e

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
        except OSError as e:
            logger.error(f"Overlay write failed: path={target}\n{format_error(e)}")
            raise OverlayInstallError(f"Could not install overlay {name or url}") from e

        logger.info(f"Installed overlay {name or url} to {target}")
        return target
