"""Onboarding flow that links an additional platform to the primary account."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from loguru import logger

from golive.schemas import AuthMode, ClassifiedError, Platform, PlatformAuthState
from golive.services.integrations.overlay_installer import OverlayInstaller
from golive.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from golive.utils.go_live_errors import IllegalTransitionError, OverlayInstallError

from ..errors.error_classifier import CallSite, FailureContext, classify
from .auth_coordinator import AuthCoordinator


class MergeStep(str, Enum):
    """create_page (Facebook only) -> login -> overlay (optional) -> done"""

    CREATE_PAGE = "create_page"
    LOGIN = "login"
    OVERLAY = "overlay"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


class PlatformMergeFlow:
    """Drives one platform through the merge onboarding steps."""

    def __init__(
        self,
        platform: Platform,
        auth: AuthCoordinator,
        installer: OverlayInstaller,
        *,
        overlay_url: str | None = None,
        overlay_name: str | None = None,
    ):
        self.platform = platform
        self.auth = auth
        self.installer = installer
        self.overlay_url = overlay_url
        self.overlay_name = overlay_name
        self.overlay_path: Path | None = None
        self.error: ClassifiedError | None = None

        adapter = self._adapter()
        self.step = MergeStep.CREATE_PAGE if adapter and adapter.create_page_url else MergeStep.LOGIN

    def _adapter(self):
        if self.auth.registry is None or self.platform not in self.auth.registry:
            return None
        return self.auth.registry.get(self.platform)

    def _require(self, step: MergeStep, action: str) -> None:
        if self.step != step:
            raise IllegalTransitionError(f"Cannot {action} on merge step {self.step}")

    def open_page_creation(self) -> str:
        """Return the page-creation link and move on to the login step."""
        self._require(MergeStep.CREATE_PAGE, "open page creation")
        self.step = MergeStep.LOGIN
        return self._adapter().create_page_url

    def skip_page_creation(self) -> None:
        """The user already has a page."""
        self._require(MergeStep.CREATE_PAGE, "skip page creation")
        self.step = MergeStep.LOGIN

    async def merge(self) -> PlatformAuthState:
        """Connect the platform with ``merge=True``.

        Raises:
            AuthError: If the exchange fails; the flow stays on the login step
        """
        self._require(MergeStep.LOGIN, "log in")
        adapter = self._adapter()
        mode = adapter.auth_mode if adapter is not None else AuthMode.INTERNAL

        state = await self.auth.start_auth(self.platform, mode, merge=True)
        self.error = None
        self.step = MergeStep.OVERLAY if self.overlay_url else MergeStep.DONE
        logger.info(f"Merged {self.platform}, next step {self.step}")
        return state

    async def install_overlay(self) -> Path:
        """Install the overlay offered with the flow.

        Raises:
            OverlayInstallError: If installation fails; the flow stays on the
                overlay step and ``error`` holds the classified failure
        """
        self._require(MergeStep.OVERLAY, "install overlay")
        try:
            self.overlay_path = await self.installer.install_overlay(self.overlay_url, self.overlay_name)
        except OverlayInstallError as e:
            self.error = classify(e, FailureContext(CallSite.OVERLAY, platform=self.platform))
            e.classified = self.error
            logger.warning(f"Overlay install for {self.platform} failed: {self.error.kind}")
            raise

        self.error = None
        self.step = MergeStep.DONE
        return self.overlay_path

    def skip_overlay(self) -> None:
        self._require(MergeStep.OVERLAY, "skip overlay")
        self.error = None
        self.step = MergeStep.DONE


class PlatformMergeService:
    """Keeps the merge flow of every platform being onboarded."""

    def __init__(self, auth: AuthCoordinator, installer: OverlayInstaller):
        self.auth = auth
        self.installer = installer
        self._flows: dict[Platform, PlatformMergeFlow] = {}

    def begin(
        self,
        platform: Platform,
        overlay_url: str | None = None,
        overlay_name: str | None = None,
    ) -> PlatformMergeFlow:
        """Start (or restart) the merge flow of a platform."""
        flow = PlatformMergeFlow(
            platform,
            self.auth,
            self.installer,
            overlay_url=overlay_url,
            overlay_name=overlay_name,
        )
        self._flows[platform] = flow
        logger.info(f"Merge flow for {platform} started at step {flow.step}")
        return flow

    def get(self, platform: Platform) -> PlatformMergeFlow:
        """Raises AppError if no merge flow was started for the platform."""
        flow = self._flows.get(platform)
        if flow is None:
            raise AppError(
                errcode=AppErrorCode.E_NOT_FOUND,
                errmesg=f"No merge flow started for {platform}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return flow
