"""Facebook adapter backed by the Graph API live videos of a page."""

from __future__ import annotations

import httpx
from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import ErrorKind, Platform, PlatformInfo, ValidationIssue, ValidationResult
from golive.utils.go_live_errors import MissingScopeError, PlatformError

from .base import PlatformAdapter, check_text, error_message

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 5000

# Graph API permission error codes
_PERMISSION_ERROR_CODES = {10, 200}


class FacebookAdapter(PlatformAdapter):
    platform = Platform.FACEBOOK
    display_name = "Facebook"
    create_page_url = "https://www.facebook.com/gaming/pages/create"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._pages: list[dict] = []
        # (page_id, live_video_id) created for the current session
        self._live_video: tuple[str, str] | None = None

    def reset_session(self) -> None:
        self._pages = []
        self._live_video = None

    def default_base_url(self) -> str:
        return get_app_environ_config().FACEBOOK_GRAPH_BASE_URL

    def required_scopes(self) -> set[str]:
        return {"pages_show_list", "pages_manage_posts", "publish_video"}

    def validate_settings(self, blob: dict) -> ValidationResult:
        issues: list[ValidationIssue] = []
        check_text(blob, "title", self.platform, issues, required=True, max_length=TITLE_MAX_LENGTH)
        check_text(blob, "description", self.platform, issues, max_length=DESCRIPTION_MAX_LENGTH)
        check_text(blob, "page_id", self.platform, issues)
        return ValidationResult(issues=issues)

    def _raise_for_response(self, response: httpx.Response) -> None:
        try:
            error = (response.json() or {}).get("error") or {}
        except ValueError:
            error = {}
        if isinstance(error, dict) and error.get("code") in _PERMISSION_ERROR_CODES:
            raise MissingScopeError(self.platform, errmesg=error_message(response))
        super()._raise_for_response(response)

    async def _load_pages(self) -> list[dict]:
        response = await self._request("GET", "/me/accounts", params={"fields": "id,name"})
        self._pages = response.json().get("data") or []
        if not self._pages:
            raise PlatformError(
                self.platform,
                "You need to create a Facebook Gaming page before going live",
                kind=ErrorKind.FACEBOOK_HAS_NO_PAGES,
            )
        return self._pages

    async def prepopulate(self) -> PlatformInfo:
        self.reset_session()
        if self.demo_mode:
            logger.info("Facebook adapter DEMO_MODE=true: returning stubbed page info")
            return PlatformInfo(platform=self.platform, title="Demo stream", extra={"page_id": "demo_page"})

        pages = await self._load_pages()
        return PlatformInfo(
            platform=self.platform,
            extra={"page_id": str(pages[0]["id"])},
        )

    async def publish_settings(self, blob: dict) -> None:
        if self.demo_mode:
            logger.info(f"Facebook adapter DEMO_MODE=true: stubbed live video update title={blob.get('title')!r}")
            return

        page_id = blob.get("page_id")
        if not page_id:
            pages = self._pages or await self._load_pages()
            page_id = str(pages[0]["id"])

        body = {"title": blob["title"], "description": blob.get("description") or ""}
        if self._live_video is not None and self._live_video[0] == page_id:
            live_video_id = self._live_video[1]
            await self._request("POST", f"/{live_video_id}", data=body)
            logger.info(f"Facebook live video {live_video_id} updated")
            return

        response = await self._request(
            "POST", f"/{page_id}/live_videos", data={**body, "status": "UNPUBLISHED"}
        )
        live_video_id = str(response.json()["id"])
        self._live_video = (page_id, live_video_id)
        logger.info(f"Facebook live video {live_video_id} created on page {page_id}")

    async def confirm_live(self) -> None:
        if self.demo_mode:
            logger.info("Facebook adapter DEMO_MODE=true: stubbed live video publish")
            return

        if self._live_video is None:
            raise PlatformError(self.platform, "No Facebook live video to publish")

        live_video_id = self._live_video[1]
        await self._request("POST", f"/{live_video_id}", data={"status": "LIVE_NOW"})
        logger.info(f"Facebook live video {live_video_id} is live")
