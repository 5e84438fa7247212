"""YouTube adapter backed by the YouTube Data API v3 live broadcasts."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import AuthMode, ErrorKind, Platform, PlatformInfo, ValidationIssue, ValidationResult
from golive.utils.go_live_errors import MissingScopeError, PlatformError

from .base import PlatformAdapter, check_choice, check_text, error_message

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 5000
PRIVACY_STATUSES = {"public", "unlisted", "private"}

_BROADCASTS_PATH = "/youtube/v3/liveBroadcasts"


class YoutubeAdapter(PlatformAdapter):
    platform = Platform.YOUTUBE
    display_name = "YouTube"
    # Google OAuth pages refuse to render in embedded windows
    auth_mode = AuthMode.EXTERNAL
    publish_failed_kind = ErrorKind.YOUTUBE_PUBLISH_FAILED
    dashboard_url = "https://studio.youtube.com/channel/livestreaming"
    enable_streaming_url = "https://www.youtube.com/features"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._broadcast_id: str | None = None

    def reset_session(self) -> None:
        self._broadcast_id = None

    def default_base_url(self) -> str:
        return get_app_environ_config().YOUTUBE_API_BASE_URL

    def required_scopes(self) -> set[str]:
        return {"https://www.googleapis.com/auth/youtube"}

    def validate_settings(self, blob: dict) -> ValidationResult:
        issues: list[ValidationIssue] = []
        check_text(blob, "title", self.platform, issues, required=True, max_length=TITLE_MAX_LENGTH)
        check_text(blob, "description", self.platform, issues, max_length=DESCRIPTION_MAX_LENGTH)
        check_choice(blob, "privacy_status", self.platform, issues, PRIVACY_STATUSES)
        # YouTube rejects angle brackets in titles
        title = blob.get("title")
        if isinstance(title, str) and ("<" in title or ">" in title):
            issues.append(
                ValidationIssue(platform=self.platform, field="title", message="must not contain < or >")
            )
        return ValidationResult(issues=issues)

    def _raise_for_response(self, response: httpx.Response) -> None:
        reasons = _error_reasons(response)
        message = error_message(response)
        if "liveStreamingNotEnabled" in reasons:
            raise PlatformError(
                self.platform,
                "Live streaming is not enabled for this YouTube channel",
                kind=ErrorKind.YOUTUBE_STREAMING_DISABLED,
                remote_status=response.status_code,
                details=message,
            )
        if "insufficientPermissions" in reasons or "ACCESS_TOKEN_SCOPE_INSUFFICIENT" in reasons:
            raise MissingScopeError(self.platform, errmesg=message)
        super()._raise_for_response(response)

    async def prepopulate(self) -> PlatformInfo:
        self.reset_session()
        if self.demo_mode:
            logger.info("YouTube adapter DEMO_MODE=true: returning stubbed broadcast info")
            return PlatformInfo(platform=self.platform, title="Demo stream", description="")

        response = await self._request(
            "GET",
            _BROADCASTS_PATH,
            params={"part": "snippet,status", "broadcastStatus": "upcoming", "broadcastType": "all"},
        )
        items = response.json().get("items") or []
        if not items:
            # No scheduled broadcast yet, one is created on publish
            return PlatformInfo(platform=self.platform)

        broadcast = items[0]
        self._broadcast_id = broadcast.get("id")
        snippet = broadcast.get("snippet") or {}
        status = broadcast.get("status") or {}
        return PlatformInfo(
            platform=self.platform,
            title=snippet.get("title"),
            description=snippet.get("description"),
            extra={"privacy_status": status["privacyStatus"]} if status.get("privacyStatus") else {},
        )

    def _broadcast_body(self, blob: dict) -> dict:
        return {
            "snippet": {
                "title": blob["title"],
                "description": blob.get("description") or "",
                "scheduledStartTime": datetime.now(timezone.utc).isoformat(),
            },
            "status": {
                "privacyStatus": blob.get("privacy_status") or "public",
                "selfDeclaredMadeForKids": False,
            },
        }

    async def publish_settings(self, blob: dict) -> None:
        if self.demo_mode:
            logger.info(f"YouTube adapter DEMO_MODE=true: stubbed broadcast update title={blob.get('title')!r}")
            return

        body = self._broadcast_body(blob)
        if self._broadcast_id:
            body["id"] = self._broadcast_id
            await self._request("PUT", _BROADCASTS_PATH, params={"part": "snippet,status"}, json=body)
            logger.info(f"YouTube broadcast {self._broadcast_id} updated")
            return

        response = await self._request(
            "POST", _BROADCASTS_PATH, params={"part": "snippet,status"}, json=body
        )
        self._broadcast_id = response.json().get("id")
        logger.info(f"YouTube broadcast {self._broadcast_id} created")

    async def confirm_live(self) -> None:
        if self.demo_mode:
            logger.info("YouTube adapter DEMO_MODE=true: stubbed broadcast transition")
            return

        if not self._broadcast_id:
            raise PlatformError(self.platform, "No YouTube broadcast to publish")

        await self._request(
            "POST",
            f"{_BROADCASTS_PATH}/transition",
            params={"broadcastStatus": "live", "id": self._broadcast_id, "part": "status"},
        )
        logger.info(f"YouTube broadcast {self._broadcast_id} transitioned to live")


def _error_reasons(response: httpx.Response) -> set[str]:
    try:
        data = response.json()
    except ValueError:
        return set()
    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return set()
    reasons = {str(e.get("reason")) for e in error.get("errors") or [] if isinstance(e, dict)}
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason"):
            reasons.add(str(detail["reason"]))
    return reasons
