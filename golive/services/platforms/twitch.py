"""Twitch adapter backed by the Helix API."""

from __future__ import annotations

import re

from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import ErrorKind, Platform, PlatformInfo, ValidationIssue, ValidationResult
from golive.utils.go_live_errors import PlatformError

from .base import PlatformAdapter, check_text

TITLE_MAX_LENGTH = 140
GAME_MAX_LENGTH = 256
MAX_TAGS = 10
TAG_MAX_LENGTH = 25
_TAG_RE = re.compile(r"^[^\W_]+$", re.UNICODE)


class TwitchAdapter(PlatformAdapter):
    platform = Platform.TWITCH
    display_name = "Twitch"
    missed_scope_kind = ErrorKind.TWITCH_MISSED_OAUTH_SCOPE
    dashboard_url = "https://dashboard.twitch.tv/stream-manager"

    def __init__(self, *args, client_id: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.client_id = client_id or get_app_environ_config().TWITCH_CLIENT_ID
        # Broadcaster id and the token it was resolved with
        self._broadcaster: tuple[str | None, str] | None = None

    def reset_session(self) -> None:
        self._broadcaster = None

    def default_base_url(self) -> str:
        return get_app_environ_config().TWITCH_API_BASE_URL

    def required_scopes(self) -> set[str]:
        return {"channel:manage:broadcast", "user:read:email"}

    def validate_settings(self, blob: dict) -> ValidationResult:
        issues: list[ValidationIssue] = []
        check_text(blob, "title", self.platform, issues, required=True, max_length=TITLE_MAX_LENGTH)
        check_text(blob, "game", self.platform, issues, max_length=GAME_MAX_LENGTH)

        tags = blob.get("tags")
        if tags is not None:
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                issues.append(
                    ValidationIssue(platform=self.platform, field="tags", message="must be a list of strings")
                )
            else:
                if len(tags) > MAX_TAGS:
                    issues.append(
                        ValidationIssue(
                            platform=self.platform,
                            field="tags",
                            message=f"must have at most {MAX_TAGS} tags",
                        )
                    )
                bad = [t for t in tags if len(t) > TAG_MAX_LENGTH or not _TAG_RE.match(t)]
                if bad:
                    issues.append(
                        ValidationIssue(
                            platform=self.platform,
                            field="tags",
                            message=f"invalid tags: {', '.join(bad)}",
                        )
                    )

        return ValidationResult(issues=issues)

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = super()._build_headers(extra)
        if self.client_id:
            headers["Client-Id"] = self.client_id
        return headers

    async def _get_broadcaster_id(self) -> str:
        token = self._access_token()
        if self._broadcaster is not None and self._broadcaster[0] == token:
            return self._broadcaster[1]

        response = await self._request("GET", "/helix/users")
        users = response.json().get("data") or []
        if not users:
            raise PlatformError(self.platform, "Twitch did not return the authenticated user")
        broadcaster_id = str(users[0]["id"])
        self._broadcaster = (token, broadcaster_id)
        return broadcaster_id

    async def _get_game_id(self, game: str) -> str:
        response = await self._request("GET", "/helix/games", params={"name": game})
        games = response.json().get("data") or []
        if not games:
            raise PlatformError(self.platform, f"Twitch category not found: {game}")
        return str(games[0]["id"])

    async def prepopulate(self) -> PlatformInfo:
        if self.demo_mode:
            logger.info("Twitch adapter DEMO_MODE=true: returning stubbed channel info")
            return PlatformInfo(platform=self.platform, title="Demo stream", game="Just Chatting", tags=[])

        broadcaster_id = await self._get_broadcaster_id()
        response = await self._request(
            "GET", "/helix/channels", params={"broadcaster_id": broadcaster_id}
        )
        channels = response.json().get("data") or []
        if not channels:
            raise PlatformError(self.platform, "Twitch did not return channel information")

        channel = channels[0]
        logger.debug(f"Twitch channel info: {channel}")
        return PlatformInfo(
            platform=self.platform,
            title=channel.get("title"),
            game=channel.get("game_name") or None,
            tags=channel.get("tags") or [],
        )

    async def publish_settings(self, blob: dict) -> None:
        if self.demo_mode:
            logger.info(f"Twitch adapter DEMO_MODE=true: stubbed channel update title={blob.get('title')!r}")
            return

        broadcaster_id = await self._get_broadcaster_id()
        body: dict = {"title": blob["title"]}
        if blob.get("game"):
            body["game_id"] = await self._get_game_id(blob["game"])
        if blob.get("tags") is not None:
            body["tags"] = blob["tags"]

        await self._request(
            "PATCH",
            "/helix/channels",
            params={"broadcaster_id": broadcaster_id},
            json=body,
        )
        logger.info(f"Twitch channel {broadcaster_id} updated")
