"""Tests for the YouTube adapter against a mocked Data API."""

import httpx
import pytest

from golive.schemas import AuthMode, ErrorKind
from golive.services.platforms.youtube import YoutubeAdapter
from golive.utils.go_live_errors import MissingScopeError, PlatformError

BASE_URL = "https://youtube.test"
BROADCASTS = "/youtube/v3/liveBroadcasts"


def make_adapter(handler) -> YoutubeAdapter:
    return YoutubeAdapter(base_url=BASE_URL, transport=httpx.MockTransport(handler), demo_mode=False)


def google_error(status: int, reason: str) -> httpx.Response:
    return httpx.Response(
        status,
        json={"error": {"code": status, "message": reason, "errors": [{"reason": reason}]}},
    )


class TestValidateSettings:
    def test_angle_brackets_rejected(self):
        result = YoutubeAdapter(demo_mode=True).validate_settings({"title": "<b>Live</b>"})

        assert [issue.field for issue in result.issues] == ["title"]

    def test_privacy_status_choice(self):
        result = YoutubeAdapter(demo_mode=True).validate_settings({"title": "T", "privacy_status": "secret"})

        assert result.issues[0].field == "privacy_status"

    def test_requires_external_auth(self):
        assert YoutubeAdapter.auth_mode == AuthMode.EXTERNAL


class TestBroadcastFlow:
    async def test_prepopulate_then_update_and_transition(self):
        # Arrange
        calls: list[tuple[str, str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.method, request.url.path))
            if request.method == "GET":
                return httpx.Response(
                    200,
                    json={
                        "items": [
                            {
                                "id": "b1",
                                "snippet": {"title": "Upcoming", "description": "d"},
                                "status": {"privacyStatus": "unlisted"},
                            }
                        ]
                    },
                )
            return httpx.Response(200, json={"id": "b1"})

        adapter = make_adapter(handler)

        # Act
        info = await adapter.prepopulate()
        await adapter.publish_settings({"title": "Now"})
        await adapter.confirm_live()

        # Assert
        assert info.title == "Upcoming"
        assert info.as_settings()["privacy_status"] == "unlisted"
        assert calls == [
            ("GET", BROADCASTS),
            ("PUT", BROADCASTS),
            ("POST", f"{BROADCASTS}/transition"),
        ]

    async def test_publish_creates_broadcast_when_none_scheduled(self):
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            if request.method == "GET":
                return httpx.Response(200, json={"items": []})
            return httpx.Response(200, json={"id": "new"})

        adapter = make_adapter(handler)
        await adapter.prepopulate()

        await adapter.publish_settings({"title": "Now"})

        assert calls == ["GET", "POST"]

    async def test_confirm_without_broadcast(self):
        adapter = make_adapter(lambda request: httpx.Response(500))

        with pytest.raises(PlatformError):
            await adapter.confirm_live()


class TestErrorMapping:
    async def test_streaming_not_enabled(self):
        adapter = make_adapter(lambda request: google_error(403, "liveStreamingNotEnabled"))

        with pytest.raises(PlatformError) as exc_info:
            await adapter.prepopulate()

        assert exc_info.value.kind == ErrorKind.YOUTUBE_STREAMING_DISABLED

    async def test_insufficient_permissions(self):
        adapter = make_adapter(lambda request: google_error(403, "insufficientPermissions"))

        with pytest.raises(MissingScopeError):
            await adapter.prepopulate()


class TestSessionState:
    async def test_next_session_creates_new_broadcast(self):
        # Arrange
        calls: list[tuple[str, str]] = []
        upcoming = [{"id": "b1", "snippet": {"title": "Upcoming"}}]

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.method, request.url.path))
            if request.method == "GET":
                return httpx.Response(200, json={"items": upcoming})
            return httpx.Response(200, json={"id": "b2"})

        adapter = make_adapter(handler)
        await adapter.prepopulate()
        await adapter.publish_settings({"title": "First"})
        await adapter.confirm_live()
        upcoming.clear()
        calls.clear()

        # Act
        await adapter.prepopulate()
        await adapter.publish_settings({"title": "Second"})

        # Assert
        assert calls == [("GET", BROADCASTS), ("POST", BROADCASTS)]

    async def test_reset_without_prepopulate_forgets_broadcast(self):
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            return httpx.Response(200, json={"items": [{"id": "b1"}], "id": "b1"})

        adapter = make_adapter(handler)
        await adapter.prepopulate()
        adapter.reset_session()

        await adapter.publish_settings({"title": "Now"})

        assert calls == ["GET", "POST"]
