"""Tests for the Twitch adapter against a mocked Helix API."""

import json

import httpx
import pytest

from golive.schemas import ErrorKind, Platform
from golive.services.platforms.twitch import TwitchAdapter
from golive.utils.go_live_errors import MissingScopeError, PlatformError

BASE_URL = "https://api.twitch.test"


class StaticCredentials:
    def get_access_token(self, platform: Platform) -> str | None:
        return f"token_{platform}"


def make_adapter(handler) -> TwitchAdapter:
    return TwitchAdapter(
        StaticCredentials(),
        client_id="client_123",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        demo_mode=False,
    )


class TestValidateSettings:
    @pytest.fixture
    def adapter(self) -> TwitchAdapter:
        return TwitchAdapter(demo_mode=True)

    def test_valid_blob(self, adapter):
        result = adapter.validate_settings({"title": "Speedrun", "game": "Celeste", "tags": ["English"]})

        assert result.ok

    def test_title_required(self, adapter):
        result = adapter.validate_settings({"game": "Celeste"})

        assert [issue.field for issue in result.issues] == ["title"]

    def test_title_too_long(self, adapter):
        result = adapter.validate_settings({"title": "x" * 141})

        assert not result.ok

    def test_invalid_tags_collected(self, adapter):
        result = adapter.validate_settings({"title": "T", "tags": ["ok", "with space", "x" * 26]})

        assert len(result.for_platform(Platform.TWITCH)) == 1
        assert "with space" in result.issues[0].message

    def test_too_many_tags(self, adapter):
        result = adapter.validate_settings({"title": "T", "tags": [f"tag{i}" for i in range(11)]})

        assert not result.ok

    def test_tags_must_be_strings(self, adapter):
        result = adapter.validate_settings({"title": "T", "tags": "notalist"})

        assert result.issues[0].message == "must be a list of strings"


class TestPrepopulate:
    async def test_reads_channel_information(self):
        # Arrange
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/helix/users":
                return httpx.Response(200, json={"data": [{"id": "42"}]})
            if request.url.path == "/helix/channels":
                return httpx.Response(
                    200,
                    json={"data": [{"title": "Remote", "game_name": "Chess", "tags": ["English"]}]},
                )
            return httpx.Response(404)

        adapter = make_adapter(handler)

        # Act
        info = await adapter.prepopulate()

        # Assert
        assert info.title == "Remote"
        assert info.game == "Chess"
        assert info.tags == ["English"]
        assert seen[1].url.params["broadcaster_id"] == "42"
        assert seen[0].headers["Authorization"] == "Bearer token_twitch"
        assert seen[0].headers["Client-Id"] == "client_123"

    async def test_missing_scope_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Missing scope: channel:manage:broadcast"})

        with pytest.raises(MissingScopeError):
            await make_adapter(handler).prepopulate()

    async def test_server_error_is_platform_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(PlatformError) as exc_info:
            await make_adapter(handler).prepopulate()

        assert exc_info.value.remote_status == 500
        assert exc_info.value.kind is None

    async def test_unreachable_api_is_platform_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(PlatformError) as exc_info:
            await make_adapter(handler).prepopulate()

        assert exc_info.value.errmesg == "Twitch is not reachable"

    async def test_demo_mode_makes_no_calls(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        adapter = TwitchAdapter(transport=httpx.MockTransport(handler), demo_mode=True)

        info = await adapter.prepopulate()

        assert info.platform == Platform.TWITCH


class TestPublishSettings:
    async def test_patches_channel_with_game_id(self):
        # Arrange
        patched: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/helix/users":
                return httpx.Response(200, json={"data": [{"id": "42"}]})
            if request.url.path == "/helix/games":
                return httpx.Response(200, json={"data": [{"id": "9"}]})
            patched.append(request)
            return httpx.Response(204)

        # Act
        await make_adapter(handler).publish_settings({"title": "New", "game": "Chess", "tags": ["English"]})

        # Assert
        assert len(patched) == 1
        assert patched[0].method == "PATCH"
        assert json.loads(patched[0].content) == {"title": "New", "game_id": "9", "tags": ["English"]}

    async def test_unknown_game(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/helix/users":
                return httpx.Response(200, json={"data": [{"id": "42"}]})
            return httpx.Response(200, json={"data": []})

        with pytest.raises(PlatformError) as exc_info:
            await make_adapter(handler).publish_settings({"title": "New", "game": "Nope"})

        assert "Nope" in exc_info.value.errmesg

    def test_scope_kind(self):
        assert TwitchAdapter.missed_scope_kind == ErrorKind.TWITCH_MISSED_OAUTH_SCOPE


class MutableCredentials:
    def __init__(self, token: str):
        self.token = token

    def get_access_token(self, platform: Platform) -> str | None:
        return self.token


class TestBroadcasterCache:
    async def test_user_lookup_repeated_after_token_change(self):
        # Arrange
        user_lookups: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/helix/users":
                token = request.headers["Authorization"]
                user_lookups.append(token)
                return httpx.Response(200, json={"data": [{"id": token[-1]}]})
            return httpx.Response(200, json={"data": [{"title": "Remote"}]})

        credentials = MutableCredentials("token_a")
        adapter = TwitchAdapter(
            credentials, base_url=BASE_URL, transport=httpx.MockTransport(handler), demo_mode=False
        )

        # Act
        await adapter.prepopulate()
        await adapter.prepopulate()
        credentials.token = "token_b"
        await adapter.prepopulate()

        # Assert
        assert user_lookups == ["Bearer token_a", "Bearer token_b"]

    async def test_reset_forgets_broadcaster(self):
        user_lookups: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/helix/users":
                user_lookups.append(request.url.path)
                return httpx.Response(200, json={"data": [{"id": "42"}]})
            return httpx.Response(200, json={"data": [{"title": "Remote"}]})

        adapter = make_adapter(handler)
        await adapter.prepopulate()

        adapter.reset_session()
        await adapter.prepopulate()

        assert len(user_lookups) == 2
