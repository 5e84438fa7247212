"""Tests for the multistream relay client."""

import httpx
import pytest

from golive.schemas import ErrorKind, Platform
from golive.services.integrations.restream_client import RestreamClient
from golive.utils.go_live_errors import MultistreamError

BASE_URL = "https://restream.test"


def make_client(handler) -> RestreamClient:
    return RestreamClient(BASE_URL, transport=httpx.MockTransport(handler), demo_mode=False)


class TestRestreamClient:
    async def test_setup_posts_targets(self):
        # Arrange
        posted: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"enabled": True})
            posted.append(request)
            return httpx.Response(200, json={})

        # Act
        await make_client(handler).setup([Platform.TWITCH, Platform.YOUTUBE])

        # Assert
        assert posted[0].url.path == "/api/v1/restream/targets"
        assert b'"twitch"' in posted[0].content

    async def test_disabled_relay(self):
        client = make_client(lambda request: httpx.Response(200, json={"enabled": False}))

        with pytest.raises(MultistreamError) as exc_info:
            await client.setup([Platform.TWITCH, Platform.YOUTUBE])

        assert exc_info.value.kind == ErrorKind.RESTREAM_DISABLED

    async def test_setup_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"enabled": True})
            return httpx.Response(502)

        with pytest.raises(MultistreamError) as exc_info:
            await make_client(handler).setup([Platform.TWITCH, Platform.YOUTUBE])

        assert exc_info.value.kind == ErrorKind.RESTREAM_SETUP_FAILED

    async def test_not_configured_means_disabled(self):
        client = RestreamClient("", demo_mode=False)
        client.base_url = ""

        assert await client.is_enabled() is False
