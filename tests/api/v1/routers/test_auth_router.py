"""Unit tests for auth router endpoints."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from golive.api.errors import app_error_handler
from golive.api.v1.routers.auth import get_auth_coordinator, get_merge_service, router
from golive.domain.live.auth.auth_coordinator import AuthCoordinator
from golive.domain.live.auth.platform_merge import PlatformMergeService
from golive.schemas import Platform
from golive.services.integrations.overlay_installer import OverlayInstaller
from golive.utils.app_errors import AppError
from tests.fixtures.go_live_fixtures import connect


@pytest.fixture
def coordinator(auth_flow, registry) -> AuthCoordinator:
    """Coordinator with nothing connected yet."""
    return AuthCoordinator(auth_flow, registry, primary_platform=None)


@pytest.fixture
def installer() -> AsyncMock:
    mock = AsyncMock(spec=OverlayInstaller)
    mock.install_overlay.return_value = Path("/tmp/overlays/theme.overlay")
    return mock


@pytest.fixture
def client(coordinator: AuthCoordinator, installer: AsyncMock) -> TestClient:
    app = FastAPI()
    merges = PlatformMergeService(coordinator, installer)
    app.dependency_overrides[get_auth_coordinator] = lambda: coordinator
    app.dependency_overrides[get_merge_service] = lambda: merges
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


class TestAuthEndpoints:
    def test_start_auth_connects_primary(self, client: TestClient):
        # Act
        response = client.post("/auth/start", json={"platform": "twitch"})

        # Assert
        assert response.status_code == 200
        results = response.json()["results"]
        assert results["phase"] == "connected"
        assert results["primary"] is True
        assert results["missing_scopes"] == []
        assert "access_token" not in results

    def test_failed_auth_reports_recovery(self, client: TestClient, auth_flow):
        # Arrange
        auth_flow.start_external_auth.side_effect = RuntimeError("broker down")

        # Act
        response = client.post("/auth/start", json={"platform": "twitch"})

        # Assert
        assert response.status_code == 401
        error = response.json()["error"]
        assert error["kind"] == "AUTH_FAILED"
        assert error["recovery_actions"] == ["retry_auth", "abort"]

    def test_state_lists_every_platform(self, client: TestClient, coordinator: AuthCoordinator):
        connect(coordinator, Platform.YOUTUBE, scopes=set())

        response = client.get("/auth/state")

        results = response.json()["results"]
        assert [p["platform"] for p in results["platforms"]] == ["twitch", "youtube"]
        youtube = results["platforms"][1]
        assert youtube["connected"] is True
        assert youtube["missing_scopes"] == ["youtube:stream"]

    def test_disconnect(self, client: TestClient, coordinator: AuthCoordinator):
        connect(coordinator, Platform.TWITCH)

        response = client.post("/auth/disconnect", json={"platform": "twitch"})

        assert response.json()["results"]["connected"] is False


class TestMergeEndpoints:
    def test_merge_flow_with_overlay(self, client: TestClient, coordinator: AuthCoordinator):
        # Arrange
        connect(coordinator, Platform.TWITCH)
        coordinator.primary_platform = Platform.TWITCH

        # Act
        begun = client.post(
            "/auth/merge/begin",
            json={"platform": "youtube", "overlay_url": "https://overlays.test/theme.zip"},
        )
        logged_in = client.post("/auth/merge/login", json={"platform": "youtube"})
        installed = client.post("/auth/merge/install_overlay", json={"platform": "youtube"})

        # Assert
        assert begun.json()["results"]["step"] == "login"
        assert logged_in.json()["results"]["step"] == "overlay"
        assert installed.json()["results"]["step"] == "done"
        assert installed.json()["results"]["overlay_path"] == "/tmp/overlays/theme.overlay"
        assert coordinator.get_state(Platform.YOUTUBE).merged is True

    def test_login_without_primary(self, client: TestClient):
        client.post("/auth/merge/begin", json={"platform": "youtube"})

        response = client.post("/auth/merge/login", json={"platform": "youtube"})

        assert response.status_code == 401
        state = client.get("/auth/merge/state", params={"platform": "youtube"}).json()["results"]
        assert state["step"] == "login"

    def test_step_out_of_order(self, client: TestClient):
        client.post("/auth/merge/begin", json={"platform": "youtube"})

        response = client.post("/auth/merge/skip_overlay", json={"platform": "youtube"})

        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "ILLEGAL_TRANSITION"

    def test_unknown_flow(self, client: TestClient):
        response = client.get("/auth/merge/state", params={"platform": "twitch"})

        assert response.status_code == 404
