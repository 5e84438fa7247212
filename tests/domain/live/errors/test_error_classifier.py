"""Tests for the error classifier."""

import httpx
import pytest

from golive.domain.live.errors.error_classifier import CallSite, FailureContext, classify
from golive.schemas import ErrorKind, Platform, ValidationIssue, ValidationResult
from golive.services.platforms.facebook import FacebookAdapter
from golive.services.platforms.twitch import TwitchAdapter
from golive.services.platforms.youtube import YoutubeAdapter
from golive.utils.go_live_errors import (
    AuthError,
    IllegalTransitionError,
    MissingScopeError,
    MultistreamError,
    OverlayInstallError,
    PersistenceError,
    PlatformError,
)

TWITCH = Platform.TWITCH
YOUTUBE = Platform.YOUTUBE
FACEBOOK = Platform.FACEBOOK


@pytest.fixture
def twitch_adapter() -> TwitchAdapter:
    return TwitchAdapter(demo_mode=True)


@pytest.fixture
def youtube_adapter() -> YoutubeAdapter:
    return YoutubeAdapter(demo_mode=True)


class TestCallSiteDefaults:
    def test_prepopulate_failure(self, twitch_adapter):
        # Act
        error = classify(
            PlatformError(TWITCH, "nope"),
            FailureContext(CallSite.PREPOPULATE, platform=TWITCH, adapter=twitch_adapter),
        )

        # Assert
        assert error.kind == ErrorKind.PREPOPULATE_FAILED
        assert error.platform == TWITCH
        assert error.message == "Can not fetch settings from Twitch"

    def test_publish_failure(self, twitch_adapter):
        # Act
        error = classify(
            httpx.ConnectError("refused"),
            FailureContext(CallSite.PUBLISH, platform=TWITCH, adapter=twitch_adapter),
        )

        # Assert
        assert error.kind == ErrorKind.SETTINGS_UPDATE_FAILED
        assert error.message == "Can not update settings for Twitch"
        assert "ConnectError" in error.details

    def test_confirm_failure_uses_platform_kind(self, youtube_adapter):
        # Act
        error = classify(
            RuntimeError("transition refused"),
            FailureContext(CallSite.CONFIRM, platform=YOUTUBE, adapter=youtube_adapter),
        )

        # Assert
        assert error.kind == ErrorKind.YOUTUBE_PUBLISH_FAILED
        assert error.help_url == YoutubeAdapter.dashboard_url

    def test_confirm_failure_generic_kind(self, twitch_adapter):
        error = classify(
            RuntimeError("x"),
            FailureContext(CallSite.CONFIRM, platform=TWITCH, adapter=twitch_adapter),
        )

        assert error.kind == ErrorKind.PUBLISH_FAILED

    def test_validation_result(self):
        # Arrange
        result = ValidationResult(issues=[ValidationIssue(platform=TWITCH, field="title", message="is required")])

        # Act
        error = classify(result, FailureContext(CallSite.VALIDATE))

        # Assert
        assert error.kind == ErrorKind.INVALID_SETTINGS
        assert error.details == "twitch.title: is required"


class TestScopeRouting:
    """Missing scopes route differently on the primary platform."""

    def test_primary_platform_classifies_as_prepopulate_failed(self, twitch_adapter):
        # Act
        error = classify(
            MissingScopeError(TWITCH, {"channel:manage:broadcast"}),
            FailureContext(
                CallSite.PUBLISH, platform=TWITCH, primary_platform=TWITCH, adapter=twitch_adapter
            ),
        )

        # Assert
        assert error.kind == ErrorKind.PREPOPULATE_FAILED

    def test_non_primary_platform_classifies_as_scope_error(self, twitch_adapter):
        # Act
        error = classify(
            MissingScopeError(TWITCH, {"channel:manage:broadcast"}),
            FailureContext(
                CallSite.PUBLISH, platform=TWITCH, primary_platform=YOUTUBE, adapter=twitch_adapter
            ),
        )

        # Assert
        assert error.kind == ErrorKind.TWITCH_MISSED_OAUTH_SCOPE

    def test_branches_produce_distinct_kinds(self, youtube_adapter):
        failure = MissingScopeError(YOUTUBE)
        primary = classify(
            failure,
            FailureContext(CallSite.PREPOPULATE, YOUTUBE, primary_platform=YOUTUBE, adapter=youtube_adapter),
        )
        merged = classify(
            failure,
            FailureContext(CallSite.PREPOPULATE, YOUTUBE, primary_platform=TWITCH, adapter=youtube_adapter),
        )

        assert primary.kind != merged.kind
        assert merged.kind == ErrorKind.MISSED_OAUTH_SCOPE


class TestTaggedFailures:
    def test_platform_precondition_keeps_adapter_kind_and_message(self):
        # Arrange
        adapter = FacebookAdapter(demo_mode=True)
        failure = PlatformError(FACEBOOK, "No pages", kind=ErrorKind.FACEBOOK_HAS_NO_PAGES)

        # Act
        error = classify(failure, FailureContext(CallSite.PREPOPULATE, FACEBOOK, adapter=adapter))

        # Assert
        assert error.kind == ErrorKind.FACEBOOK_HAS_NO_PAGES
        assert error.message == "No pages"
        assert error.help_url == FacebookAdapter.create_page_url

    def test_streaming_disabled_links_enable_page(self, youtube_adapter):
        failure = PlatformError(YOUTUBE, "disabled", kind=ErrorKind.YOUTUBE_STREAMING_DISABLED)

        error = classify(failure, FailureContext(CallSite.PREPOPULATE, YOUTUBE, adapter=youtube_adapter))

        assert error.help_url == YoutubeAdapter.enable_streaming_url

    @pytest.mark.parametrize(
        ("failure", "call_site", "kind"),
        [
            (AuthError(TWITCH, "x"), CallSite.AUTH, ErrorKind.AUTH_FAILED),
            (
                AuthError(TWITCH, "x", kind=ErrorKind.AUTH_ALREADY_IN_PROGRESS),
                CallSite.AUTH,
                ErrorKind.AUTH_ALREADY_IN_PROGRESS,
            ),
            (IllegalTransitionError("x"), CallSite.PUBLISH, ErrorKind.ILLEGAL_TRANSITION),
            (MultistreamError("x", kind=ErrorKind.RESTREAM_DISABLED), CallSite.MULTISTREAM, ErrorKind.RESTREAM_DISABLED),
            (MultistreamError("x"), CallSite.MULTISTREAM, ErrorKind.RESTREAM_SETUP_FAILED),
            (PersistenceError("x"), CallSite.PUBLISH, ErrorKind.PERSISTENCE_FAILED),
            (OverlayInstallError("x"), CallSite.OVERLAY, ErrorKind.OVERLAY_INSTALL_FAILED),
        ],
    )
    def test_failure_types(self, failure, call_site, kind):
        assert classify(failure, FailureContext(call_site)).kind == kind

    def test_without_adapter_uses_platform_name(self):
        error = classify(PlatformError(YOUTUBE, "x"), FailureContext(CallSite.PUBLISH, YOUTUBE))

        assert error.message == "Can not update settings for Youtube"
        assert error.help_url is None
