"""Maps a raised failure and its call site to exactly one ClassifiedError."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from golive.schemas import ClassifiedError, ErrorKind, Platform, ValidationResult
from golive.services.platforms import PlatformAdapter
from golive.shared.api.utils import format_error
from golive.utils.app_errors import AppError
from golive.utils.go_live_errors import (
    AuthError,
    IllegalTransitionError,
    InvalidSettingsError,
    MissingScopeError,
    MultistreamError,
    OverlayInstallError,
    PersistenceError,
    PlatformError,
)


class CallSite(str, Enum):
    """Where in the go-live flow a failure was raised."""

    PREPOPULATE = "prepopulate"
    VALIDATE = "validate"
    PUBLISH = "publish"
    CONFIRM = "confirm"
    MULTISTREAM = "multistream"
    AUTH = "auth"
    PERSISTENCE = "persistence"
    OVERLAY = "overlay"
    TRANSITION = "transition"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FailureContext:
    call_site: CallSite
    platform: Platform | None = None
    primary_platform: Platform | None = None
    adapter: PlatformAdapter | None = None


_CALL_SITE_KINDS: dict[CallSite, ErrorKind] = {
    CallSite.PREPOPULATE: ErrorKind.PREPOPULATE_FAILED,
    CallSite.VALIDATE: ErrorKind.INVALID_SETTINGS,
    CallSite.PUBLISH: ErrorKind.SETTINGS_UPDATE_FAILED,
    CallSite.CONFIRM: ErrorKind.PUBLISH_FAILED,
    CallSite.MULTISTREAM: ErrorKind.RESTREAM_SETUP_FAILED,
    CallSite.AUTH: ErrorKind.AUTH_FAILED,
    CallSite.PERSISTENCE: ErrorKind.PERSISTENCE_FAILED,
    CallSite.OVERLAY: ErrorKind.OVERLAY_INSTALL_FAILED,
    CallSite.TRANSITION: ErrorKind.ILLEGAL_TRANSITION,
}

_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.PREPOPULATE_FAILED: "Can not fetch settings from {platform}",
    ErrorKind.INVALID_SETTINGS: "Some stream settings are invalid",
    ErrorKind.SETTINGS_UPDATE_FAILED: "Can not update settings for {platform}",
    ErrorKind.AUTH_FAILED: "Could not connect {platform}",
    ErrorKind.AUTH_ALREADY_IN_PROGRESS: "{platform} is already connecting",
    ErrorKind.TWITCH_MISSED_OAUTH_SCOPE: "{platform} needs additional permissions, connect it again",
    ErrorKind.MISSED_OAUTH_SCOPE: "{platform} needs additional permissions, connect it again",
    ErrorKind.FACEBOOK_HAS_NO_PAGES: "You need a Facebook Gaming page to go live",
    ErrorKind.RESTREAM_DISABLED: "Streaming to multiple destinations is not enabled",
    ErrorKind.RESTREAM_SETUP_FAILED: "Could not set up streaming to multiple destinations",
    ErrorKind.YOUTUBE_STREAMING_DISABLED: "Live streaming is not enabled for your YouTube channel",
    ErrorKind.YOUTUBE_PUBLISH_FAILED: "Could not publish the YouTube broadcast",
    ErrorKind.PUBLISH_FAILED: "Could not start the stream on {platform}",
    ErrorKind.ILLEGAL_TRANSITION: "This action is not available right now",
    ErrorKind.PERSISTENCE_FAILED: "Could not save your stream settings",
    ErrorKind.OVERLAY_INSTALL_FAILED: "Could not install the overlay",
}


def classify(failure: BaseException | ValidationResult, context: FailureContext) -> ClassifiedError:
    """Return the single ClassifiedError describing ``failure``.

    Missing-scope failures depend on the account: on the primary platform the
    user is asked to log in again (reported like a prepopulate failure), on a
    merged platform to reconnect that platform.
    """
    kind = _classify_kind(failure, context)
    platform = getattr(failure, "platform", None) or context.platform

    return ClassifiedError(
        kind=kind,
        platform=platform,
        message=_message(kind, failure, context),
        details=_details(failure),
        help_url=_help_url(kind, context.adapter),
    )


def _classify_kind(failure: BaseException | ValidationResult, context: FailureContext) -> ErrorKind:
    if isinstance(failure, ValidationResult | InvalidSettingsError):
        return ErrorKind.INVALID_SETTINGS

    if isinstance(failure, IllegalTransitionError):
        return ErrorKind.ILLEGAL_TRANSITION

    if isinstance(failure, AuthError):
        return failure.kind

    if isinstance(failure, MissingScopeError):
        platform = failure.platform or context.platform
        if platform is not None and platform == context.primary_platform:
            return ErrorKind.PREPOPULATE_FAILED
        if context.adapter is not None:
            return context.adapter.missed_scope_kind
        return ErrorKind.MISSED_OAUTH_SCOPE

    if isinstance(failure, PlatformError) and failure.kind is not None:
        return failure.kind

    if isinstance(failure, MultistreamError):
        return failure.kind

    if isinstance(failure, PersistenceError):
        return ErrorKind.PERSISTENCE_FAILED

    if isinstance(failure, OverlayInstallError):
        return ErrorKind.OVERLAY_INSTALL_FAILED

    if context.call_site == CallSite.CONFIRM and context.adapter is not None:
        return context.adapter.publish_failed_kind

    return _CALL_SITE_KINDS[context.call_site]


def _message(kind: ErrorKind, failure: BaseException | ValidationResult, context: FailureContext) -> str:
    # Errors the adapter recognised carry their own wording
    if isinstance(failure, PlatformError) and failure.kind == kind:
        return failure.errmesg

    name = context.adapter.display_name if context.adapter is not None else None
    if name is None and context.platform is not None:
        name = str(context.platform).capitalize()
    return _MESSAGES[kind].format(platform=name or "the platform")


def _details(failure: BaseException | ValidationResult) -> str | None:
    if isinstance(failure, ValidationResult):
        return failure.summary() or None
    if isinstance(failure, InvalidSettingsError):
        return failure.result.summary() or None
    if isinstance(failure, AppError):
        return getattr(failure, "details", None) or failure.errmesg
    return format_error(failure)


def _help_url(kind: ErrorKind, adapter: PlatformAdapter | None) -> str | None:
    if adapter is None:
        return None
    if kind == ErrorKind.FACEBOOK_HAS_NO_PAGES:
        return adapter.create_page_url
    if kind == ErrorKind.YOUTUBE_STREAMING_DISABLED:
        return adapter.enable_streaming_url
    if kind in (ErrorKind.YOUTUBE_PUBLISH_FAILED, ErrorKind.PUBLISH_FAILED):
        return adapter.dashboard_url
    return None
