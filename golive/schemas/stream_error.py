"""Classified go-live errors."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .platform import Platform


class ErrorKind(str, Enum):
    """Fixed taxonomy of go-live failures."""

    PREPOPULATE_FAILED = "PREPOPULATE_FAILED"
    INVALID_SETTINGS = "INVALID_SETTINGS"
    SETTINGS_UPDATE_FAILED = "SETTINGS_UPDATE_FAILED"

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_ALREADY_IN_PROGRESS = "AUTH_ALREADY_IN_PROGRESS"

    # Granted token lacks a capability
    TWITCH_MISSED_OAUTH_SCOPE = "TWITCH_MISSED_OAUTH_SCOPE"
    MISSED_OAUTH_SCOPE = "MISSED_OAUTH_SCOPE"

    # Platform precondition
    FACEBOOK_HAS_NO_PAGES = "FACEBOOK_HAS_NO_PAGES"

    # Multistream relay
    RESTREAM_DISABLED = "RESTREAM_DISABLED"
    RESTREAM_SETUP_FAILED = "RESTREAM_SETUP_FAILED"

    # Platform capability / post-publish step
    YOUTUBE_STREAMING_DISABLED = "YOUTUBE_STREAMING_DISABLED"
    YOUTUBE_PUBLISH_FAILED = "YOUTUBE_PUBLISH_FAILED"
    PUBLISH_FAILED = "PUBLISH_FAILED"

    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"

    # Collaborators
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    OVERLAY_INSTALL_FAILED = "OVERLAY_INSTALL_FAILED"

    def __str__(self) -> str:
        return self.value


class RecoveryAction(str, Enum):
    """Actions a caller may offer for a classified error."""

    RETRY = "retry"
    SKIP = "skip"
    SKIP_AND_GO_LIVE = "skip_and_go_live"
    CORRECT_FIELDS = "correct_fields"
    RETRY_AUTH = "retry_auth"
    REAUTH = "reauth"
    MERGE_PLATFORM = "merge_platform"
    OPEN_EXTERNAL_LINK = "open_external_link"
    REDUCE_DESTINATIONS = "reduce_destinations"
    ABORT = "abort"

    def __str__(self) -> str:
        return self.value


class ClassifiedError(BaseModel):
    """Immutable description of one failure.

    ``details`` usually holds the raw failure text and is not shown unless the
    user asks for it.
    """

    kind: ErrorKind
    platform: Platform | None = None
    message: str
    details: str | None = None
    help_url: str | None = None

    model_config = ConfigDict(frozen=True)
