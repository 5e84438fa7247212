"""The live orchestration instance, one per go-live attempt."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from .go_live_settings import GoLiveSettings
from .go_live_state import Lifecycle, PlatformStatus
from .platform import Platform, PlatformInfo
from .stream_error import ClassifiedError


def utc_now() -> datetime:
    return datetime.now(UTC)


class StreamSession(BaseModel):
    """Owned by the go-live state machine; never mutated by callers."""

    session_id: str = Field(default_factory=lambda: uuid4().hex)
    settings: GoLiveSettings
    lifecycle: Lifecycle = Lifecycle.IDLE

    # Keys always equal settings.platforms; skipped platforms stay as SKIPPED
    per_platform_status: dict[Platform, PlatformStatus] = Field(default_factory=dict)
    error: ClassifiedError | None = None

    # Prepopulate results, and platforms whose failed prepopulate the user skipped
    prepopulated: dict[Platform, PlatformInfo] = Field(default_factory=dict)
    prepopulate_skipped: set[Platform] = Field(default_factory=set)

    # Edit while live
    update_mode: bool = False
    pending_settings: GoLiveSettings | None = None

    multistream_ready: bool = False

    # True while per-platform calls are awaited
    busy: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None

    @property
    def active_platforms(self) -> list[Platform]:
        """Selected platforms that were not skipped."""
        return [
            platform
            for platform in self.settings.platforms
            if self.per_platform_status.get(platform) != PlatformStatus.SKIPPED
        ]

    def platforms_with(self, *statuses: PlatformStatus) -> list[Platform]:
        return [
            platform
            for platform in self.settings.platforms
            if self.per_platform_status.get(platform) in statuses
        ]
