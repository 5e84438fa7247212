"""Platform identifiers and per-platform auth state."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Platform(str, Enum):
    """Supported streaming destinations."""

    TWITCH = "twitch"
    YOUTUBE = "youtube"
    FACEBOOK = "facebook"

    def __str__(self) -> str:
        return self.value


class AuthMode(str, Enum):
    """How the OAuth exchange is run.

    EXTERNAL opens the system browser; required for platforms whose OAuth
    pages refuse to load in an embedded window.
    """

    INTERNAL = "internal"
    EXTERNAL = "external"

    def __str__(self) -> str:
        return self.value


class AuthPhase(str, Enum):
    """Per-platform auth state.

    disconnected -> auth_busy -> connected (success)
    auth_busy -> disconnected (failure/cancel)
    connected -> auth_busy -> connected (re-auth / scope upgrade)
    """

    DISCONNECTED = "disconnected"
    AUTH_BUSY = "auth_busy"
    CONNECTED = "connected"

    def __str__(self) -> str:
        return self.value


class PlatformAuthState(BaseModel):
    """Auth state of one platform for the current user. Not session scoped."""

    platform: Platform
    connected: bool = False
    scopes: set[str] = Field(default_factory=set)
    auth_busy: bool = False
    merged: bool = Field(
        default=False,
        description="Linked to the primary account instead of being the primary login",
    )
    access_token: str | None = Field(default=None, exclude=True, repr=False)
    updated_at: datetime | None = None

    @property
    def phase(self) -> AuthPhase:
        if self.auth_busy:
            return AuthPhase.AUTH_BUSY
        return AuthPhase.CONNECTED if self.connected else AuthPhase.DISCONNECTED


class PlatformInfo(BaseModel):
    """Current remote stream metadata returned by a prepopulate call."""

    platform: Platform
    title: str | None = None
    description: str | None = None
    game: str | None = None
    tags: list[str] | None = None
    extra: dict = Field(default_factory=dict)

    def as_settings(self) -> dict:
        """Settings blob fields this info can prefill."""
        values = self.model_dump(include={"title", "description", "game", "tags"}, exclude_none=True)
        values.update(self.extra)
        return values
