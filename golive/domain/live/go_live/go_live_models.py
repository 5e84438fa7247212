"""Go-live domain models and read-only session projections."""

from datetime import datetime

from pydantic import BaseModel, Field

from golive.schemas import (
    ClassifiedError,
    GoLiveSettings,
    Lifecycle,
    Platform,
    PlatformStatus,
    RecoveryAction,
    StreamSession,
)

from ..errors.recovery_router import recovery_actions
from .go_live_state_machine import GoLiveStateMachine


class GoLiveSessionView(BaseModel):
    """What the UI sees of the current session."""

    session_id: str | None = None
    lifecycle: Lifecycle = Lifecycle.IDLE
    per_platform_status: dict[Platform, PlatformStatus] = Field(default_factory=dict)
    active_platforms: list[Platform] = Field(default_factory=list)
    settings: GoLiveSettings | None = None

    error: ClassifiedError | None = None
    recovery_actions: list[RecoveryAction] = Field(default_factory=list)
    legal_actions: list[str] = Field(default_factory=list)

    is_update_mode: bool = False
    is_multiplatform: bool = False
    busy: bool = False

    created_at: datetime | None = None
    started_at: datetime | None = None


def project_session(
    session: StreamSession | None,
    last_error: ClassifiedError | None = None,
    *,
    include_details: bool = False,
) -> GoLiveSessionView:
    """Build the session view; error details are withheld unless asked for."""
    if session is None:
        error = _visible_error(last_error, include_details)
        return GoLiveSessionView(
            error=error,
            recovery_actions=recovery_actions(error.kind) if error else [],
            legal_actions=GoLiveStateMachine.legal_actions(Lifecycle.IDLE),
        )

    error = _visible_error(session.error, include_details)
    return GoLiveSessionView(
        session_id=session.session_id,
        lifecycle=session.lifecycle,
        per_platform_status=dict(session.per_platform_status),
        active_platforms=session.active_platforms,
        settings=session.settings,
        error=error,
        recovery_actions=recovery_actions(error.kind) if error else [],
        legal_actions=GoLiveStateMachine.legal_actions(session.lifecycle),
        is_update_mode=session.update_mode,
        is_multiplatform=len(session.active_platforms) > 1,
        busy=session.busy,
        created_at=session.created_at,
        started_at=session.started_at,
    )


def _visible_error(error: ClassifiedError | None, include_details: bool) -> ClassifiedError | None:
    if error is None or include_details:
        return error
    return error.model_copy(update={"details": None})
