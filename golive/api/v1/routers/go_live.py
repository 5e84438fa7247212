"""Go-live session endpoints."""

from fastapi import APIRouter, Depends, Query

from golive.api.v1.dependency import get_go_live_service
from golive.api.v1.schemas.base import ApiOut
from golive.api.v1.schemas.go_live import (
    PlatformIn,
    SettingsEditIn,
    ValidateSettingsIn,
    ValidateSettingsOut,
)
from golive.domain.live.errors.error_classifier import CallSite, FailureContext, classify
from golive.domain.live.go_live.go_live_domain import GoLiveService
from golive.domain.live.go_live.go_live_models import GoLiveSessionView

router = APIRouter(prefix="/go_live", tags=["Go Live"])


@router.post("/start")
async def start(
    body: SettingsEditIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    """Start a session from the stored settings with the given fields applied."""
    view = await service.go_live(body.as_edits())
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/correct_settings")
async def correct_settings(
    body: SettingsEditIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    """Fix invalid fields while the session is in prepopulate."""
    view = await service.correct_settings(body.as_edits())
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/update_settings")
async def update_settings(
    body: SettingsEditIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    """Edit the settings of a live stream."""
    view = await service.update_stream_settings(body.as_edits())
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/finish_start_streaming")
async def finish_start_streaming(
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    """Go live with the destinations that are ready."""
    view = await service.finish_start_streaming()
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/retry")
async def retry(
    body: PlatformIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    view = await service.retry(body.platform)
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/skip")
async def skip(
    body: PlatformIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    view = await service.skip(body.platform)
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/cancel")
async def cancel(
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    view = await service.cancel()
    return ApiOut[GoLiveSessionView](results=view)


@router.post("/stop")
async def stop(
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[GoLiveSessionView]:
    view = await service.stop_streaming()
    return ApiOut[GoLiveSessionView](results=view)


@router.get("/session")
async def get_session(
    service: GoLiveService = Depends(get_go_live_service),
    include_details: bool = Query(False, description="Include raw error details"),
) -> ApiOut[GoLiveSessionView]:
    """Read-only projection of the current session."""
    return ApiOut[GoLiveSessionView](results=service.get_session_view(include_details))


@router.post("/validate_settings")
async def validate_settings(
    body: ValidateSettingsIn,
    service: GoLiveService = Depends(get_go_live_service),
) -> ApiOut[ValidateSettingsOut]:
    """Validate settings without starting a session. Never fails for invalid input."""
    result = service.validate_settings(body.settings)
    error = None
    if not result.ok:
        error = classify(result, FailureContext(CallSite.VALIDATE))

    return ApiOut[ValidateSettingsOut](
        results=ValidateSettingsOut(ok=result.ok, issues=result.issues, error=error)
    )
