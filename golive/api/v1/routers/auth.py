"""Platform auth and merge onboarding endpoints."""

from fastapi import APIRouter, Depends, Query

from golive.api.v1.dependency import get_auth_coordinator, get_merge_service
from golive.api.v1.schemas.auth import (
    AuthStateOut,
    AuthStatesOut,
    BeginMergeIn,
    MergeFlowOut,
    PlatformIn,
    StartAuthIn,
)
from golive.api.v1.schemas.base import ApiOut
from golive.domain.live.auth.auth_coordinator import AuthCoordinator
from golive.domain.live.auth.platform_merge import PlatformMergeFlow, PlatformMergeService
from golive.schemas import Platform, PlatformAuthState

router = APIRouter(prefix="/auth", tags=["Auth"])


def _state_out(auth: AuthCoordinator, state: PlatformAuthState) -> AuthStateOut:
    return AuthStateOut(
        platform=state.platform,
        phase=state.phase,
        connected=state.connected,
        auth_busy=state.auth_busy,
        merged=state.merged,
        primary=state.platform == auth.primary_platform,
        scopes=sorted(state.scopes),
        missing_scopes=sorted(auth.missing_scopes(state.platform)) if state.connected else [],
        updated_at=state.updated_at,
    )


def _flow_out(flow: PlatformMergeFlow, page_url: str | None = None) -> MergeFlowOut:
    return MergeFlowOut(
        platform=flow.platform,
        step=str(flow.step),
        page_url=page_url,
        overlay_path=str(flow.overlay_path) if flow.overlay_path else None,
        error=flow.error,
    )


@router.post("/start")
async def start_auth(
    body: StartAuthIn,
    auth: AuthCoordinator = Depends(get_auth_coordinator),
) -> ApiOut[AuthStateOut]:
    """Run an auth exchange for one platform."""
    state = await auth.start_auth(body.platform, body.mode, merge=body.merge)
    return ApiOut[AuthStateOut](results=_state_out(auth, state))


@router.post("/disconnect")
async def disconnect(
    body: PlatformIn,
    auth: AuthCoordinator = Depends(get_auth_coordinator),
) -> ApiOut[AuthStateOut]:
    state = auth.disconnect(body.platform)
    return ApiOut[AuthStateOut](results=_state_out(auth, state))


@router.get("/state")
async def get_state(
    auth: AuthCoordinator = Depends(get_auth_coordinator),
) -> ApiOut[AuthStatesOut]:
    return ApiOut[AuthStatesOut](
        results=AuthStatesOut(
            primary_platform=auth.primary_platform,
            platforms=[_state_out(auth, state) for state in auth.states()],
        )
    )


# ==================== MERGE FLOW ====================


@router.post("/merge/begin")
async def begin_merge(
    body: BeginMergeIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.begin(body.platform, body.overlay_url, body.overlay_name)
    return ApiOut[MergeFlowOut](results=_flow_out(flow))


@router.post("/merge/open_page_creation")
async def open_page_creation(
    body: PlatformIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(body.platform)
    page_url = flow.open_page_creation()
    return ApiOut[MergeFlowOut](results=_flow_out(flow, page_url))


@router.post("/merge/skip_page_creation")
async def skip_page_creation(
    body: PlatformIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(body.platform)
    flow.skip_page_creation()
    return ApiOut[MergeFlowOut](results=_flow_out(flow))


@router.post("/merge/login")
async def merge_login(
    body: PlatformIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(body.platform)
    await flow.merge()
    return ApiOut[MergeFlowOut](results=_flow_out(flow))


@router.post("/merge/install_overlay")
async def install_overlay(
    body: PlatformIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(body.platform)
    await flow.install_overlay()
    return ApiOut[MergeFlowOut](results=_flow_out(flow))


@router.post("/merge/skip_overlay")
async def skip_overlay(
    body: PlatformIn,
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(body.platform)
    flow.skip_overlay()
    return ApiOut[MergeFlowOut](results=_flow_out(flow))


@router.get("/merge/state")
async def get_merge_state(
    platform: Platform = Query(..., description="Platform being onboarded"),
    merges: PlatformMergeService = Depends(get_merge_service),
) -> ApiOut[MergeFlowOut]:
    flow = merges.get(platform)
    return ApiOut[MergeFlowOut](results=_flow_out(flow))
