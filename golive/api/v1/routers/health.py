from fastapi import APIRouter, Depends

from golive.api.v1.dependency import get_go_live_service
from golive.api.v1.schemas.base import ApiOut
from golive.app_config import get_app_environ_config
from golive.domain.live.go_live.go_live_domain import GoLiveService
from golive.shared.api.utils import get_worker_info

router = APIRouter(prefix="/health")


@router.get("")
async def health(service: GoLiveService = Depends(get_go_live_service)) -> ApiOut[dict]:
    """Liveness probe with the current go-live lifecycle."""
    worker_name, commit_id, instance_id = get_worker_info()
    return ApiOut[dict](
        results={
            "worker": worker_name,
            "commit": commit_id,
            "instance": instance_id,
            "demo_mode": get_app_environ_config().DEMO_MODE,
            "lifecycle": str(service.lifecycle),
        }
    )
