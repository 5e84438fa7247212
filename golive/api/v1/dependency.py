"""Process-wide service singletons shared by the v1 routers."""

from golive.domain.live.auth.auth_coordinator import AuthCoordinator
from golive.domain.live.auth.platform_merge import PlatformMergeService
from golive.domain.live.go_live.go_live_domain import GoLiveService, build_go_live_service
from golive.services.integrations.overlay_installer import OverlayInstaller

# Singleton instances; one go-live session per process
_go_live_service = build_go_live_service()
_merge_service = PlatformMergeService(_go_live_service.auth, OverlayInstaller())


def get_go_live_service() -> GoLiveService:
    return _go_live_service


def get_auth_coordinator() -> AuthCoordinator:
    return _go_live_service.auth


def get_merge_service() -> PlatformMergeService:
    return _merge_service
