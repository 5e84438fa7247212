"""Auth Coordinator - per-platform auth state and exchanges."""

from __future__ import annotations

from datetime import UTC, datetime

from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import AuthMode, ErrorKind, Platform, PlatformAuthState
from golive.services.integrations.auth_flow import AuthFlowClient
from golive.services.platforms import PlatformRegistry
from golive.shared.api.utils import format_error
from golive.utils.go_live_errors import AuthError, MissingScopeError


class AuthCoordinator:
    """Tracks PlatformAuthState for every platform and runs auth exchanges.

    ``auth_busy`` is a per-platform mutual-exclusion flag: different platforms
    may authenticate concurrently, one platform only once at a time. Scope
    mismatches found while a session runs are reported, never re-prompted.
    """

    def __init__(
        self,
        auth_flow: AuthFlowClient,
        registry: PlatformRegistry | None = None,
        primary_platform: Platform | None = None,
    ):
        self.auth_flow = auth_flow
        self.registry = registry
        self._states: dict[Platform, PlatformAuthState] = {}

        if primary_platform is None:
            configured = get_app_environ_config().PRIMARY_PLATFORM
            primary_platform = Platform(configured) if configured else None
        self.primary_platform = primary_platform

    def bind_registry(self, registry: PlatformRegistry) -> None:
        """Attach the registry once it exists; adapters read tokens from us."""
        self.registry = registry

    # ==================== STATE ====================

    def get_state(self, platform: Platform) -> PlatformAuthState:
        state = self._states.get(platform)
        if state is None:
            state = PlatformAuthState(platform=platform)
            self._states[platform] = state
        return state

    def states(self) -> list[PlatformAuthState]:
        platforms = self.registry.platforms() if self.registry is not None else list(Platform)
        return [self.get_state(platform) for platform in platforms]

    def get_access_token(self, platform: Platform) -> str | None:
        state = self._states.get(platform)
        if state is None or not state.connected:
            return None
        return state.access_token

    def missing_scopes(self, platform: Platform) -> set[str]:
        if self.registry is None:
            return set()
        required = self.registry.get(platform).required_scopes()
        return required - self.get_state(platform).scopes

    def has_required_scopes(self, platform: Platform) -> bool:
        """Whether the granted scopes cover everything the adapter declares."""
        return not self.missing_scopes(platform)

    def ensure_ready(self, platform: Platform) -> None:
        """Check a platform may be used by the session.

        Raises:
            AuthError: If the platform is not connected
            MissingScopeError: If the granted token lacks a required scope
        """
        state = self.get_state(platform)
        if not state.connected:
            raise AuthError(platform, f"{platform} is not connected")

        missing = self.missing_scopes(platform)
        if missing:
            raise MissingScopeError(platform, missing)

    # ==================== EXCHANGES ====================

    async def start_auth(
        self,
        platform: Platform,
        mode: AuthMode | None = None,
        merge: bool = False,
    ) -> PlatformAuthState:
        """Run one auth exchange for a platform.

        ``merge=True`` links the platform to the connected primary account
        instead of replacing the primary login.

        Raises:
            AuthError: AUTH_ALREADY_IN_PROGRESS when an exchange is in flight
                for the platform, AUTH_FAILED when the exchange fails, is
                cancelled or is not allowed
        """
        state = self.get_state(platform)
        if state.auth_busy:
            raise AuthError(
                platform,
                f"Auth for {platform} is already in progress",
                kind=ErrorKind.AUTH_ALREADY_IN_PROGRESS,
            )

        adapter = self.registry.get(platform) if self.registry is not None else None
        required_mode = adapter.auth_mode if adapter is not None else AuthMode.INTERNAL
        if mode is None:
            mode = required_mode
        elif required_mode == AuthMode.EXTERNAL and mode != AuthMode.EXTERNAL:
            raise AuthError(platform, f"{platform} can only be connected in the external browser")

        if merge:
            primary = self.primary_platform
            if primary is None or not self.get_state(primary).connected:
                raise AuthError(platform, "Log in with your primary account before adding platforms")
            if primary == platform:
                raise AuthError(platform, f"{platform} is already the primary account")

        requested = adapter.required_scopes() if adapter is not None else set()
        state.auth_busy = True
        try:
            logger.info(f"Starting {mode} auth for {platform} (merge={merge})")
            result = await self.auth_flow.start_external_auth(platform, mode, requested, merge=merge)
        except Exception as e:
            logger.warning(f"Auth for {platform} failed:\n{format_error(e)}")
            self._disconnect(state)
            raise AuthError(platform, f"Could not connect {platform}") from e
        finally:
            state.auth_busy = False

        if result is None:
            self._disconnect(state)
            raise AuthError(platform, f"Auth for {platform} was cancelled")

        state.connected = True
        state.access_token = result.access_token
        state.scopes = set(result.scopes)
        state.merged = merge
        state.updated_at = datetime.now(UTC)
        if not merge:
            self.primary_platform = platform

        logger.info(f"Platform {platform} connected with scopes {sorted(state.scopes)}")
        return state

    def disconnect(self, platform: Platform) -> PlatformAuthState:
        state = self.get_state(platform)
        self._disconnect(state)
        if self.primary_platform == platform:
            self.primary_platform = None
        logger.info(f"Platform {platform} disconnected")
        return state

    @staticmethod
    def _disconnect(state: PlatformAuthState) -> None:
        state.connected = False
        state.access_token = None
        state.scopes = set()
        state.merged = False
        state.updated_at = datetime.now(UTC)
