"""Go-live domain service - the single entry point the API layer talks to."""

from golive.schemas import (
    ClassifiedError,
    GoLiveSettings,
    Lifecycle,
    Platform,
    StreamSession,
    ValidationResult,
)
from golive.services.integrations.auth_flow import AuthFlowClient
from golive.services.integrations.restream_client import RestreamClient
from golive.services.integrations.settings_store import SettingsStore
from golive.services.platforms import PlatformRegistry, build_default_registry

from ..auth.auth_coordinator import AuthCoordinator
from ..settings.settings_sync import SettingsSynchronizer
from ._base import GoLiveContext
from ._checklist import ChecklistOperations
from ._end import EndOperations
from ._prepopulate import PrepopulateOperations
from ._update import UpdateOperations
from .go_live_models import GoLiveSessionView, project_session


class GoLiveService:
    """Owns the one process-wide StreamSession and dispatches every action.

    Actions are legal only in the lifecycle states listed in
    GoLiveStateMachine.ACTIONS; any other call raises IllegalTransitionError
    and leaves the session untouched.
    """

    def __init__(
        self,
        registry: PlatformRegistry,
        auth: AuthCoordinator,
        store: SettingsStore,
        restream: RestreamClient,
    ):
        self.ctx = GoLiveContext(
            registry=registry,
            synchronizer=SettingsSynchronizer(registry),
            auth=auth,
            store=store,
            restream=restream,
        )
        self._checklist = ChecklistOperations(self.ctx)
        self._prepopulate = PrepopulateOperations(self.ctx, self._checklist)
        self._update = UpdateOperations(self.ctx, self._checklist)
        self._end = EndOperations(self.ctx)

    @property
    def session(self) -> StreamSession | None:
        return self.ctx.session

    @property
    def lifecycle(self) -> Lifecycle:
        return self.ctx.session.lifecycle if self.ctx.session is not None else Lifecycle.IDLE

    @property
    def active_error(self) -> ClassifiedError | None:
        if self.ctx.session is not None:
            return self.ctx.session.error
        return self.ctx.last_error

    @property
    def synchronizer(self) -> SettingsSynchronizer:
        return self.ctx.synchronizer

    @property
    def auth(self) -> AuthCoordinator:
        return self.ctx.auth

    # ==================== START ====================

    async def go_live(self, settings: GoLiveSettings | dict) -> GoLiveSessionView:
        """Start a session.

        Raises IllegalTransitionError if a session is already running and
        InvalidSettingsError if no supported destination is selected.
        """
        await self._prepopulate.go_live(settings)
        return self.get_session_view()

    async def correct_settings(self, edits: GoLiveSettings | dict) -> GoLiveSessionView:
        session = self._prepopulate.require_legal("correct_settings")
        await self._prepopulate.correct_settings(session, edits)
        return self.get_session_view()

    def validate_settings(self, settings: GoLiveSettings) -> ValidationResult:
        """Validate a snapshot without touching the session."""
        return self.ctx.synchronizer.validate(settings)

    # ==================== CHECKLIST ====================

    async def finish_start_streaming(self) -> GoLiveSessionView:
        """Accept partial success and go live with the platforms that are done."""
        session = self._checklist.require_legal("finish_start_streaming")
        self._checklist.finish_start_streaming(session)
        return self.get_session_view()

    async def retry(self, platform: Platform | None = None) -> GoLiveSessionView:
        """Retry what failed in the current state.

        prepopulate: prepopulate (or validation); runChecklist: publishing;
        live: the pending settings update or the failed save.
        """
        session = self._checklist.require_legal("retry")
        if session.lifecycle == Lifecycle.PREPOPULATE:
            await self._prepopulate.retry(session, platform)
        elif session.lifecycle == Lifecycle.RUN_CHECKLIST:
            await self._checklist.retry(session, platform)
        else:
            await self._update.retry(session)
        return self.get_session_view()

    async def skip(self, platform: Platform | None = None) -> GoLiveSessionView:
        """Skip a failed prepopulate, or drop a destination from the checklist."""
        session = self._checklist.require_legal("skip")
        if session.lifecycle == Lifecycle.PREPOPULATE:
            await self._prepopulate.skip(session, platform)
        else:
            self._checklist.skip(session, platform)
        return self.get_session_view()

    # ==================== LIVE ====================

    async def update_stream_settings(self, edits: GoLiveSettings | dict) -> GoLiveSessionView:
        session = self._update.require_legal("update_stream_settings")
        await self._update.update_stream_settings(session, edits)
        return self.get_session_view()

    # ==================== END ====================

    async def cancel(self) -> GoLiveSessionView:
        session = self._end.require_legal("cancel")
        self._end.cancel(session)
        return self.get_session_view()

    async def stop_streaming(self) -> GoLiveSessionView:
        session = self._end.require_legal("stop_streaming")
        self._end.stop_streaming(session)
        return self.get_session_view()

    # ==================== VIEW ====================

    def get_session_view(self, include_details: bool = False) -> GoLiveSessionView:
        return project_session(self.ctx.session, self.ctx.last_error, include_details=include_details)


def build_go_live_service(auth_flow: AuthFlowClient | None = None) -> GoLiveService:
    """Wire the service with the built-in adapters and collaborators from config."""
    auth = AuthCoordinator(auth_flow or AuthFlowClient())
    registry = build_default_registry(auth)
    auth.bind_registry(registry)
    return GoLiveService(
        registry=registry,
        auth=auth,
        store=SettingsStore(),
        restream=RestreamClient(),
    )
