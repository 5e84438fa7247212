"""Base operations shared by the go-live lifecycle steps."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from golive.schemas import ClassifiedError, Lifecycle, Platform, StreamSession, ValidationResult
from golive.schemas.stream_session import utc_now
from golive.services.integrations.restream_client import RestreamClient
from golive.services.integrations.settings_store import SettingsStore
from golive.services.platforms import PlatformRegistry
from golive.utils.go_live_errors import IllegalTransitionError

from ..auth.auth_coordinator import AuthCoordinator
from ..errors.error_classifier import CallSite, FailureContext, classify
from ..settings.settings_sync import SettingsSynchronizer
from .go_live_state_machine import GoLiveStateMachine


@dataclass
class GoLiveContext:
    """Collaborators and the single process-wide session slot."""

    registry: PlatformRegistry
    synchronizer: SettingsSynchronizer
    auth: AuthCoordinator
    store: SettingsStore
    restream: RestreamClient
    session: StreamSession | None = None

    # Error of the last aborted session, shown while idle
    last_error: ClassifiedError | None = None


class BaseOperations:
    """Base class with shared session operation methods."""

    def __init__(self, ctx: GoLiveContext):
        self.ctx = ctx

    @property
    def registry(self) -> PlatformRegistry:
        return self.ctx.registry

    @property
    def synchronizer(self) -> SettingsSynchronizer:
        return self.ctx.synchronizer

    @property
    def auth(self) -> AuthCoordinator:
        return self.ctx.auth

    def require_legal(self, action: str) -> StreamSession | None:
        """Return the current session if ``action`` is legal right now.

        Raises:
            IllegalTransitionError: If the action is not legal in the current
                lifecycle state, or another operation is still running
        """
        session = self.ctx.session
        lifecycle = session.lifecycle if session is not None else Lifecycle.IDLE

        if not GoLiveStateMachine.is_legal(action, lifecycle):
            logger.warning(f"Rejected {action}: not legal while {lifecycle}")
            raise IllegalTransitionError(f"Cannot {action} while {lifecycle}")

        if session is not None and session.busy and action != "cancel":
            logger.warning(f"Rejected {action}: session {session.session_id} is busy")
            raise IllegalTransitionError(f"Cannot {action} while another operation is in progress")

        return session

    def _update_lifecycle(self, session: StreamSession, new_state: Lifecycle) -> StreamSession:
        """Move the session to ``new_state``.

        Raises:
            IllegalTransitionError: If the transition is not in the state machine
        """
        if not GoLiveStateMachine.can_transition(session.lifecycle, new_state):
            raise IllegalTransitionError(f"Invalid state transition: {session.lifecycle} -> {new_state}")

        session.lifecycle = new_state
        session.updated_at = utc_now()
        if new_state == Lifecycle.LIVE and not session.started_at:
            session.started_at = session.updated_at

        logger.info(f"Go-live session {session.session_id} state updated to {new_state}")
        return session

    def _is_current(self, session: StreamSession, lifecycle: Lifecycle) -> bool:
        """False once the session was cancelled or moved on while we awaited."""
        return self.ctx.session is session and session.lifecycle == lifecycle

    def _classify(
        self,
        failure: BaseException | ValidationResult,
        call_site: CallSite,
        platform: Platform | None = None,
    ) -> ClassifiedError:
        adapter = None
        if platform is not None and platform in self.registry:
            adapter = self.registry.get(platform)
        context = FailureContext(
            call_site=call_site,
            platform=platform,
            primary_platform=self.auth.primary_platform,
            adapter=adapter,
        )
        return classify(failure, context)

    def _set_error(self, session: StreamSession, error: ClassifiedError | None) -> None:
        """Replace the active error; there is at most one."""
        if error is not None:
            scope = f" ({error.platform})" if error.platform else ""
            logger.warning(f"Go-live session {session.session_id} error {error.kind}{scope}: {error.message}")
        session.error = error
        session.updated_at = utc_now()

    def _abort(self, session: StreamSession, error: ClassifiedError | None) -> None:
        """Fatal end of a session before it went live."""
        self._set_error(session, error)
        self._update_lifecycle(session, Lifecycle.IDLE)
        self.ctx.session = None
        self.ctx.last_error = error
        logger.info(f"Go-live session {session.session_id} aborted")
