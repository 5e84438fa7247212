"""Session ending operations."""

from loguru import logger

from golive.schemas import Lifecycle, StreamSession
from golive.utils.go_live_errors import IllegalTransitionError

from ._base import BaseOperations


class EndOperations(BaseOperations):
    """Operations that destroy the session."""

    def cancel(self, session: StreamSession) -> None:
        """Abort a session that is not live yet.

        In-flight per-platform calls finish on their own; their results are
        discarded because the session slot is emptied here.

        Raises:
            IllegalTransitionError: If the session is live and being updated
        """
        if session.update_mode:
            raise IllegalTransitionError("Cannot cancel while updating a live stream")

        logger.info(f"Cancelling go-live session {session.session_id} (current state: {session.lifecycle})")
        self._update_lifecycle(session, Lifecycle.IDLE)
        self.ctx.session = None
        self.ctx.last_error = None

    def stop_streaming(self, session: StreamSession) -> None:
        """LIVE -> STOPPING -> IDLE. Cannot fail at this layer."""
        self._update_lifecycle(session, Lifecycle.STOPPING)
        self._update_lifecycle(session, Lifecycle.IDLE)
        self.ctx.session = None
        self.ctx.last_error = None
        logger.info(f"Go-live session {session.session_id} stopped")
