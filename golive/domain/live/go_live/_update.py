"""Edit while live: republish settings without tearing the stream down."""

from __future__ import annotations

from loguru import logger

from golive.schemas import (
    ErrorKind,
    GoLiveSettings,
    Lifecycle,
    Platform,
    PlatformStatus,
    StreamSession,
    ValidationIssue,
    ValidationResult,
)
from golive.utils.go_live_errors import IllegalTransitionError, InvalidSettingsError

from ..errors.error_classifier import CallSite
from ._base import BaseOperations, GoLiveContext
from ._checklist import ChecklistOperations


class UpdateOperations(BaseOperations):
    """LIVE -> RUN_CHECKLIST (update mode) -> LIVE."""

    def __init__(self, ctx: GoLiveContext, checklist: ChecklistOperations):
        super().__init__(ctx)
        self._checklist = checklist

    async def update_stream_settings(self, session: StreamSession, edits: GoLiveSettings | dict) -> None:
        """Publish edited settings to every destination that is streaming.

        On failure the session returns to LIVE with the previous snapshot
        still in effect and SETTINGS_UPDATE_FAILED set; the edit is kept so
        retry() can publish it again.

        Raises:
            InvalidSettingsError: If the edits cannot be merged or change the
                destinations of the running stream
        """
        merged = self.synchronizer.merge(session.settings, edits)
        if merged.platforms != session.settings.platforms:
            issue = ValidationIssue(field="platforms", message="cannot change while live")
            raise InvalidSettingsError(ValidationResult(issues=[issue]))

        result = self.synchronizer.validate(merged)
        if not result.ok:
            self._set_error(session, self._classify(result, CallSite.VALIDATE))
            return

        session.pending_settings = merged
        await self._publish_pending(session)

    async def retry(self, session: StreamSession) -> None:
        """Publish the pending edit again, or save the snapshot again."""
        if session.pending_settings is not None:
            await self._publish_pending(session)
            return

        if session.error is not None and session.error.kind == ErrorKind.PERSISTENCE_FAILED:
            self._set_error(session, None)
            self._checklist.persist(session)
            return

        raise IllegalTransitionError("Nothing to retry while live")

    async def _publish_pending(self, session: StreamSession) -> None:
        streaming = session.platforms_with(PlatformStatus.DONE)
        self._set_error(session, None)
        session.update_mode = True
        self._update_lifecycle(session, Lifecycle.RUN_CHECKLIST)

        try:
            failures = await self._checklist.publish_round(
                session, streaming, session.pending_settings, confirm=False
            )
            if failures:
                await self._restore_previous(session, [p for p in streaming if p not in failures])
        finally:
            # The stream keeps running on every destination whatever happened
            for platform in streaming:
                session.per_platform_status[platform] = PlatformStatus.DONE
            session.update_mode = False
            self._update_lifecycle(session, Lifecycle.LIVE)

        for error in failures.values():
            self._set_error(session, error)
        if failures:
            logger.warning(
                f"Go-live session {session.session_id} kept previous settings, "
                f"update failed for {[str(p) for p in failures]}"
            )
            return

        session.settings = session.pending_settings
        session.pending_settings = None
        self._checklist.persist(session)

    async def _restore_previous(self, session: StreamSession, updated: list[Platform]) -> None:
        """Publish the previous snapshot again where the edit was accepted.

        Every destination keeps the settings the session reports.
        """
        if not updated or not self._is_current(session, Lifecycle.RUN_CHECKLIST):
            return

        logger.info(
            f"Go-live session {session.session_id} restoring previous settings on {[str(p) for p in updated]}"
        )
        failures = await self._checklist.publish_round(session, updated, session.settings, confirm=False)
        for platform, error in failures.items():
            logger.warning(f"Could not restore previous settings on {platform}: {error.kind}")
