"""Checklist operations: publish settings to every active destination and go live."""

from __future__ import annotations

from loguru import logger

from golive.schemas import (
    ClassifiedError,
    ErrorKind,
    GoLiveSettings,
    Lifecycle,
    Platform,
    PlatformStatus,
    StreamSession,
)
from golive.shared.api.utils import format_error, gather_settled
from golive.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from golive.utils.go_live_errors import PersistenceError

from ..errors.error_classifier import CallSite
from ._base import BaseOperations

_RESTREAM_KINDS = {ErrorKind.RESTREAM_DISABLED, ErrorKind.RESTREAM_SETUP_FAILED}


class ChecklistOperations(BaseOperations):
    """Operations run while the session is in RUN_CHECKLIST."""

    async def run_checklist(self, session: StreamSession, platforms: list[Platform] | None = None) -> None:
        """Publish settings to ``platforms`` (default: every active platform not done yet).

        Failures are recorded on the session and never raised. The session
        goes live once every active platform is done.
        """
        self._set_error(session, None)
        active = session.active_platforms

        if len(active) > 1 and not session.multistream_ready:
            error = await self._setup_multistream(session, active)
            if not self._is_current(session, Lifecycle.RUN_CHECKLIST):
                return
            if error is not None:
                self._set_error(session, error)
                return
            session.multistream_ready = True

        if platforms is None:
            platforms = [p for p in active if session.per_platform_status[p] != PlatformStatus.DONE]

        failures = await self.publish_round(session, platforms, session.settings, confirm=True)
        if not self._is_current(session, Lifecycle.RUN_CHECKLIST):
            logger.info(f"Go-live session {session.session_id} left the checklist, results discarded")
            return

        for error in failures.values():
            self._set_error(session, error)
        if failures:
            return

        if all(session.per_platform_status[p] == PlatformStatus.DONE for p in session.active_platforms):
            self.go_live_reached(session)

    async def publish_round(
        self,
        session: StreamSession,
        platforms: list[Platform],
        settings: GoLiveSettings,
        *,
        confirm: bool,
    ) -> dict[Platform, ClassifiedError]:
        """Run one checklist item per platform concurrently and join them.

        Each task only touches its own per_platform_status entry; statuses are
        written after the join unless the session was cancelled meanwhile.
        """
        resolved = self.synchronizer.resolve(settings)
        lifecycle = session.lifecycle
        for platform in platforms:
            session.per_platform_status[platform] = PlatformStatus.IN_PROGRESS

        session.busy = True
        try:
            results = await gather_settled(
                *[
                    self._checklist_item(platform, resolved.settings_for(platform), confirm=confirm)
                    for platform in platforms
                ]
            )
        finally:
            session.busy = False

        failures: dict[Platform, ClassifiedError] = {}
        if not self._is_current(session, lifecycle):
            return failures

        for platform, result in zip(platforms, results):
            if isinstance(result, BaseException):
                logger.opt(exception=result).error(f"Unexpected checklist failure for {platform}")
                result = self._classify(result, CallSite.PUBLISH, platform)
            if result is None:
                session.per_platform_status[platform] = PlatformStatus.DONE
            else:
                session.per_platform_status[platform] = PlatformStatus.FAILED
                failures[platform] = result
        return failures

    async def _checklist_item(self, platform: Platform, blob: dict, *, confirm: bool) -> ClassifiedError | None:
        """publish_settings then confirm_live for one platform."""
        adapter = self.registry.get(platform)
        call_site = CallSite.PUBLISH
        try:
            self.auth.ensure_ready(platform)
            await adapter.publish_settings(blob)
            if confirm:
                call_site = CallSite.CONFIRM
                await adapter.confirm_live()
        except Exception as e:
            if not isinstance(e, AppError):
                logger.exception(f"{platform} {call_site} raised an unexpected error")
            return self._classify(e, call_site, platform)

        logger.debug(f"Checklist item for {platform} done")
        return None

    async def _setup_multistream(self, session: StreamSession, platforms: list[Platform]) -> ClassifiedError | None:
        session.busy = True
        try:
            await self.ctx.restream.setup(platforms)
        except Exception as e:
            if not isinstance(e, AppError):
                logger.error(f"Multistream setup failed:\n{format_error(e)}")
            return self._classify(e, CallSite.MULTISTREAM)
        finally:
            session.busy = False
        return None

    def go_live_reached(self, session: StreamSession) -> None:
        """Enter LIVE and persist the snapshot that is now streaming."""
        self._set_error(session, None)
        self._update_lifecycle(session, Lifecycle.LIVE)
        self.persist(session)

    def persist(self, session: StreamSession) -> None:
        try:
            self.ctx.store.save(session.settings)
        except PersistenceError as e:
            self._set_error(session, self._classify(e, CallSite.PERSISTENCE))

    # ==================== RECOVERY ====================

    async def retry(self, session: StreamSession, platform: Platform | None = None) -> None:
        """Retry one failed platform, or the whole remaining checklist."""
        if session.error is not None and session.error.kind in _RESTREAM_KINDS:
            session.multistream_ready = False
            await self.run_checklist(session)
            return

        if platform is None:
            await self.run_checklist(session)
            return

        status = session.per_platform_status.get(platform)
        if status is None or status == PlatformStatus.SKIPPED:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=f"{platform} is not an active destination of this session",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        await self.run_checklist(session, [platform])

    def skip(self, session: StreamSession, platform: Platform | None) -> None:
        """Drop a destination from this session; stored settings are untouched.

        Skipping the last active destination aborts the session.
        """
        if platform is None or session.per_platform_status.get(platform) in (None, PlatformStatus.SKIPPED):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=f"{platform} is not an active destination of this session",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        session.per_platform_status[platform] = PlatformStatus.SKIPPED
        session.multistream_ready = False
        logger.info(f"Go-live session {session.session_id} skipped {platform}")

        if not session.active_platforms:
            self._abort(session, self._no_destinations_error())
            return

        error = session.error
        if error is not None and (
            error.platform == platform
            or (error.kind in _RESTREAM_KINDS and len(session.active_platforms) <= 1)
        ):
            self._set_error(session, None)

    def finish_start_streaming(self, session: StreamSession) -> None:
        """Go live with whatever is done; platforms not done are skipped."""
        done = session.platforms_with(PlatformStatus.DONE)
        if not done:
            self._abort(session, self._no_destinations_error())
            return

        for platform in session.active_platforms:
            if platform not in done:
                session.per_platform_status[platform] = PlatformStatus.SKIPPED
        self.go_live_reached(session)

    @staticmethod
    def _no_destinations_error() -> ClassifiedError:
        return ClassifiedError(
            kind=ErrorKind.SETTINGS_UPDATE_FAILED,
            message="None of the destinations could be started",
        )
