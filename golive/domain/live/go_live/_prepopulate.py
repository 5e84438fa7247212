"""Session start: go_live, prepopulate and settings validation."""

from __future__ import annotations

from loguru import logger

from golive.schemas import (
    GoLiveSettings,
    Lifecycle,
    Platform,
    PlatformInfo,
    PlatformStatus,
    StreamSession,
    ValidationIssue,
    ValidationResult,
)
from golive.shared.api.utils import gather_settled
from golive.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from golive.utils.go_live_errors import InvalidSettingsError, PersistenceError

from ..errors.error_classifier import CallSite
from ._base import BaseOperations, GoLiveContext
from ._checklist import ChecklistOperations


class PrepopulateOperations(BaseOperations):
    """Operations from go_live() up to entering the checklist."""

    def __init__(self, ctx: GoLiveContext, checklist: ChecklistOperations):
        super().__init__(ctx)
        self._checklist = checklist

    async def go_live(self, settings: GoLiveSettings | dict) -> StreamSession:
        """Start a session from the stored settings with ``settings`` applied.

        Args:
            settings: Full settings or an edit of the stored snapshot

        Returns:
            The new session, in PREPOPULATE, RUN_CHECKLIST or LIVE

        Raises:
            IllegalTransitionError: If a session is already running
            InvalidSettingsError: If no destination is selected or one is not
                supported; no session is created
        """
        self.require_legal("go_live")

        load_error = None
        try:
            stored = self.ctx.store.load()
        except PersistenceError as e:
            logger.warning(f"Starting from empty settings: {e.errmesg}")
            load_error = self._classify(e, CallSite.PERSISTENCE)
            stored = GoLiveSettings()

        merged = self.synchronizer.merge(stored, settings)
        self._check_destinations(merged)

        session = StreamSession(
            settings=merged,
            per_platform_status={p: PlatformStatus.PENDING for p in merged.platforms},
        )
        self.ctx.session = session
        self.ctx.last_error = None
        if load_error is not None:
            self._set_error(session, load_error)
        for platform in merged.platforms:
            self.registry.get(platform).reset_session()
        logger.info(
            f"Go-live session {session.session_id} created for {[str(p) for p in merged.platforms]}"
        )

        self._update_lifecycle(session, Lifecycle.PREPOPULATE)
        await self._prepopulate(session, merged.platforms)
        return session

    def _check_destinations(self, settings: GoLiveSettings) -> None:
        issues = [
            ValidationIssue(platform=p, field="platform", message="is not supported")
            for p in settings.platforms
            if p not in self.registry
        ]
        if not settings.platforms:
            issues.append(ValidationIssue(field="platforms", message="select at least one destination"))
        if issues:
            raise InvalidSettingsError(ValidationResult(issues=issues))

    async def _prepopulate(self, session: StreamSession, platforms: list[Platform]) -> None:
        """Prepopulate ``platforms`` concurrently, then advance if nothing failed."""
        for platform in platforms:
            session.per_platform_status[platform] = PlatformStatus.IN_PROGRESS

        session.busy = True
        try:
            results = await gather_settled(*[self._prepopulate_one(p) for p in platforms])
        finally:
            session.busy = False

        if not self._is_current(session, Lifecycle.PREPOPULATE):
            logger.info(f"Go-live session {session.session_id} left prepopulate, results discarded")
            return

        for platform, result in zip(platforms, results):
            if isinstance(result, BaseException):
                if not isinstance(result, AppError):
                    logger.opt(exception=result).error(f"Unexpected prepopulate failure for {platform}")
                session.per_platform_status[platform] = PlatformStatus.FAILED
                self._set_error(session, self._classify(result, CallSite.PREPOPULATE, platform))
            else:
                session.prepopulated[platform] = result
                session.prepopulate_skipped.discard(platform)
                session.per_platform_status[platform] = PlatformStatus.DONE

        error = session.error
        if error is not None and session.per_platform_status.get(error.platform) == PlatformStatus.DONE:
            self._set_error(session, None)
        if not session.platforms_with(PlatformStatus.FAILED):
            await self._advance_to_checklist(session)

    async def _prepopulate_one(self, platform: Platform) -> PlatformInfo:
        self.auth.ensure_ready(platform)
        return await self.registry.get(platform).prepopulate()

    async def _advance_to_checklist(self, session: StreamSession) -> None:
        """Validate the prefilled settings and enter the checklist when valid."""
        settings = self.synchronizer.prefill(session.settings, session.prepopulated)
        session.settings = settings

        result = self.synchronizer.validate(settings)
        if not result.ok:
            self._set_error(session, self._classify(result, CallSite.VALIDATE))
            return

        self._set_error(session, None)
        self._update_lifecycle(session, Lifecycle.RUN_CHECKLIST)
        for platform in session.active_platforms:
            session.per_platform_status[platform] = PlatformStatus.PENDING
        await self._checklist.run_checklist(session)

    # ==================== RECOVERY ====================

    async def correct_settings(self, session: StreamSession, edits: GoLiveSettings | dict) -> None:
        """Apply corrections and validate again.

        Raises:
            InvalidSettingsError: If the edits cannot be merged or change the
                selected destinations; the session is untouched
        """
        merged = self.synchronizer.merge(session.settings, edits)
        if merged.platforms != session.settings.platforms:
            issue = ValidationIssue(field="platforms", message="cannot change once the session started")
            raise InvalidSettingsError(ValidationResult(issues=[issue]))

        session.settings = merged
        if session.platforms_with(PlatformStatus.FAILED):
            # Still waiting for prepopulate to be retried or skipped
            return
        await self._advance_to_checklist(session)

    async def retry(self, session: StreamSession, platform: Platform | None = None) -> None:
        """Retry prepopulate for failed platforms, or validation when none failed."""
        if platform is not None:
            if platform not in session.per_platform_status:
                raise AppError(
                    errcode=AppErrorCode.E_INVALID_PARAMS,
                    errmesg=f"{platform} is not a destination of this session",
                    status_code=HttpStatusCode.BAD_REQUEST,
                )
            await self._prepopulate(session, [platform])
            return

        failed = session.platforms_with(PlatformStatus.FAILED)
        if failed:
            await self._prepopulate(session, failed)
        else:
            await self._advance_to_checklist(session)

    async def skip(self, session: StreamSession, platform: Platform | None = None) -> None:
        """Skip the failed prepopulate of one platform (or all) and go on."""
        failed = session.platforms_with(PlatformStatus.FAILED)
        targets = failed if platform is None else [platform]
        if not targets or any(p not in failed for p in targets):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg="Only a failed prepopulate can be skipped",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        for target in targets:
            session.prepopulate_skipped.add(target)
            session.per_platform_status[target] = PlatformStatus.PENDING
            logger.info(f"Go-live session {session.session_id} skipped prepopulate for {target}")

        if session.error is not None and session.error.platform in targets:
            self._set_error(session, None)
        if session.platforms_with(PlatformStatus.FAILED):
            return
        await self._advance_to_checklist(session)
