"""Exceptions raised by platform adapters, collaborators and the go-live service."""

from __future__ import annotations

from golive.schemas import ClassifiedError, ErrorKind, Platform, ValidationResult

from .app_errors import AppError, AppErrorCode, HttpStatusCode


class PlatformError(AppError):
    """A platform API call failed.

    ``kind`` is set when the adapter recognised a specific condition (for
    example a Facebook account without pages); otherwise the classifier derives
    the kind from the call site.
    """

    def __init__(
        self,
        platform: Platform,
        errmesg: str,
        *,
        kind: ErrorKind | None = None,
        remote_status: int | None = None,
        details: str | None = None,
    ):
        super().__init__(
            errcode=AppErrorCode.E_PLATFORM_ERROR,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )
        self.platform = platform
        self.kind = kind
        self.remote_status = remote_status
        self.details = details


class MissingScopeError(PlatformError):
    """The token granted for a platform lacks a capability the call needs."""

    def __init__(self, platform: Platform, missing: set[str] | None = None, errmesg: str = ""):
        self.missing = set(missing or ())
        if not errmesg:
            errmesg = f"{platform} token is missing required scopes"
            if self.missing:
                errmesg += f": {', '.join(sorted(self.missing))}"
        super().__init__(platform, errmesg, remote_status=401)


class AuthError(AppError):
    """An auth exchange failed or collided with one already in flight."""

    def __init__(self, platform: Platform, errmesg: str, *, kind: ErrorKind = ErrorKind.AUTH_FAILED):
        status = (
            HttpStatusCode.CONFLICT
            if kind == ErrorKind.AUTH_ALREADY_IN_PROGRESS
            else HttpStatusCode.UNAUTHORIZED
        )
        super().__init__(
            errcode=AppErrorCode.E_AUTH_ERROR,
            errmesg=errmesg,
            status_code=status,
            classified=ClassifiedError(kind=kind, platform=platform, message=errmesg),
        )
        self.platform = platform
        self.kind = kind


class IllegalTransitionError(AppError):
    """An action was called in a lifecycle state where it is not legal."""

    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_ILLEGAL_TRANSITION,
            errmesg=errmesg,
            status_code=HttpStatusCode.CONFLICT,
            classified=ClassifiedError(kind=ErrorKind.ILLEGAL_TRANSITION, message=errmesg),
        )


class InvalidSettingsError(AppError):
    """Settings were rejected by adapter validation."""

    def __init__(self, result: ValidationResult):
        errmesg = f"Invalid settings: {result.summary()}"
        super().__init__(
            errcode=AppErrorCode.E_INVALID_SETTINGS,
            errmesg=errmesg,
            status_code=HttpStatusCode.UNPROCESSABLE_ENTITY,
            classified=ClassifiedError(
                kind=ErrorKind.INVALID_SETTINGS,
                message="Some stream settings are invalid",
                details=result.summary() or None,
            ),
        )
        self.result = result


class PersistenceError(AppError):
    """The local settings store could not be read or written."""

    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_PERSISTENCE_ERROR,
            errmesg=errmesg,
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )


class OverlayInstallError(AppError):
    """The overlay could not be downloaded or installed."""

    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_OVERLAY_ERROR,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )


class MultistreamError(AppError):
    """The multistream relay is disabled or could not be configured."""

    def __init__(self, errmesg: str, *, kind: ErrorKind = ErrorKind.RESTREAM_SETUP_FAILED):
        super().__init__(
            errcode=AppErrorCode.E_MULTISTREAM_ERROR,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )
        self.kind = kind
