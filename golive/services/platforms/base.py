"""Platform adapter contract.

One adapter per destination normalizes that platform's settings schema, auth
scope requirements and publish semantics. Adapters perform network calls only;
they never mutate orchestration state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Protocol

import httpx
from loguru import logger

from golive.app_config import get_app_environ_config
from golive.schemas import (
    AuthMode,
    ErrorKind,
    Platform,
    PlatformInfo,
    ValidationIssue,
    ValidationResult,
)
from golive.shared.api.utils import format_error
from golive.utils.go_live_errors import MissingScopeError, PlatformError


class CredentialsProvider(Protocol):
    """Source of OAuth access tokens for adapters."""

    def get_access_token(self, platform: Platform) -> str | None: ...


class PlatformAdapter(ABC):
    """Uniform capability set every destination platform implements."""

    platform: ClassVar[Platform]
    display_name: ClassVar[str]
    auth_mode: ClassVar[AuthMode] = AuthMode.INTERNAL

    # Kinds the classifier uses for this platform
    missed_scope_kind: ClassVar[ErrorKind] = ErrorKind.MISSED_OAUTH_SCOPE
    publish_failed_kind: ClassVar[ErrorKind] = ErrorKind.PUBLISH_FAILED

    # External pages offered by recovery actions
    dashboard_url: ClassVar[str | None] = None
    enable_streaming_url: ClassVar[str | None] = None
    create_page_url: ClassVar[str | None] = None

    def __init__(
        self,
        credentials: CredentialsProvider | None = None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        demo_mode: bool | None = None,
    ):
        app_config = get_app_environ_config()
        self.credentials = credentials
        self.base_url = (base_url or self.default_base_url()).rstrip("/")
        self.timeout = app_config.HTTP_TIMEOUT_SECONDS
        self.demo_mode = app_config.DEMO_MODE if demo_mode is None else demo_mode
        self._transport = transport

    # ==================== CONTRACT ====================

    @abstractmethod
    def required_scopes(self) -> set[str]:
        """Scopes a token needs for prepopulate and publish."""

    @abstractmethod
    def validate_settings(self, blob: dict) -> ValidationResult:
        """Check a settings blob against the platform schema. Pure, no I/O."""

    @abstractmethod
    async def prepopulate(self) -> PlatformInfo:
        """Fetch the current remote stream metadata. Safe to call repeatedly."""

    @abstractmethod
    async def publish_settings(self, blob: dict) -> None:
        """Push validated settings to the platform. Safe to retry."""

    async def confirm_live(self) -> None:
        """Post-publish step run once settings are published. No-op by default."""
        return None

    def reset_session(self) -> None:
        """Forget remote objects created for a previous session. No-op by default."""
        return None

    def default_base_url(self) -> str:
        return ""

    # ==================== HTTP ====================

    def _access_token(self) -> str | None:
        if self.credentials is None:
            return None
        return self.credentials.get_access_token(self.platform)

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        token = self._access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and map transport and HTTP failures to PlatformError."""
        headers = self._build_headers(kwargs.pop("headers", None))
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                response = await client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{self.platform} {method} {path} transport error: {e!r}")
            raise PlatformError(
                self.platform,
                f"{self.display_name} is not reachable",
                details=format_error(e),
            ) from e

        if response.is_error:
            self._raise_for_response(response)
        return response

    def _raise_for_response(self, response: httpx.Response) -> None:
        """Map an error response to an exception. Adapters refine this."""
        message = error_message(response)
        if response.status_code in (401, 403) and "scope" in message.lower():
            raise MissingScopeError(self.platform, errmesg=message)
        raise PlatformError(
            self.platform,
            f"{self.display_name} request failed with status {response.status_code}",
            remote_status=response.status_code,
            details=message,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.platform!s}, demo_mode={self.demo_mode})"


def error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error)
        if data.get("message"):
            return str(data["message"])
    return response.text


# ==================== VALIDATION HELPERS ====================


def check_text(
    blob: dict,
    field: str,
    platform: Platform,
    issues: list[ValidationIssue],
    *,
    required: bool = False,
    max_length: int | None = None,
) -> None:
    value = blob.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            issues.append(ValidationIssue(platform=platform, field=field, message="is required"))
        return
    if not isinstance(value, str):
        issues.append(ValidationIssue(platform=platform, field=field, message="must be a string"))
        return
    if max_length is not None and len(value) > max_length:
        issues.append(
            ValidationIssue(
                platform=platform,
                field=field,
                message=f"must be at most {max_length} characters",
            )
        )


def check_choice(
    blob: dict,
    field: str,
    platform: Platform,
    issues: list[ValidationIssue],
    choices: set[str],
) -> None:
    value = blob.get(field)
    if value is not None and value not in choices:
        allowed = ", ".join(sorted(choices))
        issues.append(
            ValidationIssue(platform=platform, field=field, message=f"must be one of: {allowed}")
        )
