"""Application error type raised by domain code and rendered by the API layer."""

from __future__ import annotations

import inspect
from enum import Enum, IntEnum
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from golive.schemas import ClassifiedError


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_NOT_FOUND = "E_NOT_FOUND"

    # Go-live orchestration
    E_ILLEGAL_TRANSITION = "E_ILLEGAL_TRANSITION"
    E_GO_LIVE_FAILED = "E_GO_LIVE_FAILED"
    E_INVALID_SETTINGS = "E_INVALID_SETTINGS"

    # Collaborators
    E_PLATFORM_ERROR = "E_PLATFORM_ERROR"
    E_AUTH_ERROR = "E_AUTH_ERROR"
    E_PERSISTENCE_ERROR = "E_PERSISTENCE_ERROR"
    E_OVERLAY_ERROR = "E_OVERLAY_ERROR"
    E_MULTISTREAM_ERROR = "E_MULTISTREAM_ERROR"

    def __str__(self) -> str:
        return self.value


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppError(Exception):
    """Error with an API-facing code and the call site that raised it.

    ``classified`` carries the go-live error value when the failure belongs to
    the go-live taxonomy, so callers can render recovery actions for it.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: HttpStatusCode | int = HttpStatusCode.INTERNAL_SERVER_ERROR,
        *,
        classified: ClassifiedError | None = None,
    ):
        super().__init__(errmesg)
        self.errcode = str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]
        self.classified = classified
        self.caller_info = _caller_info()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(errcode={self.errcode!r}, errmesg={self.errmesg!r})"


def _caller_info() -> str:
    # Skip our own frames and the constructors of AppError subclasses
    for frame_info in inspect.stack()[2:]:
        if frame_info.function == "__init__":
            continue
        module = inspect.getmodule(frame_info.frame)
        module_name = (
            module.__name__ if module and getattr(module, "__name__", None) else frame_info.filename
        )
        return f"{module_name}:{frame_info.function}:{frame_info.lineno}"
    return "unknown"
