from .go_live_settings import CommonSettings, GoLiveSettings, ValidationIssue, ValidationResult
from .go_live_state import Lifecycle, PlatformStatus
from .platform import AuthMode, AuthPhase, Platform, PlatformAuthState, PlatformInfo
from .stream_error import ClassifiedError, ErrorKind, RecoveryAction
from .stream_session import StreamSession

__all__ = [
    "AuthMode",
    "AuthPhase",
    "ClassifiedError",
    "CommonSettings",
    "ErrorKind",
    "GoLiveSettings",
    "Lifecycle",
    "Platform",
    "PlatformAuthState",
    "PlatformInfo",
    "PlatformStatus",
    "RecoveryAction",
    "StreamSession",
    "ValidationIssue",
    "ValidationResult",
]
