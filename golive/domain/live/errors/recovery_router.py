"""Static routing from error kind to the recovery actions offered to the user."""

from golive.schemas import ErrorKind, RecoveryAction

RECOVERY_ROUTES: dict[ErrorKind, tuple[RecoveryAction, ...]] = {
    ErrorKind.PREPOPULATE_FAILED: (RecoveryAction.RETRY, RecoveryAction.SKIP_AND_GO_LIVE),
    ErrorKind.INVALID_SETTINGS: (RecoveryAction.CORRECT_FIELDS,),
    ErrorKind.SETTINGS_UPDATE_FAILED: (
        RecoveryAction.RETRY,
        RecoveryAction.SKIP,
        RecoveryAction.SKIP_AND_GO_LIVE,
    ),
    ErrorKind.AUTH_FAILED: (RecoveryAction.RETRY_AUTH,),
    ErrorKind.AUTH_ALREADY_IN_PROGRESS: (RecoveryAction.RETRY_AUTH,),
    ErrorKind.TWITCH_MISSED_OAUTH_SCOPE: (RecoveryAction.MERGE_PLATFORM, RecoveryAction.REAUTH),
    ErrorKind.MISSED_OAUTH_SCOPE: (RecoveryAction.MERGE_PLATFORM, RecoveryAction.REAUTH),
    ErrorKind.FACEBOOK_HAS_NO_PAGES: (RecoveryAction.OPEN_EXTERNAL_LINK, RecoveryAction.RETRY),
    ErrorKind.RESTREAM_DISABLED: (RecoveryAction.REDUCE_DESTINATIONS,),
    ErrorKind.RESTREAM_SETUP_FAILED: (RecoveryAction.REDUCE_DESTINATIONS, RecoveryAction.RETRY),
    ErrorKind.YOUTUBE_STREAMING_DISABLED: (RecoveryAction.OPEN_EXTERNAL_LINK, RecoveryAction.RETRY),
    ErrorKind.YOUTUBE_PUBLISH_FAILED: (RecoveryAction.OPEN_EXTERNAL_LINK, RecoveryAction.RETRY),
    ErrorKind.PUBLISH_FAILED: (
        RecoveryAction.OPEN_EXTERNAL_LINK,
        RecoveryAction.RETRY,
        RecoveryAction.SKIP,
    ),
    # Programming error, only leaving the flow is offered
    ErrorKind.ILLEGAL_TRANSITION: (RecoveryAction.ABORT,),
    ErrorKind.PERSISTENCE_FAILED: (RecoveryAction.RETRY,),
    ErrorKind.OVERLAY_INSTALL_FAILED: (RecoveryAction.RETRY, RecoveryAction.SKIP),
}


def recovery_actions(kind: ErrorKind) -> list[RecoveryAction]:
    """Ordered recovery actions for ``kind``; abort is always offered last."""
    actions = list(RECOVERY_ROUTES[kind])
    if RecoveryAction.ABORT not in actions:
        actions.append(RecoveryAction.ABORT)
    return actions
