"""Go-live lifecycle enums."""

from enum import Enum


class Lifecycle(str, Enum):
    """Aggregate lifecycle of the go-live session.

    State Transition Flow:

    IDLE → PREPOPULATE → RUN_CHECKLIST → LIVE → STOPPING → IDLE
               ↓              ↓          ↑  ↓
              IDLE           IDLE    RUN_CHECKLIST (edit while live)

    State Descriptions:
    - IDLE: No session. Set on startup, after stop, cancel or fatal abort.
    - PREPOPULATE: Fetching remote metadata and validating settings. Set by go_live().
    - RUN_CHECKLIST: Publishing settings to every active destination.
    - LIVE: At least one destination confirmed.
    - STOPPING: Stream teardown requested by stop_streaming().
    """

    IDLE = "idle"
    PREPOPULATE = "prepopulate"
    RUN_CHECKLIST = "runChecklist"
    LIVE = "live"
    STOPPING = "stopping"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def cancellable_states(cls) -> list["Lifecycle"]:
        """States a session can be cancelled from."""
        return [Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST]


class PlatformStatus(str, Enum):
    """Status of the current step for one destination."""

    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return self.value


__all__ = ["Lifecycle", "PlatformStatus"]
