"""Go-live state machine for lifecycle transitions and action legality."""

from golive.schemas import Lifecycle


class GoLiveStateMachine:
    """State machine for the go-live lifecycle.

    State flow with triggers:
    - IDLE -> PREPOPULATE (go_live called)
    - PREPOPULATE -> RUN_CHECKLIST (every platform prepopulated and settings valid) | IDLE (cancel)
    - RUN_CHECKLIST -> LIVE (every active platform done, or finish_start_streaming)
      | IDLE (cancel, or zero platforms left to stream to)
    - LIVE -> RUN_CHECKLIST (update_stream_settings) | STOPPING (stop_streaming)
    - STOPPING -> IDLE (teardown finished, cannot fail)
    """

    TRANSITIONS: dict[Lifecycle, set[Lifecycle]] = {
        Lifecycle.IDLE: {Lifecycle.PREPOPULATE},
        Lifecycle.PREPOPULATE: {Lifecycle.RUN_CHECKLIST, Lifecycle.IDLE},
        Lifecycle.RUN_CHECKLIST: {Lifecycle.LIVE, Lifecycle.IDLE},
        Lifecycle.LIVE: {Lifecycle.RUN_CHECKLIST, Lifecycle.STOPPING},
        Lifecycle.STOPPING: {Lifecycle.IDLE},
    }

    # Lifecycle states each public action may be called from
    ACTIONS: dict[str, set[Lifecycle]] = {
        "go_live": {Lifecycle.IDLE},
        "correct_settings": {Lifecycle.PREPOPULATE},
        "update_stream_settings": {Lifecycle.LIVE},
        "finish_start_streaming": {Lifecycle.RUN_CHECKLIST},
        "retry": {Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST, Lifecycle.LIVE},
        "skip": {Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST},
        "cancel": {Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST},
        "stop_streaming": {Lifecycle.LIVE},
    }

    @classmethod
    def can_transition(cls, current: Lifecycle, new: Lifecycle) -> bool:
        """Check if a lifecycle transition is valid.

        Args:
            current: Current lifecycle state
            new: Target state to transition to

        Returns:
            True if transition is valid, False otherwise
        """
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def is_legal(cls, action: str, current: Lifecycle) -> bool:
        """Check if a public action may be called in the current state."""
        return current in cls.ACTIONS.get(action, set())

    @classmethod
    def get_valid_transitions(cls, state: Lifecycle) -> set[Lifecycle]:
        return cls.TRANSITIONS.get(state, set())

    @classmethod
    def get_valid_sources(cls, target: Lifecycle) -> set[Lifecycle]:
        """Get all states that can transition to the target state.

        Args:
            target: Target lifecycle state

        Returns:
            Set of states that can transition to the target
        """
        return {state for state, targets in cls.TRANSITIONS.items() if target in targets}

    @classmethod
    def legal_actions(cls, state: Lifecycle) -> list[str]:
        return [action for action, states in cls.ACTIONS.items() if state in states]
