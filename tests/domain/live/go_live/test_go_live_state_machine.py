"""Tests for GoLiveStateMachine transitions and action legality."""

from golive.domain.live.go_live.go_live_state_machine import GoLiveStateMachine
from golive.schemas import Lifecycle


class TestCanTransition:
    """Tests for GoLiveStateMachine.can_transition method."""

    def test_idle_to_prepopulate_valid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.IDLE, Lifecycle.PREPOPULATE) is True

    def test_idle_to_live_invalid(self):
        """IDLE -> LIVE must go through prepopulate and the checklist."""
        assert GoLiveStateMachine.can_transition(Lifecycle.IDLE, Lifecycle.LIVE) is False

    def test_prepopulate_to_checklist_valid(self):
        assert (
            GoLiveStateMachine.can_transition(Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST) is True
        )

    def test_prepopulate_abort_to_idle_valid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.PREPOPULATE, Lifecycle.IDLE) is True

    def test_prepopulate_to_live_invalid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.PREPOPULATE, Lifecycle.LIVE) is False

    def test_checklist_to_live_valid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.RUN_CHECKLIST, Lifecycle.LIVE) is True

    def test_checklist_abort_to_idle_valid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.RUN_CHECKLIST, Lifecycle.IDLE) is True

    def test_live_edit_path_to_checklist_valid(self):
        """LIVE -> RUN_CHECKLIST is the update-while-live path."""
        assert GoLiveStateMachine.can_transition(Lifecycle.LIVE, Lifecycle.RUN_CHECKLIST) is True

    def test_live_to_prepopulate_invalid(self):
        """Editing while live never runs prepopulate again."""
        assert GoLiveStateMachine.can_transition(Lifecycle.LIVE, Lifecycle.PREPOPULATE) is False

    def test_live_to_idle_invalid(self):
        """Once live, the session must stop through STOPPING."""
        assert GoLiveStateMachine.can_transition(Lifecycle.LIVE, Lifecycle.IDLE) is False

    def test_stopping_to_idle_valid(self):
        assert GoLiveStateMachine.can_transition(Lifecycle.STOPPING, Lifecycle.IDLE) is True


class TestActions:
    """Tests for action legality per lifecycle state."""

    def test_go_live_only_from_idle(self):
        assert GoLiveStateMachine.is_legal("go_live", Lifecycle.IDLE) is True
        for state in (Lifecycle.PREPOPULATE, Lifecycle.RUN_CHECKLIST, Lifecycle.LIVE, Lifecycle.STOPPING):
            assert GoLiveStateMachine.is_legal("go_live", state) is False

    def test_finish_only_from_checklist(self):
        assert GoLiveStateMachine.is_legal("finish_start_streaming", Lifecycle.RUN_CHECKLIST) is True
        assert GoLiveStateMachine.is_legal("finish_start_streaming", Lifecycle.PREPOPULATE) is False

    def test_cancel_not_legal_past_live(self):
        assert GoLiveStateMachine.is_legal("cancel", Lifecycle.LIVE) is False
        assert GoLiveStateMachine.is_legal("cancel", Lifecycle.STOPPING) is False

    def test_unknown_action_never_legal(self):
        assert GoLiveStateMachine.is_legal("explode", Lifecycle.IDLE) is False

    def test_stopping_has_no_actions(self):
        assert GoLiveStateMachine.legal_actions(Lifecycle.STOPPING) == []

    def test_every_action_has_a_reachable_state(self):
        for action, states in GoLiveStateMachine.ACTIONS.items():
            assert states, action
            assert states <= set(GoLiveStateMachine.TRANSITIONS)


class TestGetValidSources:
    def test_sources_of_idle(self):
        assert GoLiveStateMachine.get_valid_sources(Lifecycle.IDLE) == {
            Lifecycle.PREPOPULATE,
            Lifecycle.RUN_CHECKLIST,
            Lifecycle.STOPPING,
        }

    def test_sources_of_live(self):
        assert GoLiveStateMachine.get_valid_sources(Lifecycle.LIVE) == {Lifecycle.RUN_CHECKLIST}

    def test_valid_transitions_from_live(self):
        assert GoLiveStateMachine.get_valid_transitions(Lifecycle.LIVE) == {
            Lifecycle.RUN_CHECKLIST,
            Lifecycle.STOPPING,
        }
