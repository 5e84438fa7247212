"""Tests for the recovery router."""

import pytest

from golive.domain.live.errors.recovery_router import RECOVERY_ROUTES, recovery_actions
from golive.schemas import ErrorKind, RecoveryAction


class TestRecoveryRoutes:
    def test_every_kind_is_routed(self):
        """The mapping is total over the taxonomy."""
        assert set(RECOVERY_ROUTES) == set(ErrorKind)

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_abort_always_available_last(self, kind):
        actions = recovery_actions(kind)

        assert len(actions) >= 1
        assert actions[-1] == RecoveryAction.ABORT
        assert actions.count(RecoveryAction.ABORT) == 1

    def test_prepopulate_failed(self):
        assert recovery_actions(ErrorKind.PREPOPULATE_FAILED) == [
            RecoveryAction.RETRY,
            RecoveryAction.SKIP_AND_GO_LIVE,
            RecoveryAction.ABORT,
        ]

    def test_invalid_settings_offers_no_network_retry(self):
        assert RecoveryAction.RETRY not in recovery_actions(ErrorKind.INVALID_SETTINGS)

    def test_scope_errors_offer_reauth(self):
        for kind in (ErrorKind.TWITCH_MISSED_OAUTH_SCOPE, ErrorKind.MISSED_OAUTH_SCOPE):
            actions = recovery_actions(kind)
            assert RecoveryAction.MERGE_PLATFORM in actions
            assert RecoveryAction.REAUTH in actions

    def test_restream_errors_reduce_destinations(self):
        for kind in (ErrorKind.RESTREAM_DISABLED, ErrorKind.RESTREAM_SETUP_FAILED):
            assert recovery_actions(kind)[0] == RecoveryAction.REDUCE_DESTINATIONS

    def test_illegal_transition_only_aborts(self):
        assert recovery_actions(ErrorKind.ILLEGAL_TRANSITION) == [RecoveryAction.ABORT]

    def test_routes_not_mutated(self):
        recovery_actions(ErrorKind.PERSISTENCE_FAILED).append(RecoveryAction.SKIP)

        assert RECOVERY_ROUTES[ErrorKind.PERSISTENCE_FAILED] == (RecoveryAction.RETRY,)
