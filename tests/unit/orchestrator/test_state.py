"""Tests for the attempt lifecycle."""

import pytest

from debtswap.orchestrator.state import (
    VALID_TRANSITIONS,
    Attempt,
    AttemptState,
    FlashContext,
    InvalidTransition,
    SwapOutcome,
)
from tests.helpers import BORROWER, DAI, USDC, make_request

HAPPY_PATH = [
    AttemptState.REQUESTED,
    AttemptState.IN_CALLBACK,
    AttemptState.SWAPPED,
    AttemptState.REPAID,
    AttemptState.REBORROWED,
    AttemptState.SETTLED,
]


class TestAttemptLifecycle:
    """Tests for state transitions."""

    def test_happy_path(self):
        """An attempt walks every step in order."""
        attempt = Attempt(request=make_request())
        for state in HAPPY_PATH:
            attempt.advance(state)
        assert attempt.state == AttemptState.SETTLED
        assert attempt.history == [AttemptState.IDLE, *HAPPY_PATH[:-1]]

    def test_steps_cannot_be_skipped(self):
        """Repaying before swapping is not a valid move."""
        attempt = Attempt(request=make_request())
        attempt.advance(AttemptState.REQUESTED)
        with pytest.raises(InvalidTransition):
            attempt.advance(AttemptState.REPAID)

    @pytest.mark.parametrize("state", [AttemptState.IDLE, *HAPPY_PATH[:-1]])
    def test_every_live_state_can_revert(self, state):
        """Any non-terminal state may fail."""
        assert AttemptState.REVERTED in VALID_TRANSITIONS[state]

    def test_terminal_states(self):
        """Settled and reverted attempts go nowhere."""
        for state in (AttemptState.SETTLED, AttemptState.REVERTED):
            assert state.is_terminal
            assert VALID_TRANSITIONS[state] == frozenset()

    def test_flash_outstanding(self):
        """A flash advance is outstanding from request until settlement."""
        assert not AttemptState.IDLE.flash_outstanding
        assert AttemptState.IN_CALLBACK.flash_outstanding
        assert AttemptState.REBORROWED.flash_outstanding
        assert not AttemptState.SETTLED.flash_outstanding


class TestContextAndOutcome:
    """Tests for the per-attempt values."""

    def test_flash_context_owed(self):
        """The pool is owed principal plus premium."""
        ctx = FlashContext(
            request=make_request(on_behalf_of=BORROWER),
            asset=USDC,
            amount=1_000_000,
            premium=900,
            initiator=BORROWER,
            lending_pool=DAI,
        )
        assert ctx.owed == 1_000_900
        assert ctx.borrower == BORROWER

    def test_repay_shortfall(self):
        """Shortfall is what the pool did not accept."""
        outcome = SwapOutcome(
            borrower=BORROWER,
            source_asset=USDC,
            target_asset=DAI,
            flash_amount=10,
            premium=0,
            amount_swapped_in=10,
            repay_requested=100,
            amount_repaid=80,
            new_debt=10,
        )
        assert outcome.repay_shortfall == 20
