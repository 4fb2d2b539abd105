"""Attempt lifecycle: states, per-attempt context and outcome.

State diagram:

    IDLE -> REQUESTED -> IN_CALLBACK -> SWAPPED -> REPAID -> REBORROWED -> SETTLED
                |             |            |         |           |
                +-------------+------------+---------+-----------+--> REVERTED
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from debtswap.models.request import SwapRequest


class AttemptState(Enum):
    """Lifecycle of one debt swap attempt."""

    IDLE = auto()
    REQUESTED = auto()  # priced, flash loan requested
    IN_CALLBACK = auto()  # flash funds received, caller verified
    SWAPPED = auto()  # route executed, target asset held
    REPAID = auto()  # existing debt reduced
    REBORROWED = auto()  # new debt opened through delegation
    SETTLED = auto()  # terminal success
    REVERTED = auto()  # terminal failure, every mutation undone

    @property
    def is_terminal(self) -> bool:
        return self in (AttemptState.SETTLED, AttemptState.REVERTED)

    @property
    def flash_outstanding(self) -> bool:
        """True while a flash advance has been requested and not yet settled."""
        return self in _IN_FLIGHT


_IN_FLIGHT = frozenset(
    {
        AttemptState.REQUESTED,
        AttemptState.IN_CALLBACK,
        AttemptState.SWAPPED,
        AttemptState.REPAID,
        AttemptState.REBORROWED,
    }
)

VALID_TRANSITIONS: dict[AttemptState, frozenset[AttemptState]] = {
    AttemptState.IDLE: frozenset({AttemptState.REQUESTED, AttemptState.REVERTED}),
    AttemptState.REQUESTED: frozenset({AttemptState.IN_CALLBACK, AttemptState.REVERTED}),
    AttemptState.IN_CALLBACK: frozenset({AttemptState.SWAPPED, AttemptState.REVERTED}),
    AttemptState.SWAPPED: frozenset({AttemptState.REPAID, AttemptState.REVERTED}),
    AttemptState.REPAID: frozenset({AttemptState.REBORROWED, AttemptState.REVERTED}),
    AttemptState.REBORROWED: frozenset({AttemptState.SETTLED, AttemptState.REVERTED}),
    AttemptState.SETTLED: frozenset(),
    AttemptState.REVERTED: frozenset(),
}


class InvalidTransition(RuntimeError):
    """Attempted a state change the lifecycle does not allow."""

    pass


@dataclass(frozen=True)
class FlashContext:
    """Everything the callback knows about the flash advance it is serving.

    Built from the callback arguments, threaded through each step and
    dropped when the callback returns.
    """

    request: SwapRequest
    asset: str
    amount: int
    premium: int
    initiator: str
    lending_pool: str

    @property
    def owed(self) -> int:
        """Principal plus premium the lending pool collects at settlement."""
        return self.amount + self.premium

    @property
    def borrower(self) -> str:
        assert self.request.on_behalf_of is not None
        return self.request.on_behalf_of


@dataclass(frozen=True)
class SwapOutcome:
    """What one settled attempt did."""

    borrower: str
    source_asset: str
    target_asset: str
    flash_amount: int
    premium: int
    amount_swapped_in: int
    repay_requested: int
    amount_repaid: int
    new_debt: int
    refunded_source: int = 0
    refunded_target: int = 0

    @property
    def repay_shortfall(self) -> int:
        """Requested repayment the lending pool did not accept."""
        return self.repay_requested - self.amount_repaid


@dataclass
class Attempt:
    """One in-flight invocation of swap_debt.

    Created at entry, discarded at exit. It holds the request being served so
    the callback can check the payload it receives against it.
    """

    request: SwapRequest
    state: AttemptState = AttemptState.IDLE
    history: list[AttemptState] = field(default_factory=list)
    outcome: SwapOutcome | None = None

    def advance(self, to_state: AttemptState) -> None:
        """Move to to_state.

        Raises:
            InvalidTransition: If the lifecycle does not allow the move
        """
        if to_state not in VALID_TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.name} -> {to_state.name}")
        self.history.append(self.state)
        self.state = to_state


__all__ = [
    "Attempt",
    "AttemptState",
    "FlashContext",
    "InvalidTransition",
    "SwapOutcome",
    "VALID_TRANSITIONS",
]
