"""Debt swap orchestration: the entry point and the flash loan callback."""

from debtswap.orchestrator.debt_swap import DebtSwap
from debtswap.orchestrator.state import (
    VALID_TRANSITIONS,
    Attempt,
    AttemptState,
    FlashContext,
    InvalidTransition,
    SwapOutcome,
)

__all__ = [
    "DebtSwap",
    "Attempt",
    "AttemptState",
    "FlashContext",
    "InvalidTransition",
    "SwapOutcome",
    "VALID_TRANSITIONS",
]
