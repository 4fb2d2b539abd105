"""Error taxonomy for debt swap attempts.

Every error here is fatal to the current attempt. The attempt boundary
rolls the ledger back and re-raises, so callers always see either a fully
settled swap or one of these errors with balances unchanged.

Each class carries a stable ``kind`` string used in logs and API payloads.
"""

from __future__ import annotations

from typing import Any


class DebtSwapError(Exception):
    """Base error for debt swap operations."""

    kind: str = "debt_swap_error"

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message or self.kind)
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and API error bodies."""
        return {"error": self.kind, "detail": str(self), **self.context}


class InvalidSwapRequest(DebtSwapError):
    """Swap request failed shape validation."""

    kind = "invalid_swap_request"


class SlippageExceeded(DebtSwapError):
    """Required source amount exceeds the caller's ceiling."""

    kind = "slippage_exceeded"


class InsufficientLiquidity(DebtSwapError):
    """A route hop's pool cannot supply the requested output."""

    kind = "insufficient_liquidity"


class InsufficientAmount(DebtSwapError):
    """Zero amount passed to AMM pricing."""

    kind = "insufficient_amount"


class IdenticalAddresses(DebtSwapError):
    """Pair requested for a token with itself."""

    kind = "identical_addresses"


class ZeroAddress(DebtSwapError):
    """Zero address used as a pair token."""

    kind = "zero_address"


class InsufficientDelegation(DebtSwapError):
    """Borrower has not pre-authorized enough delegated-borrow allowance."""

    kind = "insufficient_delegation"


class Unauthorized(DebtSwapError):
    """Callback invoked by an unexpected caller or with a mismatched initiator."""

    kind = "unauthorized"


class ReentrantCall(DebtSwapError):
    """Nested orchestration attempted while one is in flight."""

    kind = "reentrant_call"


class ExcessiveInputAmount(DebtSwapError):
    """Execution-time price diverged from the precomputed bound."""

    kind = "excessive_input_amount"


class SettlementShortfall(DebtSwapError):
    """Lending pool did not receive the owed amount plus premium."""

    kind = "settlement_shortfall"


class InsufficientBalance(DebtSwapError):
    """Token transfer exceeds the sender's balance."""

    kind = "insufficient_balance"


class InsufficientAllowance(DebtSwapError):
    """Token transfer_from exceeds the spender's allowance."""

    kind = "insufficient_allowance"


class InvariantViolation(DebtSwapError):
    """Pair swap would decrease the constant-product invariant."""

    kind = "invariant_violation"


class LendingPoolError(DebtSwapError):
    """Lending pool rejected an operation for a protocol-level reason."""

    kind = "lending_pool_error"


__all__ = [
    "DebtSwapError",
    "InvalidSwapRequest",
    "SlippageExceeded",
    "InsufficientLiquidity",
    "InsufficientAmount",
    "IdenticalAddresses",
    "ZeroAddress",
    "InsufficientDelegation",
    "Unauthorized",
    "ReentrantCall",
    "ExcessiveInputAmount",
    "SettlementShortfall",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InvariantViolation",
    "LendingPoolError",
]
