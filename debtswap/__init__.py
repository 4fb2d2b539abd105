"""Debt Swap Engine - atomic flash-loan-backed debt position swaps."""

__version__ = "0.1.0"

from debtswap.orchestrator import DebtSwap, SwapOutcome  # noqa: E402

__all__ = ["DebtSwap", "SwapOutcome", "__version__"]
