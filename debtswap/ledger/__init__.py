"""In-memory chain state shared by the reference collaborators."""

from debtswap.ledger.ledger import Ledger, LedgerState

__all__ = ["Ledger", "LedgerState"]
