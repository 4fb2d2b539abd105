"""Lending protocol interfaces and the in-memory reference pool."""

from debtswap.lending.gateway import FlashLoanReceiver, LendingGateway
from debtswap.lending.pool import InMemoryLendingPool, ReserveTokens
from debtswap.lending.provider import LendingPoolAddressesProvider

__all__ = [
    "FlashLoanReceiver",
    "LendingGateway",
    "InMemoryLendingPool",
    "ReserveTokens",
    "LendingPoolAddressesProvider",
]
