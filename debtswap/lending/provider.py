"""Lending pool addresses provider (registry)."""

from __future__ import annotations

from dataclasses import dataclass

from debtswap.lending.gateway import LendingGateway
from debtswap.models.types import normalize_address


@dataclass(frozen=True)
class LendingPoolAddressesProvider:
    """Registry resolving the lending pool for a market.

    Resolved once when the orchestrator is constructed and never re-read.
    """

    address: str
    lending_pool: LendingGateway

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address, validate=True))

    def get_lending_pool(self) -> LendingGateway:
        return self.lending_pool


__all__ = ["LendingPoolAddressesProvider"]
