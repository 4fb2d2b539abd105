"""Resolves AMM factory addresses named in requests to live venues."""

from __future__ import annotations

from dataclasses import dataclass

from debtswap.amm.base import ReserveSource
from debtswap.errors import InvalidSwapRequest
from debtswap.liquidity.gateway import LiquidityGateway
from debtswap.models.types import normalize_address


@dataclass(frozen=True)
class AmmVenue:
    """A factory to price against and the gateway that executes on it."""

    factory: ReserveSource
    gateway: LiquidityGateway


class AmmDirectory:
    """Address space of AMM deployments reachable from the orchestrator.

    Requests name their factory by address, the way on-chain callers pass a
    factory address; the directory turns that address into objects.
    """

    def __init__(self) -> None:
        self._venues: dict[str, AmmVenue] = {}

    def register(self, factory: ReserveSource, gateway: LiquidityGateway) -> AmmVenue:
        venue = AmmVenue(factory=factory, gateway=gateway)
        self._venues[normalize_address(factory.address)] = venue
        return venue

    def resolve(self, factory_address: str) -> AmmVenue:
        """Return the venue for a factory address.

        Raises:
            InvalidSwapRequest: If no AMM is deployed at the address
        """
        try:
            return self._venues[normalize_address(factory_address)]
        except KeyError:
            raise InvalidSwapRequest(
                f"unknown AMM factory: {factory_address}", amm_factory=factory_address
            ) from None

    def __contains__(self, factory_address: object) -> bool:
        return (
            isinstance(factory_address, str)
            and normalize_address(factory_address) in self._venues
        )


__all__ = ["AmmDirectory", "AmmVenue"]
