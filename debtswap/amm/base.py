"""Interfaces the pricer needs from an AMM deployment."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PairReader(Protocol):
    """Read-only view of a constant-product pair."""

    @property
    def token0(self) -> str: ...

    @property
    def token1(self) -> str: ...

    def get_reserves(self) -> tuple[int, int]:
        """Return (reserve0, reserve1) in canonical token order."""
        ...


@runtime_checkable
class ReserveSource(Protocol):
    """An AMM factory whose pairs live at CREATE2-derived addresses.

    PathPricer derives the pair address itself and only asks the source for
    the pair deployed there, mirroring how on-chain code skips the factory's
    ``getPair`` lookup.
    """

    @property
    def address(self) -> str: ...

    def pair_at(self, pair_address: str) -> PairReader | None:
        """Return the pair deployed at pair_address, or None."""
        ...
