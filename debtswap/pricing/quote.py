"""Client-side quoting: what ceiling to submit with a swap request.

A caller prices the route at the current reserves, then widens the
zero-slippage input by a tolerance to get ``max_source_amount``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from debtswap.amm.base import ReserveSource
from debtswap.constants import BPS_DENOMINATOR
from debtswap.pricing.path_pricer import PathPricer
from debtswap.pricing.types import PricedPath
from debtswap.safe_int import S

DEFAULT_SLIPPAGE_BPS = 100  # 1%


def maximum_amount_in(amount_in: int, slippage_bps: int) -> int:
    """Widen an exact-output input by a slippage tolerance (floor).

    maximum = amount_in * (10000 + slippage_bps) // 10000
    """
    if slippage_bps < 0:
        raise ValueError(f"slippage_bps must be non-negative, got {slippage_bps}")
    return S(amount_in).mul_div(BPS_DENOMINATOR + slippage_bps, BPS_DENOMINATOR).value


@dataclass(frozen=True)
class Quote:
    """Exact-output quote for a route."""

    path: PricedPath
    slippage_bps: int
    max_amount_in: int

    @property
    def amount_in(self) -> int:
        return self.path.amount_in

    @property
    def amount_out(self) -> int:
        return self.path.amount_out


def quote_exact_output(
    pricer: PathPricer,
    factory: ReserveSource,
    route: Sequence[str],
    amount_out: int,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
) -> Quote:
    """Price a route and derive the slippage ceiling to submit with it."""
    path = pricer.amounts_in(factory, amount_out, route)
    return Quote(
        path=path,
        slippage_bps=slippage_bps,
        max_amount_in=maximum_amount_in(path.amount_in, slippage_bps),
    )


__all__ = ["DEFAULT_SLIPPAGE_BPS", "Quote", "maximum_amount_in", "quote_exact_output"]
