"""Route pricing.

Usage:
    from debtswap.pricing import PathPricer

    pricer = PathPricer()
    path = pricer.amounts_in(factory, amount_out, [usdc, weth, dai])
    flash_amount = path.amount_in
"""

from debtswap.pricing.path_pricer import PathPricer
from debtswap.pricing.quote import (
    DEFAULT_SLIPPAGE_BPS,
    Quote,
    maximum_amount_in,
    quote_exact_output,
)
from debtswap.pricing.types import PricedPath

__all__ = [
    "PathPricer",
    "PricedPath",
    "Quote",
    "DEFAULT_SLIPPAGE_BPS",
    "maximum_amount_in",
    "quote_exact_output",
]
