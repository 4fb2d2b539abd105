"""Factory functions for swap requests."""

from typing import Any

from debtswap.models.request import InterestRateMode, SwapRequest
from tests.helpers.constants import DAI, INITIAL_DEBT, UNISWAP_V2_FACTORY, USDC


def make_request(
    route: list[str] | None = None,
    desired_repay_amount: int = INITIAL_DEBT,
    max_source_amount: int = 2**256 - 1,
    new_rate_mode: InterestRateMode = InterestRateMode.STABLE,
    existing_rate_mode: InterestRateMode = InterestRateMode.VARIABLE,
    **overrides: Any,
) -> SwapRequest:
    """Create a request moving variable DAI debt into USDC debt.

    Args:
        route: Token path, source first (default: USDC -> DAI)
        desired_repay_amount: DAI debt to repay
        max_source_amount: Ceiling on the USDC input (default: unbounded)
        new_rate_mode: Rate mode of the new USDC debt
        existing_rate_mode: Rate mode of the DAI debt being repaid
        **overrides: Any other SwapRequest field
    """
    route = route if route is not None else [USDC, DAI]
    fields: dict[str, Any] = {
        "route": route,
        "rate_modes": [new_rate_mode],
        "desired_repay_amount": desired_repay_amount,
        "max_source_amount": max_source_amount,
        "existing_debt_asset": route[-1],
        "existing_rate_mode": existing_rate_mode,
        "amm_factory": UNISWAP_V2_FACTORY,
    }
    fields.update(overrides)
    return SwapRequest(**fields)
