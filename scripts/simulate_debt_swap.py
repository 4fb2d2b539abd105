#!/usr/bin/env python3
"""Run one debt swap against a freshly built in-memory market.

The borrower starts with a variable-rate DAI debt and moves it into USDC
debt at the chosen rate mode.

Usage:
    # Move 1,000 DAI of variable debt into stable USDC debt, 1% slippage
    python scripts/simulate_debt_swap.py --debt 1000

    # Repay the full balance, routing through WETH
    python scripts/simulate_debt_swap.py --debt 1000 --full-balance --via-weth
"""

import argparse
import logging
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from debtswap.constants import DAI, MAX_UINT256, USDC, WETH  # noqa: E402
from debtswap.errors import DebtSwapError  # noqa: E402
from debtswap.models.request import InterestRateMode, SwapRequest  # noqa: E402
from debtswap.models.types import derive_address  # noqa: E402
from debtswap.pricing.quote import quote_exact_output  # noqa: E402
from debtswap.simulation import DAI_UNIT, USDC_UNIT, build_market  # noqa: E402

logger = structlog.get_logger()


def main() -> int:
    """Entry point for the debt swap simulation."""
    parser = argparse.ArgumentParser(description="Simulate an atomic debt swap")
    parser.add_argument(
        "--debt",
        type=int,
        default=1_000,
        help="Existing variable DAI debt, in whole DAI",
    )
    parser.add_argument(
        "--to-mode",
        choices=["stable", "variable"],
        default="stable",
        help="Rate mode of the new USDC debt",
    )
    parser.add_argument(
        "--slippage-bps",
        type=int,
        default=100,
        help="Slippage tolerance on the USDC input, in basis points",
    )
    parser.add_argument(
        "--full-balance",
        action="store_true",
        help="Repay the whole outstanding balance instead of an explicit amount",
    )
    parser.add_argument(
        "--via-weth",
        action="store_true",
        help="Route USDC -> WETH -> DAI instead of USDC -> DAI",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    market = build_market()
    borrower = derive_address("borrower")
    debt = args.debt * DAI_UNIT
    new_mode = InterestRateMode.STABLE if args.to_mode == "stable" else InterestRateMode.VARIABLE
    route = [USDC, WETH, DAI] if args.via_weth else [USDC, DAI]

    market.open_debt(borrower, DAI, debt, InterestRateMode.VARIABLE)

    quote = quote_exact_output(
        market.debt_swap.pricer, market.factory, route, debt, args.slippage_bps
    )
    ceiling = quote.max_amount_in
    market.delegate(borrower, USDC, new_mode, ceiling + market.pool.premium_for(ceiling))

    request = SwapRequest(
        route=route,
        rate_modes=[new_mode],
        desired_repay_amount=MAX_UINT256 if args.full_balance else debt,
        max_source_amount=ceiling,
        existing_debt_asset=DAI,
        existing_rate_mode=InterestRateMode.VARIABLE,
        amm_factory=market.factory.address,
    )

    try:
        outcome = market.debt_swap.swap_debt(request, caller=borrower)
    except DebtSwapError as err:
        logger.error("simulation_failed", **err.to_dict())
        print(f"Debt swap failed: {err.kind}: {err}")
        return 1

    dai_left = market.pool.outstanding_balance(DAI, InterestRateMode.VARIABLE, borrower)
    usdc_debt = market.pool.outstanding_balance(USDC, new_mode, borrower)
    print(f"Repaid:        {outcome.amount_repaid / DAI_UNIT:,.6f} DAI")
    print(f"Flash amount:  {outcome.flash_amount / USDC_UNIT:,.6f} USDC")
    print(f"Premium:       {outcome.premium / USDC_UNIT:,.6f} USDC")
    print(f"New debt:      {usdc_debt / USDC_UNIT:,.6f} USDC ({new_mode.name.lower()})")
    print(f"DAI remaining: {dai_left / DAI_UNIT:,.6f} DAI")
    return 0


if __name__ == "__main__":
    sys.exit(main())
