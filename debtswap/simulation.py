"""An in-memory market to run debt swaps against.

Wires a ledger, a UniswapV2 factory with DAI/USDC/WETH pairs, a lending
pool with those reserves, and a DebtSwap contract. Used by the CLI and as
the base of the test fixtures.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from debtswap.amm.factory import UniswapV2Factory
from debtswap.config import DEFAULT_CONFIG, DebtSwapConfig
from debtswap.constants import AAVE_V2_ADDRESSES_PROVIDER, DAI, UNISWAP_V2_FACTORY, USDC, WETH
from debtswap.ledger import Ledger
from debtswap.lending.pool import InMemoryLendingPool
from debtswap.lending.provider import LendingPoolAddressesProvider
from debtswap.liquidity.directory import AmmDirectory
from debtswap.liquidity.v2 import V2LiquidityGateway
from debtswap.models.request import InterestRateMode
from debtswap.models.types import derive_address
from debtswap.orchestrator.debt_swap import DebtSwap
from debtswap.pricing.path_pricer import PathPricer

logger = structlog.get_logger()

DAI_UNIT = 10**18
USDC_UNIT = 10**6
WETH_UNIT = 10**18

# (token_a, token_b, reserve_a, reserve_b)
DEFAULT_POOLS: list[tuple[str, str, int, int]] = [
    (USDC, DAI, 10_000_000 * USDC_UNIT, 10_000_000 * DAI_UNIT),
    (WETH, DAI, 5_000 * WETH_UNIT, 10_000_000 * DAI_UNIT),
    (USDC, WETH, 10_000_000 * USDC_UNIT, 5_000 * WETH_UNIT),
]

# Liquidity deposited into each lending reserve
DEFAULT_RESERVE_LIQUIDITY: dict[str, int] = {
    DAI: 50_000_000 * DAI_UNIT,
    USDC: 50_000_000 * USDC_UNIT,
    WETH: 25_000 * WETH_UNIT,
}


@dataclass
class Market:
    """Every collaborator of a debt swap, sharing one ledger."""

    ledger: Ledger
    factory: UniswapV2Factory
    gateway: V2LiquidityGateway
    amms: AmmDirectory
    pool: InMemoryLendingPool
    provider: LendingPoolAddressesProvider
    debt_swap: DebtSwap
    liquidity_provider: str = field(default_factory=lambda: derive_address("liquidity-provider"))

    def open_debt(
        self, borrower: str, asset: str, amount: int, rate_mode: InterestRateMode
    ) -> None:
        """Give borrower an outstanding debt of amount in asset, drawn from the pool."""
        self.pool.borrow(asset, amount, rate_mode, borrower, 0, caller=borrower)

    def delegate(
        self, borrower: str, asset: str, rate_mode: InterestRateMode, amount: int
    ) -> None:
        """Let the debt swap contract borrow in borrower's name."""
        self.pool.approve_delegation(
            asset, rate_mode, self.debt_swap.address, amount, caller=borrower
        )


def build_market(
    config: DebtSwapConfig = DEFAULT_CONFIG,
    pools: list[tuple[str, str, int, int]] | None = None,
    reserve_liquidity: dict[str, int] | None = None,
    lending_pool_cls: type[InMemoryLendingPool] = InMemoryLendingPool,
) -> Market:
    """Deploy a fresh market on a new ledger.

    Args:
        config: Fees, premium and CREATE2 parameters shared by every component
        pools: AMM pairs to create, as (token_a, token_b, reserve_a, reserve_b)
        reserve_liquidity: Amount deposited into each lending reserve
        lending_pool_cls: Lending pool implementation to deploy
    """
    ledger = Ledger()
    liquidity_provider = derive_address("liquidity-provider")

    factory = UniswapV2Factory(
        UNISWAP_V2_FACTORY,
        ledger,
        init_code_hash=config.init_code_hash,
        fee_numerator=config.fee_numerator,
        fee_denominator=config.fee_denominator,
    )
    for token_a, token_b, reserve_a, reserve_b in pools if pools is not None else DEFAULT_POOLS:
        pair = factory.create_pair(token_a, token_b)
        ledger.mint(token_a, liquidity_provider, reserve_a)
        ledger.mint(token_b, liquidity_provider, reserve_b)
        if pair.token0 == token_a.lower():
            pair.add_liquidity(liquidity_provider, reserve_a, reserve_b)
        else:
            pair.add_liquidity(liquidity_provider, reserve_b, reserve_a)

    pool = lending_pool_cls(
        derive_address("lending-pool", AAVE_V2_ADDRESSES_PROVIDER),
        ledger,
        flash_premium_bps=config.flash_premium_bps,
    )
    liquidity = reserve_liquidity if reserve_liquidity is not None else DEFAULT_RESERVE_LIQUIDITY
    for asset, amount in liquidity.items():
        pool.init_reserve(asset)
        ledger.mint(asset, liquidity_provider, amount)
        pool.deposit(asset, amount, liquidity_provider, caller=liquidity_provider)

    provider = LendingPoolAddressesProvider(AAVE_V2_ADDRESSES_PROVIDER, pool)
    gateway = V2LiquidityGateway(factory, ledger, PathPricer(config))
    amms = AmmDirectory()
    amms.register(factory, gateway)

    debt_swap = DebtSwap(
        provider,
        ledger,
        amms,
        address=derive_address("debt-swap", str(DebtSwap.VERSION)),
        config=config,
    )
    logger.debug(
        "market_built",
        pairs=len(factory.all_pairs),
        reserves=len(liquidity),
        debt_swap=debt_swap.address,
    )
    return Market(
        ledger=ledger,
        factory=factory,
        gateway=gateway,
        amms=amms,
        pool=pool,
        provider=provider,
        debt_swap=debt_swap,
        liquidity_provider=liquidity_provider,
    )


__all__ = [
    "DAI_UNIT",
    "DEFAULT_POOLS",
    "DEFAULT_RESERVE_LIQUIDITY",
    "Market",
    "USDC_UNIT",
    "WETH_UNIT",
    "build_market",
]
