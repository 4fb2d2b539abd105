"""Pytest configuration and fixtures."""

import pytest

from debtswap.ledger import Ledger
from debtswap.models.request import InterestRateMode
from debtswap.pricing.path_pricer import PathPricer
from debtswap.simulation import Market, build_market
from tests.helpers.constants import BORROWER, DAI, INITIAL_DEBT
from tests.helpers.fakes import SpyLendingPool


@pytest.fixture
def ledger() -> Ledger:
    """An empty ledger."""
    return Ledger()


@pytest.fixture
def pricer() -> PathPricer:
    """Path pricer with the default UniswapV2 configuration."""
    return PathPricer()


@pytest.fixture
def market() -> Market:
    """Fresh market with USDC/DAI, WETH/DAI and USDC/WETH pairs.

    The lending pool records flash loan requests (see SpyLendingPool).
    """
    return build_market(lending_pool_cls=SpyLendingPool)


@pytest.fixture
def indebted_market(market: Market) -> Market:
    """Market where BORROWER owes INITIAL_DEBT of variable-rate DAI."""
    market.open_debt(BORROWER, DAI, INITIAL_DEBT, InterestRateMode.VARIABLE)
    return market
