"""Test helpers module for shared test utilities.

- constants: Token addresses, accounts and common amounts
- factories: Swap request factory functions
- fakes: Hostile or instrumented collaborators
"""

from tests.helpers.constants import (
    BORROWER,
    DAI,
    DAI_UNIT,
    INITIAL_DEBT,
    STRANGER,
    USDC,
    USDC_UNIT,
    WETH,
    WETH_UNIT,
)
from tests.helpers.factories import make_request

__all__ = [
    # Constants
    "BORROWER",
    "STRANGER",
    "DAI",
    "USDC",
    "WETH",
    "DAI_UNIT",
    "USDC_UNIT",
    "WETH_UNIT",
    "INITIAL_DEBT",
    # Factories
    "make_request",
]
