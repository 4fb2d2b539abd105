"""Protocol constants for the debt swap engine.

Centralizes well-known addresses and protocol parameters.
"""

from debtswap.models.types import UINT256_MAX, is_valid_address

# Maximum uint256 value. Passed as desired repay amount it means
# "repay the full outstanding balance", resolved at execution time.
MAX_UINT256 = UINT256_MAX
FULL_BALANCE = MAX_UINT256

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# UniswapV2 fee: 0.3% taken from the input amount (3/1000)
UNISWAP_V2_FEE_NUMERATOR = 3
UNISWAP_V2_FEE_DENOMINATOR = 1000

# keccak256 of the UniswapV2Pair creation code (mainnet factory)
UNISWAP_V2_INIT_CODE_HASH = "0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f"

# Aave v2 flash loan premium: 9 bps of the borrowed principal
FLASHLOAN_PREMIUM_TOTAL_BPS = 9
BPS_DENOMINATOR = 10_000

# Referral code passed to the lending pool (0 = no referral)
DEFAULT_REFERRAL_CODE = 0


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Mainnet deployments; the simulated market reuses their addresses
UNISWAP_V2_FACTORY = _validate_address(
    "UNISWAP_V2_FACTORY", "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f"
)
AAVE_V2_ADDRESSES_PROVIDER = _validate_address(
    "AAVE_V2_ADDRESSES_PROVIDER", "0xb53c1a33016b2dc2ff3653530bff1848a515c8c5"
)
DAI = _validate_address("DAI", "0x6b175474e89094c44da98b954eedeac495271d0f")
USDC = _validate_address("USDC", "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48")
WETH = _validate_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")
