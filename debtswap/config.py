"""Configuration for the debt swap engine."""

from dataclasses import dataclass

from debtswap.constants import (
    BPS_DENOMINATOR,
    DEFAULT_REFERRAL_CODE,
    FLASHLOAN_PREMIUM_TOTAL_BPS,
    UNISWAP_V2_FEE_DENOMINATOR,
    UNISWAP_V2_FEE_NUMERATOR,
    UNISWAP_V2_INIT_CODE_HASH,
)


@dataclass(frozen=True)
class DebtSwapConfig:
    """Immutable configuration fixed at construction.

    Attributes:
        fee_numerator: AMM fee numerator (3 for UniswapV2's 0.3%)
        fee_denominator: AMM fee denominator (1000)
        init_code_hash: Pair creation code hash used for CREATE2 derivation
        flash_premium_bps: Lending pool flash loan premium in basis points
        referral_code: Referral code forwarded to the lending pool
        refund_residuals: If True, leftover flashed or swapped tokens are
            returned to the borrower at settlement instead of being left
            on the contract.
    """

    fee_numerator: int = UNISWAP_V2_FEE_NUMERATOR
    fee_denominator: int = UNISWAP_V2_FEE_DENOMINATOR
    init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH
    flash_premium_bps: int = FLASHLOAN_PREMIUM_TOTAL_BPS
    referral_code: int = DEFAULT_REFERRAL_CODE
    refund_residuals: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}), got {self.fee_numerator}"
            )
        if not 0 <= self.flash_premium_bps < BPS_DENOMINATOR:
            raise ValueError(f"flash_premium_bps out of range: {self.flash_premium_bps}")
        if not 0 <= self.referral_code < 2**16:
            raise ValueError(f"referral_code must fit in uint16: {self.referral_code}")


# Default configuration instance
DEFAULT_CONFIG = DebtSwapConfig()
