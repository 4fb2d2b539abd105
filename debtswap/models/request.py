"""Pydantic models for debt swap requests."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from debtswap.errors import InvalidSwapRequest
from debtswap.models.types import UINT256_MAX, Address, Uint256


class InterestRateMode(IntEnum):
    """Interest accrual scheme, numbered as the lending pool numbers them.

    NONE is only meaningful for flash loans, where it means the borrowed
    funds must be returned within the same attempt.
    """

    NONE = 0
    STABLE = 1
    VARIABLE = 2


RateMode = InterestRateMode


class SwapRequest(BaseModel):
    """A request to move a debt position from one asset/rate mode to another.

    The route runs from the asset sourced via flash liquidity (``route[0]``,
    which becomes the new debt) to the asset whose existing debt is repaid
    (``route[-1]``).
    """

    route: list[Address] = Field(min_length=2, description="Token path, source first.")
    rate_modes: list[InterestRateMode] = Field(
        alias="rateModes",
        description="Rate mode of the new debt, one per flash-sourced asset.",
    )
    desired_repay_amount: Uint256 = Field(
        alias="desiredRepayAmount",
        description="Amount of existing debt to repay; 2**256-1 repays the full balance.",
    )
    max_source_amount: Uint256 = Field(
        alias="maxSourceAmount",
        description="Slippage ceiling on the flash-sourced input amount.",
    )
    existing_debt_asset: Address = Field(alias="existingDebtAsset")
    existing_rate_mode: InterestRateMode = Field(alias="existingRateMode")
    amm_factory: Address = Field(alias="ammFactory")
    on_behalf_of: Address | None = Field(
        default=None,
        alias="onBehalfOf",
        description="Borrower whose debt is moved. Defaults to the caller.",
    )
    referral_code: int = Field(default=0, ge=0, lt=2**16, alias="referralCode")

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _check_shape(self) -> SwapRequest:
        for i in range(len(self.route) - 1):
            if self.route[i] == self.route[i + 1]:
                raise ValueError(f"route hop {i} swaps a token for itself: {self.route[i]}")
        if len(self.rate_modes) != len(self.flash_assets):
            raise ValueError(
                f"expected {len(self.flash_assets)} rate mode(s), got {len(self.rate_modes)}"
            )
        if InterestRateMode.NONE in self.rate_modes:
            raise ValueError("new debt rate mode must be stable or variable")
        if self.existing_rate_mode == InterestRateMode.NONE:
            raise ValueError("existing debt rate mode must be stable or variable")
        if self.existing_debt_asset != self.route[-1]:
            raise ValueError(
                f"route must end at the existing debt asset {self.existing_debt_asset}, "
                f"got {self.route[-1]}"
            )
        if self.desired_repay_amount == 0:
            raise ValueError("desired repay amount must be positive")
        return self

    @property
    def source_asset(self) -> str:
        """Asset borrowed via flash liquidity and re-borrowed as the new debt."""
        return self.route[0]

    @property
    def flash_assets(self) -> list[str]:
        """Assets requested from the lending pool's flash loan."""
        return [self.route[0]]

    @property
    def new_rate_mode(self) -> InterestRateMode:
        """Rate mode of the debt opened in the source asset."""
        return self.rate_modes[0]

    @property
    def repays_full_balance(self) -> bool:
        """True if the repay amount is the full-balance sentinel."""
        return self.desired_repay_amount == UINT256_MAX

    def for_borrower(self, borrower: str) -> SwapRequest:
        """Return a copy with ``on_behalf_of`` filled in if it was unset."""
        if self.on_behalf_of is not None:
            return self
        return parse_swap_request({**self.model_dump(), "on_behalf_of": borrower})


def parse_swap_request(data: dict[str, Any]) -> SwapRequest:
    """Validate raw request data into a SwapRequest.

    Raises:
        InvalidSwapRequest: If the data does not describe a valid request
    """
    try:
        return SwapRequest.model_validate(data)
    except ValidationError as err:
        raise InvalidSwapRequest(
            f"invalid swap request: {err.error_count()} error(s)",
            errors=[e["msg"] for e in err.errors()],
        ) from err


__all__ = ["InterestRateMode", "RateMode", "SwapRequest", "parse_swap_request"]
