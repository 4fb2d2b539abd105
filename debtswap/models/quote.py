"""Pydantic models for the quote API."""

from pydantic import BaseModel, Field

from debtswap.models.types import Address, DecimalUint256, Uint256


class PoolReserves(BaseModel):
    """Reserves of one constant-product pool, as observed by the caller."""

    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256


class QuoteRequest(BaseModel):
    """Exact-output quote request for a caller-supplied route."""

    factory: Address = Field(description="AMM factory the pools belong to.")
    pools: list[PoolReserves] = Field(min_length=1)
    route: list[Address] = Field(min_length=2, description="Token path, source first.")
    amount_out: Uint256 = Field(alias="amountOut", description="Desired final output.")
    slippage_bps: int = Field(default=100, ge=0, le=10_000, alias="slippageBps")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Per-hop amounts and the ceiling to submit as maxSourceAmount."""

    route: list[Address]
    amounts: list[DecimalUint256]
    amount_in: DecimalUint256 = Field(alias="amountIn")
    max_amount_in: DecimalUint256 = Field(alias="maxAmountIn")
    slippage_bps: int = Field(alias="slippageBps")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Body returned when a quote cannot be produced."""

    error: str
    detail: str
