"""Data models for debt swap requests and their flash loan payload."""

from debtswap.models.types import (
    UINT256_MAX,
    Address,
    DecimalUint256,
    Uint256,
    derive_address,
    is_valid_address,
    normalize_address,
)
from debtswap.models.request import (  # noqa: I001
    InterestRateMode,
    RateMode,
    SwapRequest,
    parse_swap_request,
)
from debtswap.models.payload import PAYLOAD_VERSION, decode_swap_request, encode_swap_request
from debtswap.models.quote import ErrorResponse, PoolReserves, QuoteRequest, QuoteResponse

__all__ = [
    "UINT256_MAX",
    "Address",
    "DecimalUint256",
    "Uint256",
    "derive_address",
    "is_valid_address",
    "normalize_address",
    "InterestRateMode",
    "RateMode",
    "SwapRequest",
    "parse_swap_request",
    "PAYLOAD_VERSION",
    "encode_swap_request",
    "decode_swap_request",
    "ErrorResponse",
    "PoolReserves",
    "QuoteRequest",
    "QuoteResponse",
]
