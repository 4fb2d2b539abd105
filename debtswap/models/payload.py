"""ABI codec for the opaque flash loan payload.

The swap request travels through the lending pool's flash loan as raw
``params`` bytes and is decoded again inside the callback. A leading
version tag rejects payloads produced by another entry-point shape.
"""

from __future__ import annotations

from eth_abi import decode, encode  # type: ignore[attr-defined]
from eth_abi.exceptions import DecodingError

from debtswap.errors import InvalidSwapRequest
from debtswap.models.request import SwapRequest, parse_swap_request
from debtswap.models.types import address_bytes, normalize_address

PAYLOAD_VERSION = 2

PAYLOAD_TYPES = [
    "uint8",  # version
    "address[]",  # route
    "uint8[]",  # rate modes of the new debt
    "uint256",  # desired repay amount
    "uint256",  # max source amount
    "address",  # existing debt asset
    "uint8",  # existing rate mode
    "address",  # amm factory
    "address",  # on behalf of
    "uint16",  # referral code
]


def encode_swap_request(request: SwapRequest) -> bytes:
    """Encode a swap request as flash loan params.

    Raises:
        InvalidSwapRequest: If the request has no borrower set
    """
    if request.on_behalf_of is None:
        raise InvalidSwapRequest("cannot encode a request without on_behalf_of")

    return encode(
        PAYLOAD_TYPES,
        [
            PAYLOAD_VERSION,
            [address_bytes(token) for token in request.route],
            [int(mode) for mode in request.rate_modes],
            request.desired_repay_amount,
            request.max_source_amount,
            address_bytes(request.existing_debt_asset),
            int(request.existing_rate_mode),
            address_bytes(request.amm_factory),
            address_bytes(request.on_behalf_of),
            request.referral_code,
        ],
    )


def decode_swap_request(params: bytes) -> SwapRequest:
    """Decode flash loan params back into a swap request.

    Raises:
        InvalidSwapRequest: If the payload is malformed or from another version
    """
    try:
        (
            version,
            route,
            rate_modes,
            desired_repay_amount,
            max_source_amount,
            existing_debt_asset,
            existing_rate_mode,
            amm_factory,
            on_behalf_of,
            referral_code,
        ) = decode(PAYLOAD_TYPES, params)
    except (DecodingError, OverflowError, ValueError) as err:
        raise InvalidSwapRequest(f"malformed swap payload: {err}") from err

    if version != PAYLOAD_VERSION:
        raise InvalidSwapRequest(
            f"unsupported payload version {version}, expected {PAYLOAD_VERSION}",
        )

    return parse_swap_request(
        {
            "route": [normalize_address(token) for token in route],
            "rate_modes": list(rate_modes),
            "desired_repay_amount": desired_repay_amount,
            "max_source_amount": max_source_amount,
            "existing_debt_asset": normalize_address(existing_debt_asset),
            "existing_rate_mode": existing_rate_mode,
            "amm_factory": normalize_address(amm_factory),
            "on_behalf_of": normalize_address(on_behalf_of),
            "referral_code": referral_code,
        }
    )


__all__ = ["PAYLOAD_VERSION", "encode_swap_request", "decode_swap_request"]
