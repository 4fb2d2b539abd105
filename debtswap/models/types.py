"""Shared type definitions for debt swap models."""

from typing import Annotated, Any

from eth_utils import is_hex_address, keccak
from pydantic import BeforeValidator, Field, PlainSerializer

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, accepting ints and decimal strings.

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


def validate_address(value: Any) -> str:
    """Validate and normalize an address for pydantic fields."""
    if not isinstance(value, str) or not is_valid_address(normalize_address(value)):
        raise ValueError(f"Invalid address: {value!r}")
    return normalize_address(value)


# Ethereum address, normalized to lowercase
Address = Annotated[str, BeforeValidator(validate_address)]

# 256-bit unsigned integer (accepts int or decimal string, stored as int)
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]

# Uint256 that serializes to a decimal string, for JSON consumers without bigints
DecimalUint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase with 0x prefix.

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    return len(address) == 42 and is_hex_address(address)


def address_bytes(address: str) -> bytes:
    """Return the 20 raw bytes of an address."""
    return bytes.fromhex(normalize_address(address, validate=True)[2:])


def derive_address(*parts: str) -> str:
    """Derive a deterministic address from string labels.

    Used by the in-memory collaborators to mint addresses for debt tokens
    and contracts that have no CREATE2 rule of their own.
    """
    digest = keccak(text="/".join(parts))
    return "0x" + digest[12:].hex()
