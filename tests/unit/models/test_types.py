"""Tests for address and uint256 helpers."""

import pytest

from debtswap.models.types import (
    address_bytes,
    derive_address,
    is_valid_address,
    normalize_address,
    validate_address,
)
from tests.helpers import DAI


class TestAddressValidation:
    """Tests for is_valid_address and friends."""

    def test_valid_addresses(self):
        """Lowercase and checksummed mainnet addresses are valid."""
        assert is_valid_address(DAI)
        assert is_valid_address("0x6B175474E89094C44Da98b954EedeAC495271d0F")

    @pytest.mark.parametrize(
        "address",
        [
            "0x" + "1_" * 20,
            "0x" + "a" * 39 + " ",
            " 0x" + "a" * 39,
            "0x" + "g" * 40,
            DAI[2:],
            DAI + "00",
        ],
    )
    def test_invalid_addresses(self, address):
        """Underscores, whitespace, non-hex digits and wrong lengths are rejected."""
        assert not is_valid_address(address)

    def test_underscores_never_reach_bytes(self):
        """An underscore-separated string fails validation instead of hex decoding."""
        bogus = "0x" + "1_" * 20
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address(bogus, validate=True)
        with pytest.raises(ValueError):
            address_bytes(bogus)
        with pytest.raises(ValueError):
            validate_address(bogus)

    def test_address_bytes(self):
        """A valid address decodes to its 20 raw bytes."""
        assert address_bytes(DAI) == bytes.fromhex(DAI[2:])

    def test_derived_addresses_are_valid(self):
        """Derived addresses are deterministic and well formed."""
        assert derive_address("a", "b") == derive_address("a", "b")
        assert is_valid_address(derive_address("a", "b"))
