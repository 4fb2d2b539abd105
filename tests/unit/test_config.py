"""Tests for configuration and the error taxonomy."""

import pytest

from debtswap.config import DEFAULT_CONFIG, DebtSwapConfig
from debtswap.errors import DebtSwapError, InsufficientDelegation, SlippageExceeded


class TestDebtSwapConfig:
    """Tests for DebtSwapConfig."""

    def test_defaults(self):
        """Defaults match UniswapV2 and the Aave v2 flash premium."""
        assert DEFAULT_CONFIG.fee_numerator == 3
        assert DEFAULT_CONFIG.fee_denominator == 1000
        assert DEFAULT_CONFIG.flash_premium_bps == 9
        assert DEFAULT_CONFIG.refund_residuals

    def test_frozen(self):
        """Configuration cannot change after construction."""
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.fee_numerator = 1  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"fee_numerator": 1000},
            {"fee_numerator": -1},
            {"flash_premium_bps": 10_000},
            {"referral_code": 2**16},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Out-of-range settings are rejected."""
        with pytest.raises(ValueError):
            DebtSwapConfig(**kwargs)


class TestErrors:
    """Tests for DebtSwapError."""

    def test_to_dict(self):
        """Errors serialize with their kind, message and context."""
        err = SlippageExceeded("too much", amount_in=5)
        assert err.to_dict() == {"error": "slippage_exceeded", "detail": "too much", "amount_in": 5}

    def test_default_message_is_kind(self):
        """An error without a message reads as its kind."""
        assert str(InsufficientDelegation()) == "insufficient_delegation"
        assert isinstance(InsufficientDelegation(), DebtSwapError)
