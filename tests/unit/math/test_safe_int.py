"""Tests for SafeInt uint256-checked arithmetic."""

import pytest

from debtswap.models.types import UINT256_MAX
from debtswap.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_rejected(self):
        """Negative values are not uint256."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_max_rejected(self):
        """Values above 2**256 - 1 are not uint256."""
        assert SafeInt(UINT256_MAX).value == UINT256_MAX
        with pytest.raises(Uint256Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_invalid_type_rejected(self):
        """SafeInt rejects non-integers, including bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_sub_mul(self):
        """Operators mix with plain ints on either side."""
        assert (S(5) + 3).value == 8
        assert (3 + S(5)).value == 8
        assert (S(5) - 3).value == 2
        assert (S(5) * 3).value == 15
        assert (3 * S(5)).value == 15

    def test_underflow(self):
        """Subtraction below zero raises."""
        with pytest.raises(Underflow):
            S(3) - 5
        with pytest.raises(Underflow):
            3 - S(5)

    def test_overflow(self):
        """Multiplication beyond uint256 raises."""
        with pytest.raises(Uint256Overflow):
            S(2**200) * 2**100

    def test_floordiv(self):
        """Division floors and rejects zero divisors."""
        assert (S(7) // 2).value == 3
        with pytest.raises(DivisionByZero):
            S(7) // 0

    def test_mul_div(self):
        """mul_div floors the scaled value."""
        assert S(1_000).mul_div(9, 10_000).value == 0
        assert S(1_000_000).mul_div(10_100, 10_000).value == 1_010_000

    def test_errors_share_base(self):
        """All checked-math failures are SafeIntErrors and ArithmeticErrors."""
        for err in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(err, SafeIntError)
            assert issubclass(err, ArithmeticError)

    def test_comparisons(self):
        """Comparisons work against SafeInt and int."""
        assert S(3) < 4
        assert S(3) <= S(3)
        assert S(5) > S(4)
        assert S(5) >= 5
        assert S(5) == 5
        assert not S(0)
        assert SafeInt.zero() == 0
