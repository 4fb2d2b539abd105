"""Tests for client-side quoting."""

import pytest

from debtswap.amm.factory import StaticReserveSource
from debtswap.pricing.quote import DEFAULT_SLIPPAGE_BPS, maximum_amount_in, quote_exact_output
from tests.helpers.constants import DAI, UNISWAP_V2_FACTORY, USDC


class TestMaximumAmountIn:
    """Tests for the slippage ceiling."""

    def test_one_percent(self):
        """100 bps widens by exactly 1%."""
        assert maximum_amount_in(1_000_000, 100) == 1_010_000

    def test_rounds_down(self):
        """The ceiling is floored."""
        assert maximum_amount_in(999, 100) == 1008  # 1008.99

    def test_zero_tolerance(self):
        """Zero tolerance leaves the amount unchanged."""
        assert maximum_amount_in(12345, 0) == 12345

    def test_negative_tolerance_rejected(self):
        """Negative tolerance is meaningless."""
        with pytest.raises(ValueError):
            maximum_amount_in(100, -1)


class TestQuoteExactOutput:
    """Tests for quoting a route."""

    def test_quote(self, pricer):
        """A quote carries the priced path and the widened ceiling."""
        source = StaticReserveSource(
            UNISWAP_V2_FACTORY, [(USDC, DAI, 1_000_000 * 10**6, 1_000_000 * 10**18)]
        )
        quote = quote_exact_output(pricer, source, [USDC, DAI], 1_000 * 10**18)

        assert quote.amount_out == 1_000 * 10**18
        assert quote.slippage_bps == DEFAULT_SLIPPAGE_BPS
        assert quote.max_amount_in == maximum_amount_in(quote.amount_in, DEFAULT_SLIPPAGE_BPS)
        assert quote.amount_in < quote.max_amount_in
