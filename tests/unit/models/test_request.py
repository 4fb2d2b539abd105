"""Tests for swap request validation."""

import pytest
from pydantic import ValidationError

from debtswap.constants import MAX_UINT256
from debtswap.errors import InvalidSwapRequest
from debtswap.models.request import InterestRateMode, SwapRequest, parse_swap_request
from tests.helpers import BORROWER, DAI, USDC, WETH, make_request
from tests.helpers.constants import UNISWAP_V2_FACTORY


def _camel_payload(**overrides):
    data = {
        "route": [USDC, DAI],
        "rateModes": [1],
        "desiredRepayAmount": "1000000000000000000000",
        "maxSourceAmount": "1010000000",
        "existingDebtAsset": DAI,
        "existingRateMode": 2,
        "ammFactory": UNISWAP_V2_FACTORY,
    }
    data.update(overrides)
    return data


class TestSwapRequestParsing:
    """Tests for building requests from wire data."""

    def test_camel_case_aliases(self):
        """Requests parse from camelCase JSON with decimal-string amounts."""
        request = parse_swap_request(_camel_payload())

        assert request.route == [USDC, DAI]
        assert request.rate_modes == [InterestRateMode.STABLE]
        assert request.desired_repay_amount == 1_000 * 10**18
        assert request.max_source_amount == 1_010 * 10**6
        assert request.existing_rate_mode == InterestRateMode.VARIABLE
        assert request.on_behalf_of is None
        assert request.referral_code == 0

    def test_addresses_normalized(self):
        """Mixed-case addresses are stored lowercase."""
        request = parse_swap_request(
            _camel_payload(route=["0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", DAI])
        )
        assert request.source_asset == USDC

    def test_invalid_data_wrapped(self):
        """Validation failures surface as InvalidSwapRequest."""
        with pytest.raises(InvalidSwapRequest) as exc_info:
            parse_swap_request(_camel_payload(route=[DAI]))
        assert exc_info.value.kind == "invalid_swap_request"
        assert exc_info.value.context["errors"]

    def test_requests_are_immutable(self):
        """A request cannot be changed after validation."""
        request = make_request()
        with pytest.raises(ValidationError):
            request.desired_repay_amount = 1


class TestSwapRequestShape:
    """Tests for cross-field validation."""

    def test_route_must_end_at_debt_asset(self):
        """The route's last token is the asset being repaid."""
        with pytest.raises(ValidationError, match="existing debt asset"):
            make_request(existing_debt_asset=WETH)

    def test_consecutive_duplicate_rejected(self):
        """A hop from a token to itself is meaningless."""
        with pytest.raises(ValidationError, match="itself"):
            make_request(route=[USDC, USDC, DAI])

    def test_one_rate_mode_per_flash_asset(self):
        """Exactly one new rate mode for the single flash-sourced asset."""
        with pytest.raises(ValidationError, match="rate mode"):
            make_request(rate_modes=[1, 2])

    def test_none_rate_mode_rejected(self):
        """New debt must be stable or variable."""
        with pytest.raises(ValidationError):
            make_request(new_rate_mode=InterestRateMode.NONE)

    def test_none_existing_rate_mode_rejected(self):
        """Existing debt must be stable or variable."""
        with pytest.raises(ValidationError):
            make_request(existing_rate_mode=InterestRateMode.NONE)

    def test_zero_repay_amount_rejected(self):
        """Repaying nothing is not a swap."""
        with pytest.raises(ValidationError):
            make_request(desired_repay_amount=0)

    def test_amount_above_uint256_rejected(self):
        """Amounts must fit in uint256."""
        with pytest.raises(ValidationError):
            make_request(max_source_amount=MAX_UINT256 + 1)

    def test_referral_code_is_uint16(self):
        """Referral codes must fit in 16 bits."""
        with pytest.raises(ValidationError):
            make_request(referral_code=2**16)


class TestSwapRequestProperties:
    """Tests for derived request fields."""

    def test_sentinel(self):
        """MAX_UINT256 asks for the full balance."""
        assert make_request(desired_repay_amount=MAX_UINT256).repays_full_balance
        assert not make_request().repays_full_balance

    def test_multi_hop_fields(self):
        """Source asset and flash assets come from the head of the route."""
        request = make_request(route=[USDC, WETH, DAI])
        assert request.source_asset == USDC
        assert request.flash_assets == [USDC]
        assert request.new_rate_mode == InterestRateMode.STABLE

    def test_for_borrower_fills_default(self):
        """An unset borrower defaults to the given address."""
        request = make_request().for_borrower(BORROWER)
        assert request.on_behalf_of == BORROWER

    def test_for_borrower_keeps_explicit(self):
        """An explicit borrower is never overwritten."""
        request = make_request(on_behalf_of=BORROWER)
        assert request.for_borrower(USDC) is request

    def test_interest_rate_mode_alias(self):
        """RateMode values match the lending pool's numbering."""
        assert SwapRequest.model_fields["rate_modes"].alias == "rateModes"
        assert [int(m) for m in InterestRateMode] == [0, 1, 2]
