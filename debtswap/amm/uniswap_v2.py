"""UniswapV2 constant-product math and pair address derivation.

UniswapV2 uses the constant product formula: x * y = k
with a 0.3% fee taken from the input amount.
"""

from __future__ import annotations

from eth_utils import keccak

from debtswap.constants import (
    UNISWAP_V2_FEE_DENOMINATOR,
    UNISWAP_V2_FEE_NUMERATOR,
    UNISWAP_V2_INIT_CODE_HASH,
    ZERO_ADDRESS,
)
from debtswap.errors import (
    IdenticalAddresses,
    InsufficientAmount,
    InsufficientLiquidity,
    ZeroAddress,
)
from debtswap.models.types import address_bytes, normalize_address
from debtswap.safe_int import S


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the pair's tokens in canonical (token0, token1) order.

    Tokens are ordered by the numeric value of their address, so the same
    pair is identified regardless of argument order.

    Raises:
        IdenticalAddresses: If both tokens are the same
        ZeroAddress: If the lower token is the zero address
    """
    a = normalize_address(token_a, validate=True)
    b = normalize_address(token_b, validate=True)
    if a == b:
        raise IdenticalAddresses(f"pair of identical tokens: {a}", token=a)
    token0, token1 = (a, b) if int(a, 16) < int(b, 16) else (b, a)
    if token0 == ZERO_ADDRESS:
        raise ZeroAddress("pair token is the zero address")
    return token0, token1


def pair_for(
    factory: str,
    token_a: str,
    token_b: str,
    init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH,
) -> str:
    """Derive a pair's CREATE2 address without a factory lookup.

    address = keccak256(0xff ++ factory ++ keccak256(token0 ++ token1) ++ init_code_hash)[12:]
    """
    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(address_bytes(token0) + address_bytes(token1))
    digest = keccak(
        b"\xff" + address_bytes(factory) + salt + bytes.fromhex(init_code_hash.removeprefix("0x"))
    )
    return "0x" + digest[12:].hex()


class UniswapV2:
    """UniswapV2 AMM math.

    Formulas with fee f = fee_numerator / fee_denominator:
        amount_out = in * (den - num) * res_out / (res_in * den + in * (den - num))
        amount_in  = res_in * out * den / ((res_out - out) * (den - num)) + 1

    The +1 in amount_in rounds in the pool's favour, so replaying the
    computed input forward always yields at least the requested output.
    """

    def __init__(
        self,
        fee_numerator: int = UNISWAP_V2_FEE_NUMERATOR,
        fee_denominator: int = UNISWAP_V2_FEE_DENOMINATOR,
    ) -> None:
        if not 0 <= fee_numerator < fee_denominator:
            raise ValueError(f"invalid fee {fee_numerator}/{fee_denominator}")
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator

    @property
    def fee_complement(self) -> int:
        """Share of the input that reaches the pool (997 for 0.3%)."""
        return self.fee_denominator - self.fee_numerator

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using constant product formula.

        Raises:
            InsufficientAmount: If amount_in is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_in <= 0:
            raise InsufficientAmount("amount_in must be positive")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                "pool has no reserves", reserve_in=reserve_in, reserve_out=reserve_out
            )

        amount_in_with_fee = S(amount_in) * self.fee_complement
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * self.fee_denominator + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate required input for desired output.

        Raises:
            InsufficientAmount: If amount_out is zero
            InsufficientLiquidity: If a reserve is zero or amount_out >= reserve_out
        """
        if amount_out <= 0:
            raise InsufficientAmount("amount_out must be positive")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                "pool has no reserves", reserve_in=reserve_in, reserve_out=reserve_out
            )
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"requested output {amount_out} >= reserve {reserve_out}",
                amount_out=amount_out,
                reserve_out=reserve_out,
            )

        numerator = S(reserve_in) * S(amount_out) * self.fee_denominator
        denominator = (S(reserve_out) - S(amount_out)) * self.fee_complement

        return ((numerator // denominator) + 1).value


# Singleton instance with the standard 0.3% fee
uniswap_v2 = UniswapV2()


__all__ = ["UniswapV2", "pair_for", "sort_tokens", "uniswap_v2"]
