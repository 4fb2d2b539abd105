"""Constant-product pair backed by the ledger."""

from __future__ import annotations

import structlog

from debtswap.errors import InsufficientAmount, InsufficientLiquidity, InvariantViolation
from debtswap.ledger import Ledger
from debtswap.models.types import normalize_address
from debtswap.safe_int import S

logger = structlog.get_logger()

_RESERVE0 = "reserve0"
_RESERVE1 = "reserve1"


class UniswapV2Pair:
    """A UniswapV2-style pair.

    Token balances live in the ledger under the pair's address; the last
    synced reserves live in ledger storage so that a rolled-back attempt
    also rolls back the pair's price.
    """

    def __init__(
        self,
        address: str,
        token0: str,
        token1: str,
        ledger: Ledger,
        fee_numerator: int = 3,
        fee_denominator: int = 1000,
    ) -> None:
        self.address = normalize_address(address)
        self._token0 = normalize_address(token0)
        self._token1 = normalize_address(token1)
        self.ledger = ledger
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator

    @property
    def token0(self) -> str:
        return self._token0

    @property
    def token1(self) -> str:
        return self._token1

    def __repr__(self) -> str:
        return f"UniswapV2Pair({self.address}, {self._token0}/{self._token1})"

    def get_reserves(self) -> tuple[int, int]:
        return (
            self.ledger.load(self.address, _RESERVE0),
            self.ledger.load(self.address, _RESERVE1),
        )

    def sync(self) -> None:
        """Set reserves to the pair's current token balances."""
        self._update(
            self.ledger.balance_of(self._token0, self.address),
            self.ledger.balance_of(self._token1, self.address),
        )

    def add_liquidity(self, provider: str, amount0: int, amount1: int) -> None:
        """Move tokens from provider into the pair and sync reserves.

        No LP shares are minted; pairs here only serve as swap venues.
        """
        self.ledger.transfer(self._token0, provider, self.address, amount0)
        self.ledger.transfer(self._token1, provider, self.address, amount1)
        self.sync()

    def swap(self, amount0_out: int, amount1_out: int, to: str) -> None:
        """Send out the requested amounts, having been paid beforehand.

        The caller must transfer the input tokens to the pair before calling.
        The swap succeeds only if the fee-adjusted product of balances does
        not fall below the product of the previous reserves.

        Raises:
            InsufficientAmount: If both outputs are zero or no input arrived
            InsufficientLiquidity: If an output reaches its reserve
            InvariantViolation: If the payment does not cover the output
        """
        if amount0_out <= 0 and amount1_out <= 0:
            raise InsufficientAmount("swap needs a positive output amount")
        reserve0, reserve1 = self.get_reserves()
        if amount0_out >= reserve0 or amount1_out >= reserve1:
            raise InsufficientLiquidity(
                "swap output exceeds reserves",
                pair=self.address,
                reserve0=reserve0,
                reserve1=reserve1,
            )

        to = normalize_address(to)
        if to in (self._token0, self._token1):
            raise ValueError(f"invalid swap recipient {to}")
        if amount0_out > 0:
            self.ledger.transfer(self._token0, self.address, to, amount0_out)
        if amount1_out > 0:
            self.ledger.transfer(self._token1, self.address, to, amount1_out)

        balance0 = self.ledger.balance_of(self._token0, self.address)
        balance1 = self.ledger.balance_of(self._token1, self.address)
        amount0_in = max(balance0 - (reserve0 - amount0_out), 0)
        amount1_in = max(balance1 - (reserve1 - amount1_out), 0)
        if amount0_in == 0 and amount1_in == 0:
            raise InsufficientAmount("swap received no input", pair=self.address)

        den = self.fee_denominator
        adjusted0 = S(balance0) * den - S(amount0_in) * self.fee_numerator
        adjusted1 = S(balance1) * den - S(amount1_in) * self.fee_numerator
        if adjusted0 * adjusted1 < S(reserve0) * S(reserve1) * (den * den):
            raise InvariantViolation(
                "swap would decrease k",
                pair=self.address,
                amount0_in=amount0_in,
                amount1_in=amount1_in,
            )

        self._update(balance0, balance1)
        logger.debug(
            "pair_swap",
            pair=self.address,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
        )

    def _update(self, balance0: int, balance1: int) -> None:
        self.ledger.store(self.address, _RESERVE0, balance0)
        self.ledger.store(self.address, _RESERVE1, balance1)


__all__ = ["UniswapV2Pair"]
