"""Exact-output pricing across a constant-product route.

Two pure passes over a caller-supplied route:
- ``amounts_in`` walks backward from the desired final output and yields
  the input each hop needs; the first element is what must be sourced.
- ``amounts_out`` walks forward from an input and yields each hop's output.

Reserves are read from the pair at the CREATE2-derived address on every
call; nothing is cached.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from debtswap.amm.base import ReserveSource
from debtswap.amm.uniswap_v2 import UniswapV2, pair_for, sort_tokens
from debtswap.config import DEFAULT_CONFIG, DebtSwapConfig
from debtswap.errors import InsufficientLiquidity, InvalidSwapRequest
from debtswap.models.types import normalize_address
from debtswap.pricing.types import PricedPath

logger = structlog.get_logger()


class PathPricer:
    """Prices multi-hop routes against UniswapV2-style pairs."""

    def __init__(self, config: DebtSwapConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.amm = UniswapV2(config.fee_numerator, config.fee_denominator)

    @staticmethod
    def canonical_order(token_a: str, token_b: str) -> tuple[str, str]:
        """Return the pair's tokens in (token0, token1) order."""
        return sort_tokens(token_a, token_b)

    def pair_address(self, factory: str, token_a: str, token_b: str) -> str:
        """Derive the pair address from the factory and the canonical pair."""
        return pair_for(factory, token_a, token_b, self.config.init_code_hash)

    def reserves(self, factory: ReserveSource, token_a: str, token_b: str) -> tuple[int, int]:
        """Read a pair's reserves ordered as (reserve of token_a, reserve of token_b).

        Raises:
            InsufficientLiquidity: If no pair is deployed for the tokens
        """
        token0, _ = sort_tokens(token_a, token_b)
        address = self.pair_address(factory.address, token_a, token_b)
        pair = factory.pair_at(address)
        if pair is None:
            raise InsufficientLiquidity(
                f"no pair for {token_a}/{token_b}",
                factory=factory.address,
                pair=address,
            )
        reserve0, reserve1 = pair.get_reserves()
        if normalize_address(token_a) == token0:
            return reserve0, reserve1
        return reserve1, reserve0

    def amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input required to take amount_out out of a single pair."""
        return self.amm.get_amount_in(amount_out, reserve_in, reserve_out)

    def amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output received for amount_in into a single pair."""
        return self.amm.get_amount_out(amount_in, reserve_in, reserve_out)

    def amounts_in(
        self, factory: ReserveSource, amount_out: int, route: Sequence[str]
    ) -> PricedPath:
        """Walk the route backward from the final desired output.

        Raises:
            InvalidSwapRequest: If the route has fewer than two tokens
            InsufficientLiquidity: If any hop cannot supply its output
        """
        route = _check_route(route)
        amounts = [0] * len(route)
        amounts[-1] = amount_out
        for i in range(len(route) - 1, 0, -1):
            reserve_in, reserve_out = self.reserves(factory, route[i - 1], route[i])
            try:
                amounts[i - 1] = self.amount_in(amounts[i], reserve_in, reserve_out)
            except InsufficientLiquidity as err:
                raise InsufficientLiquidity(
                    f"hop {i - 1} ({route[i - 1]} -> {route[i]}): {err}",
                    hop=i - 1,
                    amount_out=amounts[i],
                    reserve_out=reserve_out,
                ) from err

        logger.debug(
            "priced_exact_output",
            route=route,
            amount_out=amount_out,
            amount_in=amounts[0],
        )
        return PricedPath(route=tuple(route), amounts=tuple(amounts))

    def amounts_out(
        self, factory: ReserveSource, amount_in: int, route: Sequence[str]
    ) -> PricedPath:
        """Walk the route forward from an input amount.

        Raises:
            InvalidSwapRequest: If the route has fewer than two tokens
            InsufficientLiquidity: If a hop's pair is missing or empty
        """
        route = _check_route(route)
        amounts = [amount_in]
        for i in range(len(route) - 1):
            reserve_in, reserve_out = self.reserves(factory, route[i], route[i + 1])
            amounts.append(self.amount_out(amounts[i], reserve_in, reserve_out))
        return PricedPath(route=tuple(route), amounts=tuple(amounts))


def _check_route(route: Sequence[str]) -> list[str]:
    if len(route) < 2:
        raise InvalidSwapRequest(f"route needs at least 2 tokens, got {len(route)}")
    return [normalize_address(token, validate=True) for token in route]


__all__ = ["PathPricer"]
