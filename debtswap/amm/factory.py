"""Pair factories: a ledger-backed one and a static reserve snapshot."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from debtswap.amm.pair import UniswapV2Pair
from debtswap.amm.uniswap_v2 import pair_for, sort_tokens
from debtswap.constants import (
    UNISWAP_V2_FEE_DENOMINATOR,
    UNISWAP_V2_FEE_NUMERATOR,
    UNISWAP_V2_INIT_CODE_HASH,
)
from debtswap.ledger import Ledger
from debtswap.models.types import normalize_address

logger = structlog.get_logger()


class UniswapV2Factory:
    """Creates pairs at their CREATE2 addresses on a ledger."""

    def __init__(
        self,
        address: str,
        ledger: Ledger,
        init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH,
        fee_numerator: int = UNISWAP_V2_FEE_NUMERATOR,
        fee_denominator: int = UNISWAP_V2_FEE_DENOMINATOR,
    ) -> None:
        self._address = normalize_address(address, validate=True)
        self.ledger = ledger
        self.init_code_hash = init_code_hash
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator
        self._pairs: dict[str, UniswapV2Pair] = {}

    @property
    def address(self) -> str:
        return self._address

    def create_pair(self, token_a: str, token_b: str) -> UniswapV2Pair:
        """Deploy the pair for two tokens.

        Raises:
            ValueError: If the pair already exists
        """
        token0, token1 = sort_tokens(token_a, token_b)
        address = pair_for(self._address, token0, token1, self.init_code_hash)
        if address in self._pairs:
            raise ValueError(f"pair exists: {token0}/{token1}")
        pair = UniswapV2Pair(
            address,
            token0,
            token1,
            self.ledger,
            fee_numerator=self.fee_numerator,
            fee_denominator=self.fee_denominator,
        )
        self._pairs[address] = pair
        logger.debug(
            "pair_created", factory=self._address, pair=address, token0=token0, token1=token1
        )
        return pair

    def get_pair(self, token_a: str, token_b: str) -> UniswapV2Pair | None:
        return self._pairs.get(pair_for(self._address, token_a, token_b, self.init_code_hash))

    def pair_at(self, pair_address: str) -> UniswapV2Pair | None:
        return self._pairs.get(normalize_address(pair_address))

    @property
    def all_pairs(self) -> list[UniswapV2Pair]:
        return list(self._pairs.values())


@dataclass(frozen=True)
class PairSnapshot:
    """Reserves of one pair at a point in time."""

    token0: str
    token1: str
    reserve0: int
    reserve1: int

    def get_reserves(self) -> tuple[int, int]:
        return self.reserve0, self.reserve1


class StaticReserveSource:
    """A factory view built from reserves supplied by a caller.

    Used to quote routes off-chain from a reserve snapshot.
    """

    def __init__(
        self,
        address: str,
        pools: list[tuple[str, str, int, int]],
        init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH,
    ) -> None:
        """Build the source.

        Args:
            address: Factory address the pairs belong to
            pools: (token_a, token_b, reserve_a, reserve_b) tuples in any order
            init_code_hash: Pair creation code hash for address derivation
        """
        self._address = normalize_address(address, validate=True)
        self._pairs: dict[str, PairSnapshot] = {}
        for token_a, token_b, reserve_a, reserve_b in pools:
            token0, token1 = sort_tokens(token_a, token_b)
            if token0 == normalize_address(token_a):
                reserve0, reserve1 = reserve_a, reserve_b
            else:
                reserve0, reserve1 = reserve_b, reserve_a
            pair_address = pair_for(self._address, token0, token1, init_code_hash)
            self._pairs[pair_address] = PairSnapshot(token0, token1, reserve0, reserve1)

    @property
    def address(self) -> str:
        return self._address

    def pair_at(self, pair_address: str) -> PairSnapshot | None:
        return self._pairs.get(normalize_address(pair_address))


__all__ = ["PairSnapshot", "StaticReserveSource", "UniswapV2Factory"]
