"""AMM (Automated Market Maker) math and reference deployment."""

from debtswap.amm.base import PairReader, ReserveSource
from debtswap.amm.factory import PairSnapshot, StaticReserveSource, UniswapV2Factory
from debtswap.amm.pair import UniswapV2Pair
from debtswap.amm.uniswap_v2 import UniswapV2, pair_for, sort_tokens, uniswap_v2

__all__ = [
    # Interfaces
    "PairReader",
    "ReserveSource",
    # UniswapV2
    "UniswapV2",
    "uniswap_v2",
    "pair_for",
    "sort_tokens",
    # Deployment
    "UniswapV2Factory",
    "UniswapV2Pair",
    "StaticReserveSource",
    "PairSnapshot",
]
