"""Liquidity gateways: executing priced routes."""

from debtswap.liquidity.directory import AmmDirectory, AmmVenue
from debtswap.liquidity.gateway import LiquidityGateway
from debtswap.liquidity.v2 import V2LiquidityGateway

__all__ = ["AmmDirectory", "AmmVenue", "LiquidityGateway", "V2LiquidityGateway"]
