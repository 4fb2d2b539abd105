"""Type definitions for the pricing module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PricedPath:
    """Per-hop amounts along a route.

    ``amounts[i]`` is the amount of ``route[i]`` flowing into hop i (and out
    of hop i-1). ``amounts[0]`` is what must be sourced up front and
    ``amounts[-1]`` what arrives at the end.
    """

    route: tuple[str, ...]
    amounts: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.route) != len(self.amounts):
            raise ValueError(
                f"route has {len(self.route)} tokens but {len(self.amounts)} amounts"
            )

    @property
    def amount_in(self) -> int:
        return self.amounts[0]

    @property
    def amount_out(self) -> int:
        return self.amounts[-1]

    @property
    def hop_count(self) -> int:
        return len(self.route) - 1

    @property
    def is_multihop(self) -> bool:
        return len(self.route) > 2


__all__ = ["PricedPath"]
