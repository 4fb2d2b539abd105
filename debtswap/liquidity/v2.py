"""Liquidity gateway executing routes directly against UniswapV2 pairs."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from debtswap.amm.factory import UniswapV2Factory
from debtswap.amm.uniswap_v2 import sort_tokens
from debtswap.errors import ExcessiveInputAmount, InvalidSwapRequest
from debtswap.ledger import Ledger
from debtswap.models.types import derive_address, normalize_address
from debtswap.pricing.path_pricer import PathPricer

logger = structlog.get_logger()


class V2LiquidityGateway:
    """Swaps through the pairs of one factory.

    The gateway executes the per-hop amounts the caller priced. Before moving
    any tokens it re-prices the route from live reserves, so a price that
    moved against the caller is caught here rather than by the pairs'
    invariant check.
    """

    def __init__(self, factory: UniswapV2Factory, ledger: Ledger, pricer: PathPricer) -> None:
        self.factory = factory
        self.ledger = ledger
        self.pricer = pricer
        self.address = derive_address("v2-liquidity-gateway", factory.address)

    def swap_exact_out(
        self,
        route: Sequence[str],
        per_hop_inputs: Sequence[int],
        amount_out: int,
        amount_in_max: int,
        recipient: str,
        *,
        caller: str,
    ) -> list[int]:
        """Pay amount_out of route[-1] to recipient, pulling per_hop_inputs[0] from caller.

        Each hop i swaps per_hop_inputs[i] for per_hop_inputs[i + 1]. If the
        route got cheaper since pricing, the pairs keep the surplus.

        Raises:
            InvalidSwapRequest: If the amounts do not describe the route
            ExcessiveInputAmount: If the priced or live input exceeds
                amount_in_max, or any hop now needs more than
                its priced input to pay its priced output
        """
        if len(per_hop_inputs) != len(route):
            raise InvalidSwapRequest(
                f"{len(per_hop_inputs)} per-hop amounts for a {len(route)}-token route"
            )
        if per_hop_inputs[-1] != amount_out:
            raise InvalidSwapRequest(
                f"priced output {per_hop_inputs[-1]} does not match amount_out {amount_out}"
            )
        if per_hop_inputs[0] > amount_in_max:
            raise ExcessiveInputAmount(
                f"priced input {per_hop_inputs[0]} exceeds maximum {amount_in_max}",
                amount_in=per_hop_inputs[0],
                amount_in_max=amount_in_max,
            )

        live = self.pricer.amounts_in(self.factory, amount_out, route)
        if live.amount_in > amount_in_max:
            raise ExcessiveInputAmount(
                f"execution-time input {live.amount_in} exceeds maximum {amount_in_max}",
                amount_in=live.amount_in,
                amount_in_max=amount_in_max,
                priced_amount_in=per_hop_inputs[0],
            )
        for hop in range(len(live.route) - 1):
            reserve_in, reserve_out = self.pricer.reserves(
                self.factory, live.route[hop], live.route[hop + 1]
            )
            needed = self.pricer.amount_in(per_hop_inputs[hop + 1], reserve_in, reserve_out)
            if needed > per_hop_inputs[hop]:
                raise ExcessiveInputAmount(
                    f"hop {hop} now needs {needed} for its priced output, "
                    f"priced input is {per_hop_inputs[hop]}",
                    hop=hop,
                    amount_in=needed,
                    priced_amount_in=per_hop_inputs[hop],
                )
        if list(live.amounts) != list(per_hop_inputs):
            logger.info(
                "route_cheaper_than_priced",
                priced=list(per_hop_inputs),
                live=list(live.amounts),
            )

        amounts = list(per_hop_inputs)
        first_pair = self.pricer.pair_address(self.factory.address, live.route[0], live.route[1])
        self.ledger.transfer_from(live.route[0], self.address, caller, first_pair, amounts[0])
        self._execute_hops(live.route, amounts, recipient)
        return amounts

    def _execute_hops(self, route: Sequence[str], amounts: Sequence[int], recipient: str) -> None:
        """Forward pass: each pair pays its output into the next pair.

        The first pair must already hold amounts[0] of route[0].
        """
        for i in range(len(route) - 1):
            token_in, token_out = route[i], route[i + 1]
            token0, _ = sort_tokens(token_in, token_out)
            amount_out = amounts[i + 1]
            amount0_out, amount1_out = (0, amount_out) if token_in == token0 else (amount_out, 0)
            if i < len(route) - 2:
                to = self.pricer.pair_address(self.factory.address, token_out, route[i + 2])
            else:
                to = normalize_address(recipient)
            pair_address = self.pricer.pair_address(self.factory.address, token_in, token_out)
            pair = self.factory.pair_at(pair_address)
            if pair is None:
                raise InvalidSwapRequest(f"no pair for {token_in}/{token_out}")
            pair.swap(amount0_out, amount1_out, to)


__all__ = ["V2LiquidityGateway"]
