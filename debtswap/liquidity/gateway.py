"""Interface the orchestrator uses to execute a priced route."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class LiquidityGateway(Protocol):
    """Executes an exact-output multi-hop swap."""

    @property
    def address(self) -> str:
        """Address that must be approved to pull the first-hop input."""
        ...

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
        """Deliver exactly amount_out of route[-1] to recipient.

        Args:
            route: Token path, input first
            per_hop_inputs: Amounts priced ahead of time (amounts[-1] == amount_out)
            amount_out: Exact final output
            amount_in_max: Ceiling on the first-hop input pulled from caller
            recipient: Receiver of the final output
            caller: Account paying the first-hop input

        Returns:
            The per-hop amounts actually executed

        Raises:
            ExcessiveInputAmount: If the execution-time input exceeds amount_in_max
        """
        ...
