"""Interfaces between the orchestrator and the lending protocol."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from debtswap.models.request import InterestRateMode


@runtime_checkable
class FlashLoanReceiver(Protocol):
    """Contract that receives flash liquidity and is called back."""

    @property
    def address(self) -> str: ...

    def execute_operation(
        self,
        assets: Sequence[str],
        amounts: Sequence[int],
        premiums: Sequence[int],
        initiator: str,
        params: bytes,
        *,
        caller: str,
    ) -> bool:
        """Use the flash liquidity; leave amount + premium collectable.

        Args:
            assets: Flashed assets
            amounts: Flashed principal per asset
            premiums: Fee owed per asset on top of the principal
            initiator: Account that requested the flash loan
            params: Opaque payload passed through from the request
            caller: Account invoking the callback (must be the lending pool)

        Returns:
            True if the pool may now collect amount + premium
        """
        ...


@runtime_checkable
class LendingGateway(Protocol):
    """Lending pool operations consumed by the orchestrator.

    All reads are taken fresh on every call.
    """

    @property
    def address(self) -> str: ...

    def repay(
        self,
        asset: str,
        amount: int,
        rate_mode: InterestRateMode,
        on_behalf_of: str,
        *,
        caller: str,
    ) -> int:
        """Reduce on_behalf_of's debt, capped at the outstanding balance.

        Returns:
            The amount actually repaid
        """
        ...

    def borrow(
        self,
        asset: str,
        amount: int,
        rate_mode: InterestRateMode,
        on_behalf_of: str,
        referral_code: int,
        *,
        caller: str,
    ) -> None:
        """Open debt for on_behalf_of and send the funds to caller.

        When caller differs from on_behalf_of, the delegated allowance is
        checked and debited in one step.

        Raises:
            InsufficientDelegation: If the delegated allowance is below amount
        """
        ...

    def flash_loan(
        self,
        receiver: FlashLoanReceiver,
        assets: Sequence[str],
        amounts: Sequence[int],
        modes: Sequence[InterestRateMode],
        on_behalf_of: str,
        params: bytes,
        referral_code: int,
        *,
        caller: str,
    ) -> None:
        """Lend uncollateralized funds to receiver for one callback.

        Raises:
            SettlementShortfall: If amount + premium cannot be collected afterward
        """
        ...

    def outstanding_balance(
        self, asset: str, rate_mode: InterestRateMode, on_behalf_of: str
    ) -> int: ...

    def delegated_allowance(
        self, asset: str, rate_mode: InterestRateMode, on_behalf_of: str, spender: str
    ) -> int: ...


__all__ = ["FlashLoanReceiver", "LendingGateway"]
