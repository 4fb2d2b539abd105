"""Reference lending pool modelled on Aave v2.

Supports what a debt swap touches: deposits that provide liquidity,
stable and variable debt with credit delegation, repayment and flash loans
with a premium. Collateral and health-factor bookkeeping are not modelled.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from debtswap.constants import BPS_DENOMINATOR, FLASHLOAN_PREMIUM_TOTAL_BPS
from debtswap.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    LendingPoolError,
    SettlementShortfall,
)
from debtswap.ledger import Ledger
from debtswap.lending.gateway import FlashLoanReceiver
from debtswap.models.request import InterestRateMode
from debtswap.models.types import UINT256_MAX, derive_address, normalize_address
from debtswap.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReserveTokens:
    """Token addresses of one lending reserve."""

    asset: str
    a_token: str
    stable_debt_token: str
    variable_debt_token: str

    def debt_token(self, rate_mode: InterestRateMode) -> str:
        if rate_mode == InterestRateMode.STABLE:
            return self.stable_debt_token
        if rate_mode == InterestRateMode.VARIABLE:
            return self.variable_debt_token
        raise LendingPoolError(f"invalid interest rate mode: {rate_mode!r}")


class InMemoryLendingPool:
    """Lending pool whose balances live on a ledger.

    Underlying liquidity is held at each reserve's aToken address. Debt is
    represented by debt-token balances, so a borrower's outstanding debt is
    simply their debt-token balance.
    """

    def __init__(
        self,
        address: str,
        ledger: Ledger,
        flash_premium_bps: int = FLASHLOAN_PREMIUM_TOTAL_BPS,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.ledger = ledger
        self.flash_premium_bps = flash_premium_bps
        self._reserves: dict[str, ReserveTokens] = {}

    # --- Reserve setup ---

    def init_reserve(self, asset: str) -> ReserveTokens:
        """List an asset, deriving its aToken and debt token addresses."""
        asset = normalize_address(asset, validate=True)
        if asset in self._reserves:
            raise LendingPoolError(f"reserve already initialized: {asset}")
        tokens = ReserveTokens(
            asset=asset,
            a_token=derive_address(self.address, asset, "aToken"),
            stable_debt_token=derive_address(self.address, asset, "stableDebtToken"),
            variable_debt_token=derive_address(self.address, asset, "variableDebtToken"),
        )
        self._reserves[asset] = tokens
        return tokens

    def reserve(self, asset: str) -> ReserveTokens:
        try:
            return self._reserves[normalize_address(asset)]
        except KeyError:
            raise LendingPoolError(f"reserve not initialized: {asset}") from None

    def available_liquidity(self, asset: str) -> int:
        tokens = self.reserve(asset)
        return self.ledger.balance_of(tokens.asset, tokens.a_token)

    def premium_for(self, amount: int) -> int:
        """Flash loan premium owed on amount."""
        return S(amount).mul_div(self.flash_premium_bps, BPS_DENOMINATOR).value

    # --- Deposits ---

    def deposit(self, asset: str, amount: int, on_behalf_of: str, *, caller: str) -> None:
        """Supply liquidity; caller's tokens move to the aToken address."""
        tokens = self.reserve(asset)
        if amount <= 0:
            raise LendingPoolError("deposit amount must be positive")
        self.ledger.transfer(tokens.asset, caller, tokens.a_token, amount)
        self.ledger.mint(tokens.a_token, on_behalf_of, amount)
        logger.debug(
            "lending_deposit", asset=tokens.asset, amount=amount, on_behalf_of=on_behalf_of
        )

    # --- Credit delegation ---

    def approve_delegation(
        self,
        asset: str,
        rate_mode: InterestRateMode,
        delegatee: str,
        amount: int,
        *,
        caller: str,
    ) -> None:
        """Let delegatee borrow up to amount in caller's name."""
        debt_token = self.reserve(asset).debt_token(rate_mode)
        self.ledger.approve_delegation(debt_token, caller, delegatee, amount)
        logger.info(
            "borrow_allowance_delegated",
            asset=normalize_address(asset),
            rate_mode=InterestRateMode(rate_mode).name,
            delegator=normalize_address(caller),
            delegatee=normalize_address(delegatee),
            amount=amount,
        )

    def delegated_allowance(
        self, asset: str, rate_mode: InterestRateMode, on_behalf_of: str, spender: str
    ) -> int:
        debt_token = self.reserve(asset).debt_token(rate_mode)
        return self.ledger.borrow_allowance(debt_token, on_behalf_of, spender)

    # --- Debt ---

    def outstanding_balance(
        self, asset: str, rate_mode: InterestRateMode, on_behalf_of: str
    ) -> int:
        debt_token = self.reserve(asset).debt_token(rate_mode)
        return self.ledger.balance_of(debt_token, on_behalf_of)

    def accrue_interest(
        self, asset: str, rate_mode: InterestRateMode, on_behalf_of: str, amount: int
    ) -> None:
        """Grow a borrower's debt, as time passing would."""
        debt_token = self.reserve(asset).debt_token(rate_mode)
        self.ledger.mint(debt_token, on_behalf_of, amount)

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
        tokens = self.reserve(asset)
        if amount <= 0:
            raise LendingPoolError("borrow amount must be positive")
        available = self.available_liquidity(asset)
        if amount > available:
            raise LendingPoolError(
                f"borrow {amount} exceeds available liquidity {available}",
                asset=tokens.asset,
            )

        with self.ledger.transaction():
            self._open_debt(tokens, amount, rate_mode, on_behalf_of, caller)
            self.ledger.transfer(tokens.asset, tokens.a_token, caller, amount)

        logger.info(
            "lending_borrow",
            asset=tokens.asset,
            amount=amount,
            rate_mode=InterestRateMode(rate_mode).name,
            on_behalf_of=normalize_address(on_behalf_of),
            caller=normalize_address(caller),
            referral_code=referral_code,
        )

    def repay(
        self,
        asset: str,
        amount: int,
        rate_mode: InterestRateMode,
        on_behalf_of: str,
        *,
        caller: str,
    ) -> int:
        tokens = self.reserve(asset)
        debt_token = tokens.debt_token(rate_mode)
        debt = self.ledger.balance_of(debt_token, on_behalf_of)
        if debt == 0:
            raise LendingPoolError(
                "no debt of selected type",
                asset=tokens.asset,
                rate_mode=InterestRateMode(rate_mode).name,
            )
        if amount == 0:
            raise LendingPoolError("repay amount must be positive")
        if amount == UINT256_MAX and normalize_address(caller) != normalize_address(on_behalf_of):
            raise LendingPoolError("no explicit amount to repay on behalf")

        payback = min(amount, debt)
        with self.ledger.transaction():
            self.ledger.transfer_from(tokens.asset, self.address, caller, tokens.a_token, payback)
            self.ledger.burn(debt_token, on_behalf_of, payback)

        logger.info(
            "lending_repay",
            asset=tokens.asset,
            requested=amount,
            repaid=payback,
            remaining_debt=debt - payback,
            on_behalf_of=normalize_address(on_behalf_of),
        )
        return payback

    # --- Flash loans ---

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
        if not (len(assets) == len(amounts) == len(modes)) or not assets:
            raise LendingPoolError("inconsistent flash loan arguments")

        premiums = [self.premium_for(amount) for amount in amounts]
        reserves = [self.reserve(asset) for asset in assets]
        receiver_address = normalize_address(receiver.address)

        with self.ledger.transaction():
            for tokens, amount in zip(reserves, amounts, strict=True):
                self.ledger.transfer(tokens.asset, tokens.a_token, receiver_address, amount)

            logger.info(
                "flash_loan_started",
                receiver=receiver_address,
                assets=[t.asset for t in reserves],
                amounts=list(amounts),
                premiums=premiums,
            )
            ok = receiver.execute_operation(
                [t.asset for t in reserves],
                list(amounts),
                premiums,
                normalize_address(caller),
                params,
                caller=self.address,
            )
            if not ok:
                raise SettlementShortfall("invalid flash loan executor return")

            for tokens, amount, premium, mode in zip(
                reserves, amounts, premiums, modes, strict=True
            ):
                if InterestRateMode(mode) == InterestRateMode.NONE:
                    self._collect(tokens, receiver_address, amount + premium)
                else:
                    # receiver keeps the principal; it becomes on_behalf_of's debt
                    self._open_debt(tokens, amount, mode, on_behalf_of, caller)

        logger.info("flash_loan_settled", receiver=receiver_address, premiums=premiums)

    def _open_debt(
        self,
        tokens: ReserveTokens,
        amount: int,
        rate_mode: InterestRateMode,
        on_behalf_of: str,
        delegatee: str,
    ) -> None:
        """Mint debt to on_behalf_of, debiting delegatee's allowance if they differ.

        The allowance check and debit happen in a single ledger call, so two
        borrows can never both pass the check against the same allowance.
        """
        debt_token = tokens.debt_token(rate_mode)
        if normalize_address(delegatee) != normalize_address(on_behalf_of):
            self.ledger.consume_borrow_allowance(debt_token, on_behalf_of, delegatee, amount)
        self.ledger.mint(debt_token, on_behalf_of, amount)

    def _collect(self, tokens: ReserveTokens, receiver: str, owed: int) -> None:
        try:
            self.ledger.transfer_from(tokens.asset, self.address, receiver, tokens.a_token, owed)
        except (InsufficientAllowance, InsufficientBalance) as err:
            raise SettlementShortfall(
                f"could not collect {owed} of {tokens.asset}: {err}",
                asset=tokens.asset,
                owed=owed,
                receiver=receiver,
            ) from err


__all__ = ["InMemoryLendingPool", "ReserveTokens"]
