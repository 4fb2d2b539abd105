"""In-memory token ledger with all-or-nothing transactions.

The ledger plays the role of the chain state that surrounds a debt swap:
token balances, ERC20 allowances and credit delegation allowances. A
``transaction()`` block serializes access under a re-entrant lock and
restores the pre-block state if the block raises, which is how an attempt
that fails at any step leaves balances and debts untouched.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import structlog

from debtswap.errors import InsufficientAllowance, InsufficientBalance, InsufficientDelegation
from debtswap.models.types import UINT256_MAX, normalize_address

logger = structlog.get_logger()


@dataclass
class LedgerState:
    """Mutable ledger contents. Copied wholesale for snapshots."""

    # (token, holder) -> balance
    balances: dict[tuple[str, str], int] = field(default_factory=dict)
    # (token, owner, spender) -> allowance
    allowances: dict[tuple[str, str, str], int] = field(default_factory=dict)
    # (debt_token, delegator, delegatee) -> borrow allowance
    borrow_allowances: dict[tuple[str, str, str], int] = field(default_factory=dict)
    # token -> total supply
    total_supply: dict[str, int] = field(default_factory=dict)
    # (contract, slot) -> value; contract storage such as pair reserves
    storage: dict[tuple[str, str], int] = field(default_factory=dict)


class Ledger:
    """Token balances, allowances and delegations for one simulated chain."""

    def __init__(self) -> None:
        self._state = LedgerState()
        self._lock = threading.RLock()
        self._depth = 0

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[Ledger]:
        """Run a block atomically.

        Nested blocks behave as savepoints: an inner failure rolls back only
        the inner block unless the exception also escapes the outer one.
        """
        with self._lock:
            saved = copy.deepcopy(self._state)
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._state = saved
                logger.debug("ledger_rolled_back", depth=self._depth)
                raise
            finally:
                self._depth -= 1

    @property
    def in_transaction(self) -> bool:
        """True while any transaction block is open."""
        return self._depth > 0

    def snapshot(self) -> LedgerState:
        """Return a detached copy of the current state (for comparisons)."""
        with self._lock:
            return copy.deepcopy(self._state)

    # --- ERC20 ---

    def balance_of(self, token: str, holder: str) -> int:
        return self._state.balances.get((_n(token), _n(holder)), 0)

    def total_supply(self, token: str) -> int:
        return self._state.total_supply.get(_n(token), 0)

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Create ``amount`` of ``token`` for ``holder``."""
        _require_amount(amount)
        key = (_n(token), _n(holder))
        with self._lock:
            self._state.balances[key] = self._state.balances.get(key, 0) + amount
            self._state.total_supply[key[0]] = self._state.total_supply.get(key[0], 0) + amount

    def burn(self, token: str, holder: str, amount: int) -> None:
        """Destroy ``amount`` of ``token`` held by ``holder``.

        Raises:
            InsufficientBalance: If holder has less than amount
        """
        _require_amount(amount)
        key = (_n(token), _n(holder))
        with self._lock:
            balance = self._state.balances.get(key, 0)
            if balance < amount:
                raise InsufficientBalance(
                    f"burn {amount} exceeds balance {balance}",
                    token=key[0],
                    holder=key[1],
                )
            self._state.balances[key] = balance - amount
            self._state.total_supply[key[0]] -= amount

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move tokens from sender to recipient.

        Raises:
            InsufficientBalance: If sender has less than amount
        """
        _require_amount(amount)
        token, sender, recipient = _n(token), _n(sender), _n(recipient)
        with self._lock:
            balance = self._state.balances.get((token, sender), 0)
            if balance < amount:
                raise InsufficientBalance(
                    f"transfer {amount} exceeds balance {balance}",
                    token=token,
                    holder=sender,
                )
            self._state.balances[(token, sender)] = balance - amount
            self._state.balances[(token, recipient)] = (
                self._state.balances.get((token, recipient), 0) + amount
            )

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        """Set the ERC20 allowance of spender over owner's tokens."""
        _require_amount(amount)
        with self._lock:
            self._state.allowances[(_n(token), _n(owner), _n(spender))] = amount

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self._state.allowances.get((_n(token), _n(owner), _n(spender)), 0)

    def transfer_from(
        self, token: str, spender: str, owner: str, recipient: str, amount: int
    ) -> None:
        """Move owner's tokens on behalf of spender, debiting the allowance.

        An allowance of 2**256-1 is treated as infinite and not debited.

        Raises:
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientBalance: If owner has less than amount
        """
        _require_amount(amount)
        key = (_n(token), _n(owner), _n(spender))
        with self._lock:
            current = self._state.allowances.get(key, 0)
            if current < amount:
                raise InsufficientAllowance(
                    f"transfer_from {amount} exceeds allowance {current}",
                    token=key[0],
                    owner=key[1],
                    spender=key[2],
                )
            self.transfer(token, owner, recipient, amount)
            if current != UINT256_MAX:
                self._state.allowances[key] = current - amount

    # --- Contract storage ---

    def load(self, contract: str, slot: str) -> int:
        return self._state.storage.get((_n(contract), slot), 0)

    def store(self, contract: str, slot: str, value: int) -> None:
        _require_amount(value)
        with self._lock:
            self._state.storage[(_n(contract), slot)] = value

    # --- Credit delegation ---

    def approve_delegation(
        self, debt_token: str, delegator: str, delegatee: str, amount: int
    ) -> None:
        """Let delegatee open up to ``amount`` of debt in delegator's name."""
        _require_amount(amount)
        with self._lock:
            self._state.borrow_allowances[(_n(debt_token), _n(delegator), _n(delegatee))] = amount

    def borrow_allowance(self, debt_token: str, delegator: str, delegatee: str) -> int:
        return self._state.borrow_allowances.get((_n(debt_token), _n(delegator), _n(delegatee)), 0)

    def consume_borrow_allowance(
        self, debt_token: str, delegator: str, delegatee: str, amount: int
    ) -> int:
        """Check and debit a borrow allowance as one step.

        Returns:
            The allowance remaining after the debit

        Raises:
            InsufficientDelegation: If the allowance is below amount
        """
        _require_amount(amount)
        key = (_n(debt_token), _n(delegator), _n(delegatee))
        with self._lock:
            current = self._state.borrow_allowances.get(key, 0)
            if current < amount:
                raise InsufficientDelegation(
                    f"borrow of {amount} exceeds delegated allowance {current}",
                    debt_token=key[0],
                    delegator=key[1],
                    delegatee=key[2],
                    allowance=current,
                    requested=amount,
                )
            remaining = current - amount
            self._state.borrow_allowances[key] = remaining
            return remaining


def _n(address: str) -> str:
    return normalize_address(address)


def _require_amount(amount: int) -> None:
    if not isinstance(amount, int) or amount < 0 or amount > UINT256_MAX:
        raise ValueError(f"amount must be a uint256, got {amount!r}")


__all__ = ["Ledger", "LedgerState"]
