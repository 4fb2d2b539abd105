"""Debt swap orchestrator.

Moves a borrower's debt from one (asset, rate mode) to another in a single
atomic attempt:

1. Price the route backward from the amount of existing debt to repay.
2. Flash-borrow the source asset (``route[0]``) from the lending pool.
3. Inside the flash loan callback, swap it along the route into the debt
   asset, repay the existing debt, then re-borrow ``flash + premium`` of
   the source asset in the borrower's name through credit delegation.
4. The lending pool collects ``flash + premium`` when the callback returns.

Every ledger mutation of an attempt happens inside one ledger transaction,
so any failure at any step leaves balances exactly as they were.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from debtswap.config import DEFAULT_CONFIG, DebtSwapConfig
from debtswap.errors import (
    DebtSwapError,
    InvalidSwapRequest,
    ReentrantCall,
    SettlementShortfall,
    SlippageExceeded,
    Unauthorized,
)
from debtswap.ledger import Ledger
from debtswap.lending.gateway import LendingGateway
from debtswap.lending.provider import LendingPoolAddressesProvider
from debtswap.liquidity.directory import AmmDirectory, AmmVenue
from debtswap.models.payload import decode_swap_request, encode_swap_request
from debtswap.models.request import InterestRateMode, SwapRequest
from debtswap.models.types import normalize_address
from debtswap.orchestrator.state import Attempt, AttemptState, FlashContext, SwapOutcome
from debtswap.pricing.path_pricer import PathPricer
from debtswap.pricing.types import PricedPath

logger = structlog.get_logger()


class DebtSwap:
    """Flash-loan receiver that swaps one debt position for another.

    The lending pool is resolved from the addresses provider once, at
    construction. The AMM is named per request by its factory address.
    """

    VERSION = 2

    def __init__(
        self,
        provider: LendingPoolAddressesProvider,
        ledger: Ledger,
        amms: AmmDirectory,
        *,
        address: str,
        config: DebtSwapConfig = DEFAULT_CONFIG,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.provider = provider
        self.lending_pool: LendingGateway = provider.get_lending_pool()
        self.ledger = ledger
        self.amms = amms
        self.config = config
        self.pricer = PathPricer(config)
        self._attempt: Attempt | None = None

    @property
    def state(self) -> AttemptState:
        """Lifecycle state of the attempt in flight, IDLE when there is none."""
        return self._attempt.state if self._attempt is not None else AttemptState.IDLE

    # --- Entry point ---

    def swap_debt(self, request: SwapRequest, *, caller: str) -> SwapOutcome:
        """Run one debt swap attempt for ``request.on_behalf_of`` (default: caller).

        Attempts from other threads wait on the ledger lock; only a nested
        call from inside an attempt is refused.

        Returns:
            What the settled attempt did

        Raises:
            ReentrantCall: If an attempt is already in flight on this thread
            SlippageExceeded: If the route needs more than max_source_amount
            DebtSwapError: Any failure of a later step; the ledger is rolled back
        """
        request = request.for_borrower(normalize_address(caller, validate=True))
        log = logger.bind(
            borrower=request.on_behalf_of,
            route=list(request.route),
            amm_factory=request.amm_factory,
        )

        with self.ledger.transaction():
            if self._attempt is not None:
                raise ReentrantCall(
                    "debt swap already in progress", state=self._attempt.state.name
                )
            attempt = Attempt(request=request)
            self._attempt = attempt
            try:
                self._run(attempt, log)
            except DebtSwapError as err:
                log.warning(
                    "debt_swap_reverted",
                    kind=err.kind,
                    reason=str(err),
                    state=attempt.state.name,
                )
                attempt.state = AttemptState.REVERTED
                raise
            except Exception:
                log.exception("debt_swap_reverted", state=attempt.state.name)
                attempt.state = AttemptState.REVERTED
                raise
            finally:
                self._attempt = None

        assert attempt.outcome is not None
        log.info(
            "debt_swap_settled",
            flash_amount=attempt.outcome.flash_amount,
            premium=attempt.outcome.premium,
            amount_repaid=attempt.outcome.amount_repaid,
            new_debt=attempt.outcome.new_debt,
        )
        return attempt.outcome

    def _run(self, attempt: Attempt, log: structlog.typing.FilteringBoundLogger) -> None:
        request = attempt.request
        venue = self.amms.resolve(request.amm_factory)
        repay_amount = self._resolve_repay_amount(request)
        priced = self._price(venue, request, repay_amount)

        if priced.amount_in > request.max_source_amount:
            raise SlippageExceeded(
                f"route needs {priced.amount_in} of {request.source_asset}, "
                f"ceiling is {request.max_source_amount}",
                amount_in=priced.amount_in,
                max_source_amount=request.max_source_amount,
            )

        attempt.advance(AttemptState.REQUESTED)
        log.info(
            "debt_swap_requested",
            repay_amount=repay_amount,
            flash_amount=priced.amount_in,
        )
        self.lending_pool.flash_loan(
            self,
            request.flash_assets,
            [priced.amount_in],
            [InterestRateMode.NONE],
            request.on_behalf_of,
            encode_swap_request(request),
            self._referral_code(request),
            caller=self.address,
        )
        if attempt.state != AttemptState.REBORROWED or attempt.outcome is None:
            raise SettlementShortfall(
                "flash loan returned without completing the callback",
                state=attempt.state.name,
            )
        attempt.advance(AttemptState.SETTLED)

    # --- Flash loan callback ---

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
        """Serve the flash loan this contract requested.

        Raises:
            Unauthorized: If no attempt is in flight, the call does not come
                from the lending pool, or the flash loan was not initiated here
            ReentrantCall: If the attempt in flight is already past its request
        """
        attempt = self._attempt
        if attempt is None:
            raise Unauthorized("no flash loan outstanding")
        if attempt.state != AttemptState.REQUESTED:
            raise ReentrantCall(
                "flash loan callback already in progress", state=attempt.state.name
            )
        if normalize_address(caller) != normalize_address(self.lending_pool.address):
            raise Unauthorized("caller is not the lending pool", caller=caller)
        if normalize_address(initiator) != self.address:
            raise Unauthorized("flash loan not initiated by this contract", initiator=initiator)
        if len(assets) != 1 or len(amounts) != 1 or len(premiums) != 1:
            raise InvalidSwapRequest("expected a single-asset flash loan")

        request = decode_swap_request(params)
        if request.model_dump() != attempt.request.model_dump():
            raise Unauthorized("flash loan payload does not match the pending request")

        ctx = FlashContext(
            request=request,
            asset=normalize_address(assets[0]),
            amount=amounts[0],
            premium=premiums[0],
            initiator=normalize_address(initiator),
            lending_pool=normalize_address(caller),
        )
        if ctx.asset != request.source_asset:
            raise Unauthorized("flashed asset is not the route source", asset=ctx.asset)
        attempt.advance(AttemptState.IN_CALLBACK)

        amount_swapped_in, repay_amount = self._swap(ctx)
        attempt.advance(AttemptState.SWAPPED)

        amount_repaid = self._repay(ctx, repay_amount)
        attempt.advance(AttemptState.REPAID)

        self._reborrow(ctx)
        attempt.advance(AttemptState.REBORROWED)

        refunded_source, refunded_target = self._refund_residuals(
            ctx, amount_swapped_in, repay_amount, amount_repaid
        )
        self.ledger.approve(ctx.asset, self.address, ctx.lending_pool, ctx.owed)

        attempt.outcome = SwapOutcome(
            borrower=ctx.borrower,
            source_asset=ctx.asset,
            target_asset=request.existing_debt_asset,
            flash_amount=ctx.amount,
            premium=ctx.premium,
            amount_swapped_in=amount_swapped_in,
            repay_requested=repay_amount,
            amount_repaid=amount_repaid,
            new_debt=ctx.owed,
            refunded_source=refunded_source,
            refunded_target=refunded_target,
        )
        return True

    # --- Steps ---

    def _swap(self, ctx: FlashContext) -> tuple[int, int]:
        """Convert the flashed funds into the debt asset.

        The repay amount and the route price are both read again here: the
        flashed amount is the hard ceiling on what the swap may consume.
        """
        request = ctx.request
        venue = self.amms.resolve(request.amm_factory)
        repay_amount = self._resolve_repay_amount(request)
        priced = self._price(venue, request, repay_amount)

        gateway = venue.gateway
        self.ledger.approve(ctx.asset, self.address, gateway.address, ctx.amount)
        executed = gateway.swap_exact_out(
            priced.route,
            priced.amounts,
            repay_amount,
            ctx.amount,
            self.address,
            caller=self.address,
        )
        self.ledger.approve(ctx.asset, self.address, gateway.address, 0)
        return executed[0], repay_amount

    def _repay(self, ctx: FlashContext, repay_amount: int) -> int:
        request = ctx.request
        self.ledger.approve(
            request.existing_debt_asset, self.address, ctx.lending_pool, repay_amount
        )
        repaid = self.lending_pool.repay(
            request.existing_debt_asset,
            repay_amount,
            request.existing_rate_mode,
            ctx.borrower,
            caller=self.address,
        )
        self.ledger.approve(request.existing_debt_asset, self.address, ctx.lending_pool, 0)
        if repaid < repay_amount:
            logger.warning(
                "repay_shortfall",
                borrower=ctx.borrower,
                requested=repay_amount,
                repaid=repaid,
            )
        return repaid

    def _reborrow(self, ctx: FlashContext) -> None:
        self.lending_pool.borrow(
            ctx.asset,
            ctx.owed,
            ctx.request.new_rate_mode,
            ctx.borrower,
            self._referral_code(ctx.request),
            caller=self.address,
        )

    def _refund_residuals(
        self,
        ctx: FlashContext,
        amount_swapped_in: int,
        repay_amount: int,
        amount_repaid: int,
    ) -> tuple[int, int]:
        """Return tokens the attempt did not need to the borrower."""
        if not self.config.refund_residuals:
            return 0, 0

        source_left = ctx.amount - amount_swapped_in
        target_left = repay_amount - amount_repaid
        if source_left:
            self.ledger.transfer(ctx.asset, self.address, ctx.borrower, source_left)
        if target_left:
            self.ledger.transfer(
                ctx.request.existing_debt_asset, self.address, ctx.borrower, target_left
            )
        if source_left or target_left:
            logger.info(
                "residuals_refunded",
                borrower=ctx.borrower,
                source=source_left,
                target=target_left,
            )
        return source_left, target_left

    # --- Helpers ---

    def _resolve_repay_amount(self, request: SwapRequest) -> int:
        """Turn the full-balance sentinel into the live outstanding debt."""
        if not request.repays_full_balance:
            return request.desired_repay_amount
        assert request.on_behalf_of is not None
        outstanding = self.lending_pool.outstanding_balance(
            request.existing_debt_asset, request.existing_rate_mode, request.on_behalf_of
        )
        if outstanding == 0:
            raise InvalidSwapRequest(
                "no outstanding debt to repay",
                asset=request.existing_debt_asset,
                rate_mode=request.existing_rate_mode.name,
            )
        return outstanding

    def _price(self, venue: AmmVenue, request: SwapRequest, repay_amount: int) -> PricedPath:
        return self.pricer.amounts_in(venue.factory, repay_amount, request.route)

    def _referral_code(self, request: SwapRequest) -> int:
        return request.referral_code or self.config.referral_code


__all__ = ["DebtSwap"]
