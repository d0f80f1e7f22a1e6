"""
Commit orchestrator — the order commit saga.

    orchestrator = CommitOrchestrator(collaborators)
    result = await orchestrator.commit(order, OrderAction.SUBMIT, actor="user-1")

Flow:
1. State guard (no side effects when the action is illegal)
2. Artwork version check, credit card, partner, merchant account
3. Totals refresh
4. Guarded transition body: deduct every line item, then charge
5. On any failure: undeduct what was deducted, in the order it was deducted
6. Always: append the transaction (if a charge was attempted), notify on a
   failed charge, persist

Approving a submitted order that already holds an authorization skips 2-5:
the held charge is captured and inventory is left as the submit deducted it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from kungfu import LazyCoroResult, Result, Ok, Error

from tradeflow import saga as S
from tradeflow.collaborators import Collaborators
from tradeflow.commit._inventory import InventoryCoordinator
from tradeflow.commit._payment import PaymentProcessor
from tradeflow.commit._totals import TotalsCalculator
from tradeflow.commit._validation import assert_chargeable, assert_commission_rate
from tradeflow.config import CommitConfig, DEFAULT_CONFIG
from tradeflow.domain import (
    Artwork,
    CreditCard,
    MerchantAccount,
    Order,
    OrderAction,
    OrderError,
    OrderErrorKind,
    OrderErrors,
    OrderState,
    Partner,
    StateMachine,
    Transaction,
)
from tradeflow.lift import call_collaborator

logger = logging.getLogger("tradeflow.commit")

CAPTURE_ACTIONS = frozenset({OrderAction.APPROVE})
"""Actions that capture funds; every other commit only authorizes."""


# ═══════════════════════════════════════════════════════════════════════════════
# CommitContext / CommitAttempt — per-attempt bookkeeping
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CommitContext:
    """Everything looked up and validated before any side effect."""

    artworks: Mapping[str, Artwork]
    credit_card: CreditCard
    partner: Partner
    merchant_account: MerchantAccount


@dataclass(slots=True)
class CommitAttempt:
    """Side effects of one commit attempt. Discarded afterwards."""

    order: Order
    action: OrderAction
    actor: str | None
    deductions: S.CompensationLog[Any] = field(default_factory=S.CompensationLog)
    transaction: Transaction | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# CommitOrchestrator
# ═══════════════════════════════════════════════════════════════════════════════


class CommitOrchestrator:
    def __init__(
        self,
        collaborators: Collaborators,
        config: CommitConfig = DEFAULT_CONFIG,
        state_machine: StateMachine | None = None,
    ) -> None:
        self._c = collaborators
        self._config = config
        self._inventory = InventoryCoordinator(collaborators.inventory, collaborators.metrics)
        self._payments = PaymentProcessor(collaborators.payments, config)
        self._totals = TotalsCalculator(
            collaborators.artworks,
            collaborators.partners,
            collaborators.taxes,
            config.settlement,
        )
        self._machine = state_machine or StateMachine(
            expirations=config.state_expirations,
            clock=config.clock,
        )

    async def commit(
        self,
        order: Order,
        action: OrderAction,
        actor: str | None = None,
    ) -> Result[Order, OrderError]:
        match self._machine.check(order, action):
            case Error(e):
                logger.warning("Refusing to %s order %s: %s", action.value, order.id, e.message)
                return Error(e)
            case Ok(_):
                pass

        attempt = CommitAttempt(order=order, action=action, actor=actor)
        authorization = held_authorization(order, action)
        logger.info("Committing order %s (%s) for %s", order.id, action.value, actor)

        try:
            if authorization is not None:
                result = await self._capture(attempt, authorization)
            else:
                result = await self._process(attempt)
        finally:
            await self._record_transaction(attempt)

        match result:
            case Ok(_):
                return await self._persist_success(attempt)
            case Error(e):
                logger.warning(
                    "Commit of order %s failed: %s (%d deduction(s) reversed)",
                    order.id,
                    e,
                    len(attempt.deductions),
                )
                return Error(e)

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    async def _process(self, attempt: CommitAttempt) -> Result[Order, OrderError]:
        match await self._pre_process(attempt.order):
            case Error(e):
                return Error(e)
            case Ok(context):
                pass

        match await self._totals.calculate(attempt.order, context.partner, artworks=context.artworks):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        return await self._machine.transition(
            attempt.order,
            attempt.action,
            lambda: self._commit_body(attempt, context),
        )

    async def _pre_process(self, order: Order) -> Result[CommitContext, OrderError]:
        artworks: dict[str, Artwork] = {}
        for line_item in order.line_items:
            artwork_id = line_item.artwork_id
            artwork_result = await call_collaborator(
                lambda: self._c.artworks.get_artwork(artwork_id),
                on_error=lambda e: OrderErrors.collaborator(
                    OrderErrorKind.ARTWORK_LOOKUP_FAILED, e, artwork_id=artwork_id
                ),
            )
            match artwork_result:
                case Error(e):
                    return Error(e)
                case Ok(artwork):
                    artworks[artwork_id] = artwork

            if artwork.current_version_id != line_item.artwork_version_id:
                self._c.metrics.increment(
                    "submit.artwork_version_mismatch",
                    {"order_id": order.id, "artwork_id": artwork_id},
                )
                return Error(OrderErrors.artwork_version_mismatch(
                    line_item.id, line_item.artwork_version_id, artwork.current_version_id
                ))

        credit_card_id = order.credit_card_id
        if not credit_card_id:
            return Error(OrderErrors.missing_credit_card(order.id))
        card_result = await call_collaborator(
            lambda: self._c.credit_cards.get_credit_card(credit_card_id),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.CREDIT_CARD_LOOKUP_FAILED, e, credit_card_id=credit_card_id
            ),
        )
        match card_result:
            case Error(e):
                return Error(e)
            case Ok(card):
                pass
        match assert_chargeable(card):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        partner_result = await call_collaborator(
            lambda: self._c.partners.fetch_partner(order.seller_id),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.PARTNER_LOOKUP_FAILED, e, seller_id=order.seller_id
            ),
        )
        match partner_result:
            case Error(e):
                return Error(e)
            case Ok(partner):
                pass
        match assert_commission_rate(partner):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        merchant_result = await call_collaborator(
            lambda: self._c.merchant_accounts.get_merchant_account(order.seller_id),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.MERCHANT_ACCOUNT_LOOKUP_FAILED, e, seller_id=order.seller_id
            ),
        )
        match merchant_result:
            case Error(e):
                return Error(e)
            case Ok(merchant_account):
                pass

        return Ok(CommitContext(
            artworks=artworks,
            credit_card=card,
            partner=partner,
            merchant_account=merchant_account,
        ))

    async def _commit_body(
        self,
        attempt: CommitAttempt,
        context: CommitContext,
    ) -> Result[Order, OrderError]:
        """Deduct every line item, then charge. Runs only under the state guard."""
        steps: list[S.SagaStep[Any, OrderError]] = [
            self._inventory.step(line_item) for line_item in attempt.order.line_items
        ]
        steps.append(S.step(action=self._charge_lazy(attempt, context), name="charge"))

        saga_result = await S.run_sequence(
            steps,
            S.policy.compensate.in_order(),
            log=attempt.deductions,
        )
        match saga_result:
            case Ok(completed):
                transaction: Transaction = completed.value[-1]
                attempt.order.external_charge_id = transaction.external_id
                return Ok(attempt.order)
            case Error(saga_error):
                if not saga_error.rollback_complete:
                    logger.error(
                        "Order %s: %d inventory reversal(s) failed, needs reconciliation",
                        attempt.order.id,
                        saga_error.compensators_failed,
                    )
                return Error(saga_error.error)

    def _charge_lazy(
        self,
        attempt: CommitAttempt,
        context: CommitContext,
    ) -> LazyCoroResult[Transaction, OrderError]:
        async def _charge() -> Result[Transaction, OrderError]:
            params = self._payments.build_charge_params(
                attempt.order,
                credit_card=context.credit_card,
                merchant_account=context.merchant_account,
                partner=context.partner,
                capture=attempt.action in CAPTURE_ACTIONS,
            )
            transaction = await self._payments.charge(attempt.order, params)
            attempt.transaction = transaction
            return _settled(transaction)

        return LazyCoroResult(_charge)

    async def _capture(self, attempt: CommitAttempt, external_charge_id: str) -> Result[Order, OrderError]:
        """Capture the charge authorized at submit. Inventory stays deducted."""

        async def _body() -> Result[Order, OrderError]:
            transaction = await self._payments.capture(attempt.order, external_charge_id)
            attempt.transaction = transaction
            match _settled(transaction):
                case Error(e):
                    return Error(e)
                case Ok(_):
                    return Ok(attempt.order)

        return await self._machine.transition(attempt.order, attempt.action, _body)

    # ─────────────────────────────────────────────────────────────────────────
    # Bookkeeping
    # ─────────────────────────────────────────────────────────────────────────

    async def _record_transaction(self, attempt: CommitAttempt) -> None:
        """Append the attempt's transaction, notify on failure. Never raises."""
        transaction = attempt.transaction
        if transaction is None:
            return

        attempt.order.transactions.append(transaction)
        if transaction.failed:
            await self._notify_failed_charge(transaction, attempt.actor)
            try:
                await self._c.orders.save(attempt.order)
            except Exception:
                logger.error(
                    "Could not persist failed transaction %s for order %s",
                    transaction.id,
                    attempt.order.id,
                    exc_info=True,
                )

    async def _notify_failed_charge(self, transaction: Transaction, actor: str | None) -> None:
        try:
            await self._c.notifier.enqueue_failed_charge(transaction.id, actor)
        except Exception:
            logger.error(
                "Could not enqueue failed-charge notification for %s",
                transaction.id,
                exc_info=True,
            )

    async def _persist_success(self, attempt: CommitAttempt) -> Result[Order, OrderError]:
        order = attempt.order
        saved = await call_collaborator(
            lambda: self._c.orders.save(order),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.PERSISTENCE_FAILED, e, order_id=order.id
            ),
        )
        match saved:
            case Error(e):
                logger.error("Order %s committed but could not be saved: %s", order.id, e)
                return Error(e)
            case Ok(_):
                logger.info(
                    "Order %s committed: %s, charge %s",
                    order.id,
                    order.state.value,
                    order.external_charge_id,
                )
                return Ok(order)


def held_authorization(order: Order, action: OrderAction) -> str | None:
    """Charge id to capture when ``action`` settles an earlier authorization."""
    if action in CAPTURE_ACTIONS and order.state is OrderState.SUBMITTED:
        return order.external_charge_id
    return None


def _settled(transaction: Transaction) -> Result[Transaction, OrderError]:
    if transaction.failed:
        return Error(OrderErrors.charge_failed(
            transaction.id, transaction.failure_code, transaction.failure_message
        ))
    return Ok(transaction)


__all__ = (
    "CAPTURE_ACTIONS",
    "CommitContext",
    "CommitAttempt",
    "CommitOrchestrator",
    "held_authorization",
)
