"""
Payment — charge parameters, the charge call and capture of a held charge.

A declined or erroring call is not an error here: charge() and capture()
always return a Transaction and the caller decides what a failed one means.
"""

from __future__ import annotations

import logging
import re
import unicodedata

from tradeflow.collaborators import ChargeParams, PaymentGateway
from tradeflow.config import CommitConfig, DEFAULT_CONFIG
from tradeflow.domain import (
    ChargeResult,
    CreditCard,
    MerchantAccount,
    Order,
    Partner,
    Transaction,
    TransactionStatus,
)

logger = logging.getLogger("tradeflow.payment")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

AUCTION_SALE = "auction-bn"
BUY_NOW_OR_OFFER_SALE = "bn-mo"


def parameterize(text: str) -> str:
    """'Gagosian Gallery & Co.' -> 'gagosian-gallery-co'"""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")


def charge_description(partner: Partner, config: CommitConfig = DEFAULT_CONFIG) -> str:
    token = parameterize(partner.name or "")[: config.description_length].upper()
    return f"{token} {config.description_suffix}"


def charge_metadata(order: Order) -> dict[str, str]:
    return {
        "exchange_order_id": order.id,
        "buyer_id": order.buyer_id,
        "buyer_type": order.buyer_type,
        "seller_id": order.seller_id,
        "seller_type": order.seller_type,
        "type": AUCTION_SALE if order.is_auction_seller else BUY_NOW_OR_OFFER_SALE,
    }


class PaymentProcessor:
    def __init__(self, gateway: PaymentGateway, config: CommitConfig = DEFAULT_CONFIG) -> None:
        self._gateway = gateway
        self._config = config

    def build_charge_params(
        self,
        order: Order,
        *,
        credit_card: CreditCard,
        merchant_account: MerchantAccount,
        partner: Partner,
        capture: bool,
    ) -> ChargeParams:
        return ChargeParams(
            credit_card=credit_card,
            buyer_amount=order.buyer_total_cents,
            merchant_account=merchant_account,
            seller_amount=order.seller_total_cents,
            currency_code=order.currency_code or self._config.currency_code,
            metadata=charge_metadata(order),
            description=charge_description(partner, self._config),
            capture=capture,
        )

    async def charge(self, order: Order, params: ChargeParams) -> Transaction:
        try:
            result = await self._gateway.charge(params)
        except Exception as e:
            logger.warning("Charge for order %s raised: %s", order.id, e, exc_info=True)
            result = _gateway_error(e)

        transaction = self._transaction(order, params.buyer_amount, result)
        if not transaction.failed:
            logger.info(
                "Charged order %s: %d %s -> %s",
                order.id,
                params.buyer_amount,
                params.currency_code,
                transaction.external_id,
            )
        return transaction

    async def capture(self, order: Order, external_charge_id: str) -> Transaction:
        """Capture an authorization made when the order was submitted."""
        try:
            result = await self._gateway.capture(external_charge_id)
        except Exception as e:
            logger.warning("Capture for order %s raised: %s", order.id, e, exc_info=True)
            result = _gateway_error(e)

        if result.succeeded and result.external_id is None:
            result = ChargeResult(succeeded=True, external_id=external_charge_id)
        transaction = self._transaction(order, order.buyer_total_cents, result)
        if not transaction.failed:
            logger.info("Captured %s for order %s", external_charge_id, order.id)
        return transaction

    def _transaction(self, order: Order, amount_cents: int, result: ChargeResult) -> Transaction:
        transaction = Transaction(
            order_id=order.id,
            status=TransactionStatus.SUCCESS if result.succeeded else TransactionStatus.FAILED,
            amount_cents=amount_cents,
            created_at=self._config.clock(),
            external_id=result.external_id if result.succeeded else None,
            failure_code=result.failure_code,
            failure_message=result.failure_message,
        )
        if transaction.failed:
            logger.warning(
                "Payment for order %s failed: %s (%s)",
                order.id,
                transaction.failure_code,
                transaction.failure_message,
            )
        return transaction


def _gateway_error(e: Exception) -> ChargeResult:
    return ChargeResult(
        succeeded=False,
        failure_code="gateway_error",
        failure_message=str(e) or type(e).__name__,
    )


__all__ = (
    "AUCTION_SALE",
    "BUY_NOW_OR_OFFER_SALE",
    "parameterize",
    "charge_description",
    "charge_metadata",
    "PaymentProcessor",
)
