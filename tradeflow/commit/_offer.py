"""
Offer submission — stamp the offer and price the order by it.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from tradeflow.collaborators import Collaborators
from tradeflow.commit._totals import TotalsCalculator
from tradeflow.commit._validation import commission_rate
from tradeflow.config import CommitConfig, DEFAULT_CONFIG
from tradeflow.domain import Offer, OrderError, OrderErrorKind, OrderErrors
from tradeflow.lift import call_collaborator

logger = logging.getLogger("tradeflow.offer")


class OfferSubmissionWorkflow:
    def __init__(
        self,
        collaborators: Collaborators,
        config: CommitConfig = DEFAULT_CONFIG,
    ) -> None:
        self._c = collaborators
        self._config = config
        self._totals = TotalsCalculator(
            collaborators.artworks,
            collaborators.partners,
            collaborators.taxes,
            config.settlement,
        )

    async def submit(self, offer: Offer) -> Result[Offer, OrderError]:
        if offer.is_submitted:
            return Error(OrderErrors.invalid_offer(offer.id))

        order = offer.order
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
        match commission_rate(partner):
            case Error(e):
                return Error(e)
            case Ok(rate):
                pass

        offer.submitted_at = self._config.clock()
        if order.line_items:
            first = order.line_items[0]
            first.sales_tax_cents = offer.tax_total_cents
            first.should_remit_sales_tax = offer.should_remit_sales_tax
        order.last_offer = offer
        order.shipping_total_cents = offer.shipping_total_cents
        order.tax_total_cents = offer.tax_total_cents
        self._totals.update_totals(order, rate)

        saved = await call_collaborator(
            lambda: self._c.orders.save(order),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.PERSISTENCE_FAILED, e, order_id=order.id
            ),
        )
        match saved:
            case Error(e):
                return Error(e)
            case Ok(_):
                logger.info("Offer %s submitted on order %s", offer.id, order.id)
                return Ok(offer)


__all__ = ("OfferSubmissionWorkflow",)
