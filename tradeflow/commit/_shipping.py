"""
Set shipping — choose fulfillment and destination while the order is pending.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from tradeflow.collaborators import Collaborators
from tradeflow.commit._totals import TotalsCalculator
from tradeflow.commit._validation import commission_rate
from tradeflow.config import CommitConfig, DEFAULT_CONFIG
from tradeflow.domain import (
    FulfillmentType,
    Order,
    OrderError,
    OrderErrorKind,
    OrderErrors,
    OrderState,
    ShippingAddress,
    StateMachine,
)
from tradeflow.lift import call_collaborator

logger = logging.getLogger("tradeflow.shipping")


class ShippingWorkflow:
    def __init__(
        self,
        collaborators: Collaborators,
        config: CommitConfig = DEFAULT_CONFIG,
        state_machine: StateMachine | None = None,
    ) -> None:
        self._c = collaborators
        self._config = config
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

    async def set_shipping(
        self,
        order: Order,
        fulfillment_type: FulfillmentType,
        shipping_address: ShippingAddress | None,
    ) -> Result[Order, OrderError]:
        """
        Price the new destination, then store it.

        The order is left untouched unless every lookup succeeds.
        """
        match self._machine.require(order, OrderState.PENDING):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass
        if fulfillment_type is FulfillmentType.SHIP and shipping_address is None:
            return Error(OrderErrors.missing_shipping_address(order.id))

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

        match await self._totals.compute_fulfillment(
            order,
            partner,
            fulfillment_type=fulfillment_type,
            shipping_address=shipping_address,
        ):
            case Error(e):
                return Error(e)
            case Ok(totals):
                pass

        order.fulfillment_type = fulfillment_type
        order.shipping_address = shipping_address
        totals.apply(order)
        self._machine.refresh_expiry(order)

        # Derived totals need a commission rate; commit rejects partners without one.
        match commission_rate(partner):
            case Ok(rate):
                self._totals.update_totals(order, rate)
            case Error(_):
                pass

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
                logger.info(
                    "Order %s ships via %s: shipping=%d tax=%d",
                    order.id,
                    fulfillment_type.value,
                    order.shipping_total_cents,
                    order.tax_total_cents,
                )
                return Ok(order)


__all__ = ("ShippingWorkflow",)
