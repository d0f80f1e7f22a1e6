"""
Commands — the entry points an API adapter calls.

Each returns a Result; the adapter turns OrderError into its own payload
(see tradeflow.schemas).
"""

from __future__ import annotations

from kungfu import Result

from tradeflow.collaborators import Collaborators
from tradeflow.commit._offer import OfferSubmissionWorkflow
from tradeflow.commit._orchestrator import CommitOrchestrator
from tradeflow.commit._shipping import ShippingWorkflow
from tradeflow.config import CommitConfig, DEFAULT_CONFIG
from tradeflow.domain import (
    FulfillmentType,
    Offer,
    Order,
    OrderAction,
    OrderError,
    ShippingAddress,
    StateMachine,
)


class OrderCommands:
    def __init__(
        self,
        collaborators: Collaborators,
        config: CommitConfig = DEFAULT_CONFIG,
    ) -> None:
        machine = StateMachine(expirations=config.state_expirations, clock=config.clock)
        self.orchestrator = CommitOrchestrator(collaborators, config, machine)
        self.shipping = ShippingWorkflow(collaborators, config, machine)
        self.offers = OfferSubmissionWorkflow(collaborators, config)

    async def submit_order(self, order: Order, user_id: str) -> Result[Order, OrderError]:
        """Buyer submits: deduct inventory and authorize the charge."""
        return await self.orchestrator.commit(order, OrderAction.SUBMIT, actor=user_id)

    async def approve_order(self, order: Order, user_id: str) -> Result[Order, OrderError]:
        """
        Seller approves.

        A submitted order captures the charge authorized at submit; a pending
        order runs the full commit and captures immediately.
        """
        return await self.orchestrator.commit(order, OrderAction.APPROVE, actor=user_id)

    async def set_shipping(
        self,
        order: Order,
        fulfillment_type: FulfillmentType,
        shipping_address: ShippingAddress | None = None,
    ) -> Result[Order, OrderError]:
        return await self.shipping.set_shipping(order, fulfillment_type, shipping_address)

    async def submit_offer(self, offer: Offer) -> Result[Offer, OrderError]:
        return await self.offers.submit(offer)


__all__ = ("OrderCommands",)
