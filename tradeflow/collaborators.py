"""
Collaborator contracts — what the workflows require from the outside world.

Implementations are plain async objects; any of their calls may raise.
The workflows catch those errors at the boundary and turn them into
``OrderError`` values, so implementations never need to know about Result.

Example — an HTTP-backed inventory service:

    class HttpInventory:
        def __init__(self, client: httpx.AsyncClient) -> None:
            self.client = client

        async def deduct(self, line_item: LineItem) -> None:
            r = await self.client.put(f"/artwork/{line_item.artwork_id}/inventory", ...)
            r.raise_for_status()

        async def undeduct(self, line_item: LineItem) -> None:
            ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from tradeflow.domain import (
    Artwork,
    ChargeResult,
    CreditCard,
    FulfillmentType,
    LineItem,
    MerchantAccount,
    Order,
    Partner,
    PartnerLocation,
    ShippingAddress,
    TaxQuote,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Charge Parameters — what the payment gateway receives
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ChargeParams:
    credit_card: CreditCard
    buyer_amount: int
    merchant_account: MerchantAccount
    seller_amount: int
    currency_code: str
    metadata: Mapping[str, str]
    description: str
    capture: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════════════════════


class ArtworkService(Protocol):
    async def get_artwork(self, artwork_id: str) -> Artwork: ...


class PartnerService(Protocol):
    async def fetch_partner(self, seller_id: str) -> Partner: ...

    async def fetch_partner_location(self, location_id: str) -> PartnerLocation: ...


class CreditCardService(Protocol):
    async def get_credit_card(self, credit_card_id: str) -> CreditCard: ...


class MerchantAccountService(Protocol):
    async def get_merchant_account(self, seller_id: str) -> MerchantAccount: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Side-effecting services
# ═══════════════════════════════════════════════════════════════════════════════


class InventoryService(Protocol):
    async def deduct(self, line_item: LineItem) -> None:
        """Hold the artwork for this line item. Raises on failure."""
        ...

    async def undeduct(self, line_item: LineItem) -> None:
        """Return a previously deducted line item to stock."""
        ...


class TaxService(Protocol):
    async def calculate(
        self,
        *,
        line_item: LineItem,
        partner_location: PartnerLocation,
        shipping_address: ShippingAddress | None,
        fulfillment_type: FulfillmentType,
        shipping_total_cents: int,
    ) -> TaxQuote:
        """
        Tax for one line item.

        shipping_address is None for PICKUP; the partner location is then
        the destination.
        """
        ...


class PaymentGateway(Protocol):
    async def charge(self, params: ChargeParams) -> ChargeResult:
        """
        Submit one charge.

        A decline is reported as ``ChargeResult(succeeded=False, ...)``;
        raising is treated the same way by the caller.
        """
        ...

    async def capture(self, external_charge_id: str) -> ChargeResult:
        """Capture funds held by an earlier authorization-only charge."""
        ...


class Notifier(Protocol):
    async def enqueue_failed_charge(self, transaction_id: str, actor: str | None) -> None:
        """Fire-and-forget notification about a failed charge."""
        ...


class OrderRepository(Protocol):
    async def save(self, order: Order) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Metrics
# ═══════════════════════════════════════════════════════════════════════════════


class Metrics(Protocol):
    def increment(self, name: str, tags: Mapping[str, Any] | None = None) -> None: ...


class NullMetrics:
    """Metrics sink that drops everything."""

    def increment(self, name: str, tags: Mapping[str, Any] | None = None) -> None:
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Bundle — everything a workflow may call
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Collaborators:
    artworks: ArtworkService
    partners: PartnerService
    credit_cards: CreditCardService
    merchant_accounts: MerchantAccountService
    inventory: InventoryService
    taxes: TaxService
    payments: PaymentGateway
    notifier: Notifier
    orders: OrderRepository
    metrics: Metrics = NullMetrics()


__all__ = (
    "ChargeParams",
    "ArtworkService",
    "PartnerService",
    "CreditCardService",
    "MerchantAccountService",
    "InventoryService",
    "TaxService",
    "PaymentGateway",
    "Notifier",
    "OrderRepository",
    "Metrics",
    "NullMetrics",
    "Collaborators",
)
