"""
Domain models — orders, line items, offers, transactions and the
read-only snapshots fetched from collaborators.

The Order aggregate is mutable and only touched by the commit workflows.
Snapshots and transactions are frozen.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class OrderState(Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    FULFILLED = "fulfilled"
    CANCELED = "canceled"


class OrderAction(Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    FULFILL = "fulfill"
    CANCEL = "cancel"


class FulfillmentType(Enum):
    SHIP = "ship"
    PICKUP = "pickup"


class TransactionStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborator Snapshots
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ArtworkLocation:
    country: str
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None


@dataclass(frozen=True, slots=True)
class Artwork:
    id: str
    current_version_id: str
    location: ArtworkLocation
    domestic_shipping_fee_cents: int | None = None
    international_shipping_fee_cents: int | None = None


@dataclass(frozen=True, slots=True)
class Partner:
    id: str
    name: str | None
    effective_commission_rate: Decimal | float | str | None
    billing_location_id: str | None = None


@dataclass(frozen=True, slots=True)
class PartnerLocation:
    country: str
    address: str | None = None
    address_2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None


@dataclass(frozen=True, slots=True)
class CustomerAccount:
    external_id: str | None


@dataclass(frozen=True, slots=True)
class CreditCard:
    id: str
    external_id: str | None
    customer_account: CustomerAccount | None
    deactivated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class MerchantAccount:
    id: str
    external_id: str


@dataclass(frozen=True, slots=True)
class TaxQuote:
    """Tax owed for one line item."""

    sales_tax_cents: int
    should_remit_sales_tax: bool


@dataclass(frozen=True, slots=True)
class ChargeResult:
    """What the payment gateway reports for one charge call."""

    succeeded: bool
    external_id: str | None = None
    failure_code: str | None = None
    failure_message: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Order Aggregate
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ShippingAddress:
    name: str
    country: str
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None


@dataclass(slots=True)
class LineItem:
    id: str
    artwork_id: str
    artwork_version_id: str
    list_price_cents: int
    quantity: int = 1
    sales_tax_cents: int = 0
    should_remit_sales_tax: bool = False
    shipping_total_cents: int = 0

    @property
    def total_list_price_cents(self) -> int:
        return self.list_price_cents * self.quantity


@dataclass(frozen=True, slots=True)
class Transaction:
    """Audit record of one charge attempt. Never modified once created."""

    order_id: str
    status: TransactionStatus
    amount_cents: int
    created_at: datetime
    external_id: str | None = None
    failure_code: str | None = None
    failure_message: str | None = None
    id: str = field(default_factory=lambda: f"txn_{uuid.uuid4().hex[:16]}")

    @property
    def failed(self) -> bool:
        return self.status is TransactionStatus.FAILED


@dataclass(slots=True)
class Order:
    id: str
    buyer_id: str
    buyer_type: str
    seller_id: str
    seller_type: str
    state: OrderState = OrderState.PENDING
    line_items: list[LineItem] = field(default_factory=list)
    fulfillment_type: FulfillmentType | None = None
    shipping_address: ShippingAddress | None = None
    credit_card_id: str | None = None
    currency_code: str = "USD"
    items_total_cents: int = 0
    shipping_total_cents: int = 0
    tax_total_cents: int = 0
    commission_fee_cents: int = 0
    commission_rate: Decimal | None = None
    buyer_total_cents: int = 0
    seller_total_cents: int = 0
    external_charge_id: str | None = None
    state_updated_at: datetime | None = None
    state_expires_at: datetime | None = None
    last_offer: Offer | None = field(default=None, repr=False, compare=False)
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def is_auction_seller(self) -> bool:
        return self.seller_type == "auction"

    @property
    def last_transaction(self) -> Transaction | None:
        return self.transactions[-1] if self.transactions else None


@dataclass(slots=True, eq=False)
class Offer:
    id: str
    order: Order = field(repr=False)
    amount_cents: int
    shipping_total_cents: int = 0
    tax_total_cents: int = 0
    should_remit_sales_tax: bool = False
    submitted_at: datetime | None = None

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "OrderState",
    "OrderAction",
    "FulfillmentType",
    "TransactionStatus",
    "ArtworkLocation",
    "Artwork",
    "Partner",
    "PartnerLocation",
    "CustomerAccount",
    "CreditCard",
    "MerchantAccount",
    "TaxQuote",
    "ChargeResult",
    "ShippingAddress",
    "LineItem",
    "Transaction",
    "Order",
    "Offer",
)
