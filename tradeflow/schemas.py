"""
Schemas — pydantic models at the adapter edge.

In-models convert to domain values with ``to_domain()``; out-models are
built from domain values (or Results) with ``from_domain()``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from kungfu import Error, Ok, Result
from pydantic import BaseModel

from tradeflow.domain import FulfillmentType, Order, OrderError, ShippingAddress


class ShippingIn(BaseModel):
    name: str
    country: str
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(
            name=self.name,
            country=self.country,
            city=self.city,
            region=self.region,
            postal_code=self.postal_code,
            address_line1=self.address_line1,
            address_line2=self.address_line2,
        )


class SetShippingIn(BaseModel):
    fulfillment_type: FulfillmentType
    shipping: ShippingIn | None = None

    def to_domain(self) -> tuple[FulfillmentType, ShippingAddress | None]:
        address = self.shipping.to_domain() if self.shipping is not None else None
        return self.fulfillment_type, address


class OrderOut(BaseModel):
    id: str
    state: str
    currency_code: str
    fulfillment_type: str | None
    items_total_cents: int
    shipping_total_cents: int
    tax_total_cents: int
    commission_fee_cents: int
    buyer_total_cents: int
    seller_total_cents: int
    external_charge_id: str | None
    state_expires_at: datetime | None
    last_transaction_failed: bool

    @classmethod
    def from_domain(cls, order: Order) -> "OrderOut":
        last = order.last_transaction
        return cls(
            id=order.id,
            state=order.state.value,
            currency_code=order.currency_code,
            fulfillment_type=order.fulfillment_type.value if order.fulfillment_type else None,
            items_total_cents=order.items_total_cents,
            shipping_total_cents=order.shipping_total_cents,
            tax_total_cents=order.tax_total_cents,
            commission_fee_cents=order.commission_fee_cents,
            buyer_total_cents=order.buyer_total_cents,
            seller_total_cents=order.seller_total_cents,
            external_charge_id=order.external_charge_id,
            state_expires_at=order.state_expires_at,
            last_transaction_failed=last is not None and last.failed,
        )


class ErrorOut(BaseModel):
    type: str
    code: str
    data: dict[str, Any] = {}

    @classmethod
    def from_domain(cls, error: OrderError) -> "ErrorOut":
        return cls(
            type=error.category.name.lower(),
            code=error.code,
            data={k: v for k, v in error.data.items() if v is not None},
        )


class OrderOrErrorOut(BaseModel):
    order: OrderOut | None = None
    error: ErrorOut | None = None

    @classmethod
    def from_domain(cls, dom: Result[Order, OrderError]) -> "OrderOrErrorOut":
        match dom:
            case Ok(order):
                return cls(order=OrderOut.from_domain(order))
            case Error(e):
                return cls(error=ErrorOut.from_domain(e))


__all__ = (
    "ShippingIn",
    "SetShippingIn",
    "OrderOut",
    "ErrorOut",
    "OrderOrErrorOut",
)
