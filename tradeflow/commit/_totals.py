"""
Totals — shipping, tax, commission and the buyer/seller split.

Two layers:
- refresh_fulfillment(): shipping + tax, needs the artwork, partner and
  tax collaborators.
- update_totals(): pure arithmetic over what is already on the order.

calculate() runs both. Re-running on unchanged inputs yields identical totals.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from kungfu import Result, Ok, Error

from tradeflow.collaborators import ArtworkService, PartnerService, TaxService
from tradeflow.config import SettlementPolicy
from tradeflow.commit._validation import commission_rate
from tradeflow.domain import (
    Artwork,
    FulfillmentType,
    Order,
    OrderError,
    OrderErrorKind,
    OrderErrors,
    Partner,
    PartnerLocation,
    ShippingAddress,
    TaxQuote,
)
from tradeflow.lift import call_collaborator

logger = logging.getLogger("tradeflow.totals")


# ═══════════════════════════════════════════════════════════════════════════════
# Pure helpers
# ═══════════════════════════════════════════════════════════════════════════════


def is_domestic(artwork: Artwork, destination_country: str) -> bool:
    return artwork.location.country.strip().upper() == destination_country.strip().upper()


def shipping_fee(artwork: Artwork, destination_country: str) -> Result[int, OrderError]:
    """Fee for shipping one artwork. A fee of 0 means free shipping."""
    domestic = is_domestic(artwork, destination_country)
    fee = (
        artwork.domestic_shipping_fee_cents
        if domestic
        else artwork.international_shipping_fee_cents
    )
    if fee is None:
        return Error(OrderErrors.missing_shipping_fee(artwork.id, domestic=domestic))
    return Ok(max(fee, 0))


def commission_fee(items_total_cents: int, rate: Decimal) -> int:
    """items total × rate, rounded half-up to whole cents."""
    fee = (Decimal(items_total_cents) * rate).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(fee)


def items_total_cents(order: Order) -> int:
    offer = order.last_offer
    if offer is not None and offer.is_submitted:
        return offer.amount_cents
    return sum(li.total_list_price_cents for li in order.line_items)


@dataclass(frozen=True, slots=True)
class FulfillmentTotals:
    """Shipping and tax for every line item, in line-item order."""

    shipping: tuple[int, ...]
    taxes: tuple[TaxQuote, ...]

    @property
    def shipping_total_cents(self) -> int:
        return sum(self.shipping)

    @property
    def tax_total_cents(self) -> int:
        return sum(t.sales_tax_cents for t in self.taxes)

    def apply(self, order: Order) -> None:
        for line_item, fee, tax in zip(order.line_items, self.shipping, self.taxes, strict=True):
            line_item.shipping_total_cents = fee
            line_item.sales_tax_cents = tax.sales_tax_cents
            line_item.should_remit_sales_tax = tax.should_remit_sales_tax
        order.shipping_total_cents = self.shipping_total_cents
        order.tax_total_cents = self.tax_total_cents


# ═══════════════════════════════════════════════════════════════════════════════
# TotalsCalculator
# ═══════════════════════════════════════════════════════════════════════════════


class TotalsCalculator:
    def __init__(
        self,
        artworks: ArtworkService,
        partners: PartnerService,
        taxes: TaxService,
        settlement: SettlementPolicy | None = None,
    ) -> None:
        self._artworks = artworks
        self._partners = partners
        self._taxes = taxes
        self._settlement = settlement or SettlementPolicy()

    async def compute_fulfillment(
        self,
        order: Order,
        partner: Partner,
        *,
        fulfillment_type: FulfillmentType | None = None,
        shipping_address: ShippingAddress | None = None,
        artworks: Mapping[str, Artwork] | None = None,
    ) -> Result[FulfillmentTotals, OrderError]:
        """
        Shipping and tax for ``order`` without touching it.

        fulfillment_type / shipping_address override what is on the order,
        so a new destination can be priced before it is stored.
        """
        fulfillment = fulfillment_type or order.fulfillment_type
        address = shipping_address or order.shipping_address
        if fulfillment is None:
            return Error(OrderErrors.missing_fulfillment_type(order.id))
        if fulfillment is FulfillmentType.SHIP and address is None:
            return Error(OrderErrors.missing_shipping_address(order.id))

        match await self._shipping(order, fulfillment, address, artworks or {}):
            case Error(e):
                return Error(e)
            case Ok(shipping):
                pass

        match await self._partner_location(partner):
            case Error(e):
                return Error(e)
            case Ok(location):
                pass

        taxes: list[TaxQuote] = []
        for line_item, fee in zip(order.line_items, shipping, strict=True):
            result = await call_collaborator(
                lambda li=line_item, f=fee: self._taxes.calculate(
                    line_item=li,
                    partner_location=location,
                    shipping_address=address if fulfillment is FulfillmentType.SHIP else None,
                    fulfillment_type=fulfillment,
                    shipping_total_cents=f,
                ),
                on_error=lambda e, li=line_item: OrderErrors.collaborator(
                    OrderErrorKind.TAX_CALCULATION_FAILED, e, line_item_id=li.id
                ),
            )
            match result:
                case Ok(quote):
                    taxes.append(quote)
                case Error(e):
                    return Error(e)

        return Ok(FulfillmentTotals(tuple(shipping), tuple(taxes)))

    async def refresh_fulfillment(
        self,
        order: Order,
        partner: Partner,
        *,
        artworks: Mapping[str, Artwork] | None = None,
    ) -> Result[Order, OrderError]:
        """Recompute and store shipping and tax. Nothing changes on failure."""
        match await self.compute_fulfillment(order, partner, artworks=artworks):
            case Ok(totals):
                totals.apply(order)
                return Ok(order)
            case Error(e):
                return Error(e)

    def update_totals(self, order: Order, rate: Decimal) -> Order:
        """
        Derive items, commission, buyer and seller totals. Pure arithmetic.

        A submitted offer replaces the list prices with its amount.
        """
        items_total = items_total_cents(order)
        fee = commission_fee(items_total, rate)
        buyer_total = items_total + order.shipping_total_cents + order.tax_total_cents
        remitted_tax = sum(
            li.sales_tax_cents for li in order.line_items if li.should_remit_sales_tax
        )

        order.items_total_cents = items_total
        order.commission_rate = rate
        order.commission_fee_cents = fee
        order.buyer_total_cents = buyer_total
        order.seller_total_cents = self._settlement.seller_total(
            buyer_total_cents=buyer_total,
            commission_fee_cents=fee,
            shipping_total_cents=order.shipping_total_cents,
            remitted_tax_cents=remitted_tax,
        )
        logger.debug(
            "Order %s totals: items=%d shipping=%d tax=%d commission=%d buyer=%d seller=%d",
            order.id,
            items_total,
            order.shipping_total_cents,
            order.tax_total_cents,
            fee,
            buyer_total,
            order.seller_total_cents,
        )
        return order

    async def calculate(
        self,
        order: Order,
        partner: Partner,
        *,
        artworks: Mapping[str, Artwork] | None = None,
    ) -> Result[Order, OrderError]:
        """
        Full refresh before a charge.

        Orders priced by a submitted offer keep the offer's shipping and tax.
        """
        match commission_rate(partner):
            case Error(e):
                return Error(e)
            case Ok(rate):
                pass

        offer = order.last_offer
        if offer is None or not offer.is_submitted:
            match await self.refresh_fulfillment(order, partner, artworks=artworks):
                case Error(e):
                    return Error(e)
                case Ok(_):
                    pass

        return Ok(self.update_totals(order, rate))

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    async def _shipping(
        self,
        order: Order,
        fulfillment: FulfillmentType,
        address: ShippingAddress | None,
        known: Mapping[str, Artwork],
    ) -> Result[list[int], OrderError]:
        if fulfillment is FulfillmentType.PICKUP or address is None:
            return Ok([0] * len(order.line_items))

        fees: list[int] = []
        for line_item in order.line_items:
            artwork = known.get(line_item.artwork_id)
            if artwork is None:
                match await self._artwork(line_item.artwork_id):
                    case Ok(fetched):
                        artwork = fetched
                    case Error(e):
                        return Error(e)
            match shipping_fee(artwork, address.country):
                case Ok(fee):
                    fees.append(fee)
                case Error(e):
                    return Error(e)
        return Ok(fees)

    async def _artwork(self, artwork_id: str) -> Result[Artwork, OrderError]:
        return await call_collaborator(
            lambda: self._artworks.get_artwork(artwork_id),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.ARTWORK_LOOKUP_FAILED, e, artwork_id=artwork_id
            ),
        )

    async def _partner_location(self, partner: Partner) -> Result[PartnerLocation, OrderError]:
        location_id = partner.billing_location_id
        if not location_id:
            return Error(OrderErrors.collaborator(
                OrderErrorKind.PARTNER_LOOKUP_FAILED,
                LookupError("partner has no billing location"),
                partner_id=partner.id,
            ))
        return await call_collaborator(
            lambda: self._partners.fetch_partner_location(location_id),
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.PARTNER_LOOKUP_FAILED, e, partner_id=partner.id
            ),
        )


__all__ = (
    "is_domestic",
    "shipping_fee",
    "commission_fee",
    "items_total_cents",
    "FulfillmentTotals",
    "TotalsCalculator",
)
