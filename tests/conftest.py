"""
Shared fakes and fixtures for the tradeflow test suite.

Every collaborator is an in-memory fake that records its calls, so tests
can assert on exactly which side effects happened and in what order.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest

from tradeflow.collaborators import ChargeParams, Collaborators
from tradeflow.config import CommitConfig
from tradeflow.domain import (
    Artwork,
    ArtworkLocation,
    ChargeResult,
    CreditCard,
    CustomerAccount,
    FulfillmentType,
    LineItem,
    MerchantAccount,
    Order,
    OrderState,
    Partner,
    PartnerLocation,
    ShippingAddress,
    TaxQuote,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


# ============================================================================
# Fakes
# ============================================================================

class FakeArtworks:
    def __init__(self, artworks: Mapping[str, Artwork] = ()):
        self.artworks = dict(artworks)
        self.calls: list[str] = []
        self.fail = False

    async def get_artwork(self, artwork_id: str) -> Artwork:
        self.calls.append(artwork_id)
        if self.fail:
            raise ConnectionError("artwork service down")
        return self.artworks[artwork_id]


class FakePartners:
    def __init__(self, partner: Partner, location: PartnerLocation):
        self.partner = partner
        self.location = location
        self.calls: list[str] = []
        self.fail = False

    async def fetch_partner(self, seller_id: str) -> Partner:
        self.calls.append(seller_id)
        if self.fail:
            raise ConnectionError("partner service down")
        return self.partner

    async def fetch_partner_location(self, location_id: str) -> PartnerLocation:
        return self.location


class FakeCreditCards:
    def __init__(self, card: CreditCard):
        self.card = card
        self.calls: list[str] = []

    async def get_credit_card(self, credit_card_id: str) -> CreditCard:
        self.calls.append(credit_card_id)
        return self.card


class FakeMerchantAccounts:
    def __init__(self, account: MerchantAccount):
        self.account = account
        self.calls: list[str] = []

    async def get_merchant_account(self, seller_id: str) -> MerchantAccount:
        self.calls.append(seller_id)
        return self.account


class FakeInventory:
    """Records deductions; fails on the line items named in ``fail_on``."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self.fail_undeduct_on: set[str] = set()

    @property
    def deducted(self) -> list[str]:
        return [li for op, li in self.calls if op == "deduct"]

    @property
    def undeducted(self) -> list[str]:
        return [li for op, li in self.calls if op == "undeduct"]

    async def deduct(self, line_item: LineItem) -> None:
        if line_item.id in self.fail_on:
            raise RuntimeError(f"insufficient inventory for {line_item.artwork_id}")
        self.calls.append(("deduct", line_item.id))

    async def undeduct(self, line_item: LineItem) -> None:
        if line_item.id in self.fail_undeduct_on:
            raise RuntimeError("inventory service down")
        self.calls.append(("undeduct", line_item.id))


class FakeTaxes:
    """Flat tax per line item; remits when configured."""

    def __init__(self, per_item_cents: int = 0, remit: bool = False):
        self.per_item_cents = per_item_cents
        self.remit = remit
        self.calls: list[dict[str, Any]] = []
        self.fail = False

    async def calculate(self, **kwargs: Any) -> TaxQuote:
        self.calls.append(kwargs)
        if self.fail:
            raise TimeoutError("tax service timeout")
        return TaxQuote(sales_tax_cents=self.per_item_cents, should_remit_sales_tax=self.remit)


class FakeGateway:
    def __init__(self):
        self.charges: list[ChargeParams] = []
        self.result = ChargeResult(succeeded=True, external_id="ch_123")
        self.raises: Exception | None = None
        self.captures: list[str] = []
        self.capture_result = ChargeResult(succeeded=True, external_id="ch_123")
        self.capture_raises: Exception | None = None

    def decline(self, code: str = "card_declined", message: str = "Your card was declined."):
        self.result = ChargeResult(succeeded=False, failure_code=code, failure_message=message)

    def decline_capture(self, code: str = "expired_authorization", message: str = "Authorization expired."):
        self.capture_result = ChargeResult(succeeded=False, failure_code=code, failure_message=message)

    async def charge(self, params: ChargeParams) -> ChargeResult:
        self.charges.append(params)
        if self.raises is not None:
            raise self.raises
        return self.result

    async def capture(self, external_charge_id: str) -> ChargeResult:
        self.captures.append(external_charge_id)
        if self.capture_raises is not None:
            raise self.capture_raises
        return self.capture_result


class FakeNotifier:
    def __init__(self):
        self.failed_charges: list[tuple[str, str | None]] = []
        self.fail = False

    async def enqueue_failed_charge(self, transaction_id: str, actor: str | None) -> None:
        if self.fail:
            raise RuntimeError("queue unavailable")
        self.failed_charges.append((transaction_id, actor))


class FakeOrders:
    def __init__(self):
        self.saved: list[Order] = []
        self.fail = False

    async def save(self, order: Order) -> None:
        if self.fail:
            raise RuntimeError("database unavailable")
        self.saved.append(order)


class RecordingMetrics:
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def increment(self, name: str, tags: Mapping[str, Any] | None = None) -> None:
        self.events.append((name, dict(tags or {})))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


# ============================================================================
# Builders
# ============================================================================

def make_artwork(
    artwork_id: str,
    *,
    country: str = "US",
    domestic: int | None = 200_00,
    international: int | None = 300_00,
    version: str | None = None,
) -> Artwork:
    return Artwork(
        id=artwork_id,
        current_version_id=version or f"{artwork_id}-v1",
        location=ArtworkLocation(country=country, city="New York", state="NY"),
        domestic_shipping_fee_cents=domestic,
        international_shipping_fee_cents=international,
    )


def make_line_item(index: int, price: int = 1000_00) -> LineItem:
    return LineItem(
        id=f"li-{index}",
        artwork_id=f"art-{index}",
        artwork_version_id=f"art-{index}-v1",
        list_price_cents=price,
    )


def make_order(
    *line_items: LineItem,
    state: OrderState = OrderState.PENDING,
    fulfillment_type: FulfillmentType | None = FulfillmentType.SHIP,
    country: str = "US",
    seller_type: str = "gallery",
) -> Order:
    return Order(
        id="order-1",
        buyer_id="buyer-1",
        buyer_type="user",
        seller_id="partner-1",
        seller_type=seller_type,
        state=state,
        line_items=list(line_items) or [make_line_item(1), make_line_item(2)],
        fulfillment_type=fulfillment_type,
        shipping_address=ShippingAddress(
            name="Fname Lname",
            country=country,
            city="Tokyo" if country != "US" else "New York",
            region="NY",
            postal_code="10012",
            address_line1="401 Broadway",
        ),
        credit_card_id="cc-1",
    )


def chargeable_card(**overrides: Any) -> CreditCard:
    fields: dict[str, Any] = {
        "id": "cc-1",
        "external_id": "card_1",
        "customer_account": CustomerAccount(external_id="cus_1"),
        "deactivated_at": None,
    }
    fields.update(overrides)
    return CreditCard(**fields)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config() -> CommitConfig:
    return CommitConfig().with_clock(lambda: NOW)


@pytest.fixture
def partner() -> Partner:
    return Partner(
        id="partner-1",
        name="Gagosian Gallery",
        effective_commission_rate="0.2",
        billing_location_id="loc-1",
    )


@pytest.fixture
def artworks() -> FakeArtworks:
    return FakeArtworks({a.id: a for a in (make_artwork("art-1"), make_artwork("art-2"), make_artwork("art-3"))})


@pytest.fixture
def partners(partner) -> FakePartners:
    return FakePartners(partner, PartnerLocation(country="US", city="New York", state="NY"))


@pytest.fixture
def credit_cards() -> FakeCreditCards:
    return FakeCreditCards(chargeable_card())


@pytest.fixture
def merchant_accounts() -> FakeMerchantAccounts:
    return FakeMerchantAccounts(MerchantAccount(id="ma-1", external_id="acct_1"))


@pytest.fixture
def inventory() -> FakeInventory:
    return FakeInventory()


@pytest.fixture
def taxes() -> FakeTaxes:
    return FakeTaxes()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def orders() -> FakeOrders:
    return FakeOrders()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def collaborators(
    artworks, partners, credit_cards, merchant_accounts, inventory, taxes, gateway, notifier, orders, metrics
) -> Collaborators:
    return Collaborators(
        artworks=artworks,
        partners=partners,
        credit_cards=credit_cards,
        merchant_accounts=merchant_accounts,
        inventory=inventory,
        taxes=taxes,
        payments=gateway,
        notifier=notifier,
        orders=orders,
        metrics=metrics,
    )


@pytest.fixture
def rate() -> Decimal:
    return Decimal("0.2")
