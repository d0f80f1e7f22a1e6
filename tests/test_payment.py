"""
Payment processor: charge parameters, description, transactions and capture.
"""

from tradeflow.commit import (
    AUCTION_SALE,
    BUY_NOW_OR_OFFER_SALE,
    PaymentProcessor,
    charge_description,
    charge_metadata,
    parameterize,
)
from tradeflow.config import CommitConfig
from tradeflow.domain import ChargeResult, MerchantAccount, Partner, TransactionStatus

from conftest import NOW, chargeable_card, make_order


def params_for(processor, order, partner, capture=False):
    return processor.build_charge_params(
        order,
        credit_card=chargeable_card(),
        merchant_account=MerchantAccount(id="ma-1", external_id="acct_1"),
        partner=partner,
        capture=capture,
    )


class TestDescription:

    def test_parameterize(self):
        assert parameterize("Gagosian Gallery & Co.") == "gagosian-gallery-co"
        assert parameterize("  Galerie Müller ") == "galerie-muller"

    def test_truncated_upper_cased_and_suffixed(self, partner):
        assert charge_description(partner) == "GAGOSIAN-GAL via Tradeflow"

    def test_configurable(self, partner):
        config = CommitConfig().with_description(suffix="via Test", length=4)
        assert charge_description(partner, config) == "GAGO via Test"

    def test_missing_partner_name(self):
        partner = Partner(id="p", name=None, effective_commission_rate="0.1")
        assert charge_description(partner) == " via Tradeflow"


class TestMetadata:

    def test_buy_now_order(self):
        metadata = charge_metadata(make_order())
        assert metadata == {
            "exchange_order_id": "order-1",
            "buyer_id": "buyer-1",
            "buyer_type": "user",
            "seller_id": "partner-1",
            "seller_type": "gallery",
            "type": BUY_NOW_OR_OFFER_SALE,
        }

    def test_auction_order(self):
        assert charge_metadata(make_order(seller_type="auction"))["type"] == AUCTION_SALE


class TestCharge:

    def test_params(self, gateway, partner, config):
        order = make_order()
        order.buyer_total_cents = 2400_00
        order.seller_total_cents = 2000_00

        params = params_for(PaymentProcessor(gateway, config), order, partner, capture=True)

        assert params.buyer_amount == 2400_00
        assert params.seller_amount == 2000_00
        assert params.currency_code == "USD"
        assert params.capture is True
        assert params.description == "GAGOSIAN-GAL via Tradeflow"

    async def test_success(self, gateway, partner, config):
        order = make_order()
        order.buyer_total_cents = 2400_00
        processor = PaymentProcessor(gateway, config)

        transaction = await processor.charge(order, params_for(processor, order, partner))

        assert transaction.status is TransactionStatus.SUCCESS
        assert transaction.external_id == "ch_123"
        assert transaction.amount_cents == 2400_00
        assert transaction.created_at == NOW
        assert len(gateway.charges) == 1

    async def test_decline(self, gateway, partner, config):
        gateway.decline("card_declined", "Your card was declined.")
        order = make_order()
        processor = PaymentProcessor(gateway, config)

        transaction = await processor.charge(order, params_for(processor, order, partner))

        assert transaction.failed
        assert transaction.external_id is None
        assert transaction.failure_code == "card_declined"
        assert transaction.failure_message == "Your card was declined."

    async def test_gateway_exception_is_a_failed_transaction(self, gateway, partner, config):
        gateway.raises = ConnectionError("gateway unreachable")
        order = make_order()
        processor = PaymentProcessor(gateway, config)

        transaction = await processor.charge(order, params_for(processor, order, partner))

        assert transaction.failed
        assert transaction.failure_code == "gateway_error"
        assert transaction.failure_message == "gateway unreachable"


class TestCapture:

    async def test_success_keeps_authorized_charge_id(self, gateway, config):
        gateway.capture_result = ChargeResult(succeeded=True)
        order = make_order()
        order.buyer_total_cents = 2400_00

        transaction = await PaymentProcessor(gateway, config).capture(order, "ch_held")

        assert gateway.captures == ["ch_held"]
        assert gateway.charges == []
        assert transaction.status is TransactionStatus.SUCCESS
        assert transaction.external_id == "ch_held"
        assert transaction.amount_cents == 2400_00

    async def test_decline(self, gateway, config):
        gateway.decline_capture("expired_authorization", "Authorization expired.")

        transaction = await PaymentProcessor(gateway, config).capture(make_order(), "ch_held")

        assert transaction.failed
        assert transaction.external_id is None
        assert transaction.failure_code == "expired_authorization"

    async def test_gateway_exception_is_a_failed_transaction(self, gateway, config):
        gateway.capture_raises = TimeoutError()

        transaction = await PaymentProcessor(gateway, config).capture(make_order(), "ch_held")

        assert transaction.failed
        assert transaction.failure_code == "gateway_error"
        assert transaction.failure_message == "TimeoutError"
