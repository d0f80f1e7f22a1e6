"""
Adapter schemas.
"""

import pytest
from kungfu import Error, Ok
from pydantic import ValidationError

from tradeflow.domain import FulfillmentType, OrderErrors, OrderState, ShippingAddress
from tradeflow.schemas import ErrorOut, OrderOrErrorOut, OrderOut, SetShippingIn

from conftest import make_order


class TestSetShippingIn:

    def test_ship(self):
        payload = SetShippingIn.model_validate({
            "fulfillment_type": "ship",
            "shipping": {"name": "Fname Lname", "country": "JP", "city": "Tokyo"},
        })

        fulfillment_type, address = payload.to_domain()

        assert fulfillment_type is FulfillmentType.SHIP
        assert address == ShippingAddress(name="Fname Lname", country="JP", city="Tokyo")

    def test_pickup_without_address(self):
        fulfillment_type, address = SetShippingIn(fulfillment_type="pickup").to_domain()
        assert fulfillment_type is FulfillmentType.PICKUP
        assert address is None

    def test_unknown_fulfillment_type(self):
        with pytest.raises(ValidationError):
            SetShippingIn.model_validate({"fulfillment_type": "teleport"})


class TestOrderOut:

    def test_from_domain(self):
        order = make_order(state=OrderState.SUBMITTED)
        order.buyer_total_cents = 2400_00
        order.external_charge_id = "ch_123"

        out = OrderOut.from_domain(order)

        assert out.id == "order-1"
        assert out.state == "submitted"
        assert out.fulfillment_type == "ship"
        assert out.buyer_total_cents == 2400_00
        assert out.external_charge_id == "ch_123"
        assert out.last_transaction_failed is False


class TestOrderOrErrorOut:

    def test_ok(self):
        out = OrderOrErrorOut.from_domain(Ok(make_order()))
        assert out.order is not None
        assert out.error is None

    def test_validation_error(self):
        error = OrderErrors.credit_card_deactivated("cc-1")

        out = OrderOrErrorOut.from_domain(Error(error))

        assert out.order is None
        assert out.error == ErrorOut(type="validation", code="credit_card_deactivated", data={"credit_card_id": "cc-1"})

    def test_processing_error_drops_empty_data(self):
        error = OrderErrors.charge_failed("txn_1", None, None)

        out = ErrorOut.from_domain(error)

        assert out.type == "processing"
        assert out.code == "charge_failed"
        assert out.data == {"transaction_id": "txn_1"}
