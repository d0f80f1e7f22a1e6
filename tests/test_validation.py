"""
Validation gate: chargeable cards and commission rates.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from kungfu import Error, Ok

from tradeflow.commit import ValidationGate
from tradeflow.domain import CustomerAccount, OrderErrorKind, Partner

from conftest import chargeable_card


def error_kind(result):
    match result:
        case Error(e):
            return e.kind
        case Ok(_):
            return None


class TestAssertChargeable:

    def test_valid_card(self):
        card = chargeable_card()
        match ValidationGate.assert_chargeable(card):
            case Ok(c):
                assert c is card
            case Error(e):
                pytest.fail(f"unexpected error {e}")

    @pytest.mark.parametrize("external_id", [None, "", "   "])
    def test_missing_external_id(self, external_id):
        result = ValidationGate.assert_chargeable(chargeable_card(external_id=external_id))
        assert error_kind(result) is OrderErrorKind.CREDIT_CARD_MISSING_EXTERNAL_ID

    def test_missing_customer_account(self):
        result = ValidationGate.assert_chargeable(chargeable_card(customer_account=None))
        assert error_kind(result) is OrderErrorKind.CREDIT_CARD_MISSING_CUSTOMER

    def test_blank_customer_id(self):
        card = chargeable_card(customer_account=CustomerAccount(external_id=""))
        assert error_kind(ValidationGate.assert_chargeable(card)) is OrderErrorKind.CREDIT_CARD_MISSING_CUSTOMER

    def test_deactivated(self):
        card = chargeable_card(deactivated_at=datetime(2025, 12, 1))
        assert error_kind(ValidationGate.assert_chargeable(card)) is OrderErrorKind.CREDIT_CARD_DEACTIVATED

    def test_external_id_checked_first(self):
        card = chargeable_card(external_id=None, customer_account=None, deactivated_at=datetime(2025, 12, 1))
        assert error_kind(ValidationGate.assert_chargeable(card)) is OrderErrorKind.CREDIT_CARD_MISSING_EXTERNAL_ID

    def test_error_carries_card_id(self):
        match ValidationGate.assert_chargeable(chargeable_card(customer_account=None)):
            case Error(e):
                assert e.data["credit_card_id"] == "cc-1"
                assert e.is_validation
            case Ok(_):
                pytest.fail("expected failure")


class TestCommissionRate:

    @pytest.mark.parametrize("raw", [None, "", "  ", "n/a"])
    def test_missing(self, raw):
        partner = Partner(id="p", name="Gallery", effective_commission_rate=raw)
        assert error_kind(ValidationGate.assert_commission_rate(partner)) is OrderErrorKind.MISSING_COMMISSION_RATE

    @pytest.mark.parametrize("raw", ["0.1", 0.1, Decimal("0.1")])
    def test_parses(self, raw):
        partner = Partner(id="p", name="Gallery", effective_commission_rate=raw)
        match ValidationGate.commission_rate(partner):
            case Ok(rate):
                assert rate == Decimal("0.1")
            case Error(e):
                pytest.fail(f"unexpected error {e}")

    def test_zero_is_a_rate(self):
        partner = Partner(id="p", name="Gallery", effective_commission_rate=0)
        assert error_kind(ValidationGate.assert_commission_rate(partner)) is None
