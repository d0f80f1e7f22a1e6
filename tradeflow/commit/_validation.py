"""
Validation gate — preconditions on the payment instrument and commission data.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from kungfu import Result, Ok, Error

from tradeflow.domain import CreditCard, OrderError, OrderErrors, Partner


def _blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def assert_chargeable(credit_card: CreditCard) -> Result[CreditCard, OrderError]:
    """Card must have an external id, a customer account and be active."""
    if _blank(credit_card.external_id):
        return Error(OrderErrors.credit_card_missing_external_id(credit_card.id))
    customer = credit_card.customer_account
    if customer is None or _blank(customer.external_id):
        return Error(OrderErrors.credit_card_missing_customer(credit_card.id))
    if credit_card.deactivated_at is not None:
        return Error(OrderErrors.credit_card_deactivated(credit_card.id))
    return Ok(credit_card)


def commission_rate(partner: Partner) -> Result[Decimal, OrderError]:
    """The partner's effective commission rate as a Decimal, if present."""
    raw = partner.effective_commission_rate
    if _blank(raw):
        return Error(OrderErrors.missing_commission_rate(partner.id))
    try:
        return Ok(Decimal(str(raw).strip()))
    except InvalidOperation:
        return Error(OrderErrors.missing_commission_rate(partner.id))


def assert_commission_rate(partner: Partner) -> Result[Partner, OrderError]:
    match commission_rate(partner):
        case Ok(_):
            return Ok(partner)
        case Error(e):
            return Error(e)


# Namespace object
class ValidationGate:
    """Precondition checks run before any side effect."""

    assert_chargeable = staticmethod(assert_chargeable)
    assert_commission_rate = staticmethod(assert_commission_rate)
    commission_rate = staticmethod(commission_rate)


__all__ = ("ValidationGate", "assert_chargeable", "assert_commission_rate", "commission_rate")
