"""
Order errors — a discriminated error value carried in ``kungfu.Error``.

Every failure the workflows can report is an ``OrderError`` with a
category (how the caller should treat it) and a kind (what happened).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorCategory(Enum):
    """
    How a failure should be treated.

    VALIDATION: caller or state violates a precondition, never retried.
    PROCESSING: consistency problem found mid-workflow.
    COLLABORATOR: an external call failed unexpectedly.
    """

    VALIDATION = auto()
    PROCESSING = auto()
    COLLABORATOR = auto()


class OrderErrorKind(Enum):
    """Kinds of order errors."""

    # Validation
    INVALID_STATE_TRANSITION = auto()
    INVALID_STATE = auto()
    MISSING_COMMISSION_RATE = auto()
    CREDIT_CARD_MISSING_EXTERNAL_ID = auto()
    CREDIT_CARD_MISSING_CUSTOMER = auto()
    CREDIT_CARD_DEACTIVATED = auto()
    INVALID_OFFER = auto()
    MISSING_DOMESTIC_SHIPPING_FEE = auto()
    MISSING_INTERNATIONAL_SHIPPING_FEE = auto()
    MISSING_SHIPPING_ADDRESS = auto()
    MISSING_FULFILLMENT_TYPE = auto()
    MISSING_CREDIT_CARD = auto()
    # Processing
    ARTWORK_VERSION_MISMATCH = auto()
    CHARGE_FAILED = auto()
    # Collaborator
    ARTWORK_LOOKUP_FAILED = auto()
    CREDIT_CARD_LOOKUP_FAILED = auto()
    PARTNER_LOOKUP_FAILED = auto()
    MERCHANT_ACCOUNT_LOOKUP_FAILED = auto()
    TAX_CALCULATION_FAILED = auto()
    INVENTORY_DEDUCT_FAILED = auto()
    PERSISTENCE_FAILED = auto()

    @property
    def code(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class OrderError:
    """
    Order workflow error.

    Note: data carries identifiers useful to the adapter (partner_id,
    credit_card_id, line_item_id, ...); it never holds secrets.
    """

    category: ErrorCategory
    kind: OrderErrorKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def is_validation(self) -> bool:
        return self.category is ErrorCategory.VALIDATION

    def __str__(self) -> str:
        return f"{self.category.name.lower()}:{self.code}: {self.message}"


def _validation(kind: OrderErrorKind, message: str, **data: Any) -> OrderError:
    return OrderError(ErrorCategory.VALIDATION, kind, message, data)


def _processing(kind: OrderErrorKind, message: str, **data: Any) -> OrderError:
    return OrderError(ErrorCategory.PROCESSING, kind, message, data)


def _collaborator(kind: OrderErrorKind, message: str, **data: Any) -> OrderError:
    return OrderError(ErrorCategory.COLLABORATOR, kind, message, data)


class OrderErrors:
    @staticmethod
    def invalid_state_transition(state: str, action: str) -> OrderError:
        return _validation(
            OrderErrorKind.INVALID_STATE_TRANSITION,
            f"Cannot {action} an order in {state} state",
            state=state,
            action=action,
        )

    @staticmethod
    def invalid_state(state: str, required: str) -> OrderError:
        return _validation(
            OrderErrorKind.INVALID_STATE,
            f"Operation requires a {required} order, got {state}",
            state=state,
            required=required,
        )

    @staticmethod
    def missing_commission_rate(partner_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.MISSING_COMMISSION_RATE,
            "Partner has no commission rate",
            partner_id=partner_id,
        )

    @staticmethod
    def credit_card_missing_external_id(credit_card_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.CREDIT_CARD_MISSING_EXTERNAL_ID,
            "Credit card has no external id",
            credit_card_id=credit_card_id,
        )

    @staticmethod
    def credit_card_missing_customer(credit_card_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.CREDIT_CARD_MISSING_CUSTOMER,
            "Credit card has no customer account",
            credit_card_id=credit_card_id,
        )

    @staticmethod
    def credit_card_deactivated(credit_card_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.CREDIT_CARD_DEACTIVATED,
            "Credit card is deactivated",
            credit_card_id=credit_card_id,
        )

    @staticmethod
    def missing_credit_card(order_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.MISSING_CREDIT_CARD,
            "Order has no credit card",
            order_id=order_id,
        )

    @staticmethod
    def invalid_offer(offer_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.INVALID_OFFER,
            "Offer was already submitted",
            offer_id=offer_id,
        )

    @staticmethod
    def missing_shipping_fee(artwork_id: str, *, domestic: bool) -> OrderError:
        kind = (
            OrderErrorKind.MISSING_DOMESTIC_SHIPPING_FEE
            if domestic
            else OrderErrorKind.MISSING_INTERNATIONAL_SHIPPING_FEE
        )
        scope = "domestic" if domestic else "international"
        return _validation(kind, f"Artwork has no {scope} shipping fee", artwork_id=artwork_id)

    @staticmethod
    def missing_shipping_address(order_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.MISSING_SHIPPING_ADDRESS,
            "Order ships but has no shipping address",
            order_id=order_id,
        )

    @staticmethod
    def missing_fulfillment_type(order_id: str) -> OrderError:
        return _validation(
            OrderErrorKind.MISSING_FULFILLMENT_TYPE,
            "Order has no fulfillment type",
            order_id=order_id,
        )

    @staticmethod
    def artwork_version_mismatch(line_item_id: str, expected: str, current: str) -> OrderError:
        return _processing(
            OrderErrorKind.ARTWORK_VERSION_MISMATCH,
            "Artwork changed since it was added to the order",
            line_item_id=line_item_id,
            expected_version_id=expected,
            current_version_id=current,
        )

    @staticmethod
    def charge_failed(transaction_id: str, failure_code: str | None, message: str | None) -> OrderError:
        return _processing(
            OrderErrorKind.CHARGE_FAILED,
            message or "Charge failed",
            transaction_id=transaction_id,
            failure_code=failure_code,
        )

    @staticmethod
    def collaborator(kind: OrderErrorKind, cause: Exception, **data: Any) -> OrderError:
        return _collaborator(kind, str(cause) or type(cause).__name__, **data)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ErrorCategory",
    "OrderErrorKind",
    "OrderError",
    "OrderErrors",
)
