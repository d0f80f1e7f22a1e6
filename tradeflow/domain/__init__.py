"""
Domain — order aggregate, collaborator snapshots, errors, state machine.
"""

from tradeflow.domain._types import (
    OrderState,
    OrderAction,
    FulfillmentType,
    TransactionStatus,
    ArtworkLocation,
    Artwork,
    Partner,
    PartnerLocation,
    CustomerAccount,
    CreditCard,
    MerchantAccount,
    TaxQuote,
    ChargeResult,
    ShippingAddress,
    LineItem,
    Transaction,
    Order,
    Offer,
)
from tradeflow.domain._errors import (
    ErrorCategory,
    OrderErrorKind,
    OrderError,
    OrderErrors,
)
from tradeflow.domain._state import TRANSITIONS, StateMachine

__all__ = (
    # Enums
    "OrderState",
    "OrderAction",
    "FulfillmentType",
    "TransactionStatus",
    # Snapshots
    "ArtworkLocation",
    "Artwork",
    "Partner",
    "PartnerLocation",
    "CustomerAccount",
    "CreditCard",
    "MerchantAccount",
    "TaxQuote",
    "ChargeResult",
    # Aggregate
    "ShippingAddress",
    "LineItem",
    "Transaction",
    "Order",
    "Offer",
    # Errors
    "ErrorCategory",
    "OrderErrorKind",
    "OrderError",
    "OrderErrors",
    # State
    "TRANSITIONS",
    "StateMachine",
)
