"""
Commit — order commit saga, totals, offer submission and shipping.

    from tradeflow.commit import OrderCommands

    commands = OrderCommands(collaborators)
    result = await commands.submit_order(order, user_id="user-1")

    match result:
        case Ok(order):
            print(order.external_charge_id)
        case Error(e):
            print(e.code)
"""

from tradeflow.commit._validation import (
    ValidationGate,
    assert_chargeable,
    assert_commission_rate,
    commission_rate,
)
from tradeflow.commit._totals import (
    FulfillmentTotals,
    TotalsCalculator,
    commission_fee,
    items_total_cents,
    is_domestic,
    shipping_fee,
)
from tradeflow.commit._inventory import InventoryCoordinator
from tradeflow.commit._payment import (
    AUCTION_SALE,
    BUY_NOW_OR_OFFER_SALE,
    PaymentProcessor,
    charge_description,
    charge_metadata,
    parameterize,
)
from tradeflow.commit._orchestrator import (
    CAPTURE_ACTIONS,
    CommitAttempt,
    CommitContext,
    CommitOrchestrator,
    held_authorization,
)
from tradeflow.commit._offer import OfferSubmissionWorkflow
from tradeflow.commit._shipping import ShippingWorkflow
from tradeflow.commit._commands import OrderCommands

__all__ = (
    # Validation
    "ValidationGate",
    "assert_chargeable",
    "assert_commission_rate",
    "commission_rate",
    # Totals
    "FulfillmentTotals",
    "TotalsCalculator",
    "commission_fee",
    "items_total_cents",
    "is_domestic",
    "shipping_fee",
    # Inventory
    "InventoryCoordinator",
    # Payment
    "AUCTION_SALE",
    "BUY_NOW_OR_OFFER_SALE",
    "PaymentProcessor",
    "charge_description",
    "charge_metadata",
    "parameterize",
    # Workflows
    "CAPTURE_ACTIONS",
    "CommitAttempt",
    "CommitContext",
    "CommitOrchestrator",
    "held_authorization",
    "OfferSubmissionWorkflow",
    "ShippingWorkflow",
    "OrderCommands",
)
