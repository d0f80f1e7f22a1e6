"""
tradeflow — marketplace order commit workflows.

Submitting or approving an order deducts inventory for every line item and
charges the buyer as one saga: if anything fails, what was deducted is put
back and a failed charge is recorded and reported.

Modules:
    saga:    steps with compensation, run in sequence with rollback
    domain:  order aggregate, errors, state machine
    commit:  validation, totals, inventory, payment, orchestration
    config:  immutable behavior knobs
    schemas: pydantic models for API adapters

Example:
    from tradeflow import OrderCommands, Collaborators

    commands = OrderCommands(Collaborators(...))
    result = await commands.submit_order(order, user_id="user-1")
"""

from tradeflow import saga
from tradeflow import domain
from tradeflow import commit
from tradeflow import lift
from tradeflow._types import Result, Ok, Error, LazyCoroResult
from tradeflow.collaborators import ChargeParams, Collaborators, NullMetrics
from tradeflow.config import CommitConfig, DEFAULT_CONFIG, SettlementPolicy
from tradeflow.commit import CommitOrchestrator, OrderCommands
from tradeflow.domain import OrderError, OrderErrorKind, OrderErrors, StateMachine

__version__ = "0.1.0"

__all__ = (
    # Modules
    "saga",
    "domain",
    "commit",
    "lift",
    # Core types
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Wiring
    "ChargeParams",
    "Collaborators",
    "NullMetrics",
    "CommitConfig",
    "DEFAULT_CONFIG",
    "SettlementPolicy",
    # Entry points
    "CommitOrchestrator",
    "OrderCommands",
    # Errors / state
    "OrderError",
    "OrderErrorKind",
    "OrderErrors",
    "StateMachine",
)
