"""
Order state machine — transition table + guarded transition body.

    machine = StateMachine()
    result = await machine.transition(order, OrderAction.APPROVE, body)

The body runs only when (order.state, action) is in the table, and the new
state is applied only when the body returns Ok.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

from kungfu import Result, Ok, Error

from tradeflow._types import AsyncResultFn
from tradeflow.domain._errors import OrderError, OrderErrors
from tradeflow.domain._types import Order, OrderAction, OrderState

logger = logging.getLogger("tradeflow.state")

S = OrderState
A = OrderAction

TRANSITIONS: Mapping[tuple[OrderState, OrderAction], OrderState] = MappingProxyType({
    (S.PENDING, A.SUBMIT): S.SUBMITTED,
    (S.PENDING, A.APPROVE): S.APPROVED,
    (S.SUBMITTED, A.APPROVE): S.APPROVED,
    (S.SUBMITTED, A.REJECT): S.REJECTED,
    (S.APPROVED, A.FULFILL): S.FULFILLED,
    (S.PENDING, A.CANCEL): S.CANCELED,
    (S.SUBMITTED, A.CANCEL): S.CANCELED,
    (S.APPROVED, A.CANCEL): S.CANCELED,
})


class StateMachine:
    def __init__(
        self,
        transitions: Mapping[tuple[OrderState, OrderAction], OrderState] = TRANSITIONS,
        expirations: Mapping[OrderState, timedelta] | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._transitions = transitions
        self._expirations = expirations or {}
        self._clock = clock

    def target(self, state: OrderState, action: OrderAction) -> OrderState | None:
        return self._transitions.get((state, action))

    def can(self, order: Order, action: OrderAction) -> bool:
        return self.target(order.state, action) is not None

    def check(self, order: Order, action: OrderAction) -> Result[OrderState, OrderError]:
        """Guard only: the state ``action`` would lead to, or a validation error."""
        target = self.target(order.state, action)
        if target is None:
            return Error(OrderErrors.invalid_state_transition(order.state.value, action.value))
        return Ok(target)

    def require(self, order: Order, state: OrderState) -> Result[Order, OrderError]:
        """Guard for operations that assume a pre-state (e.g. set shipping)."""
        if order.state is not state:
            return Error(OrderErrors.invalid_state(order.state.value, state.value))
        return Ok(order)

    async def transition[T](
        self,
        order: Order,
        action: OrderAction,
        body: AsyncResultFn[T, OrderError],
    ) -> Result[T, OrderError]:
        """
        Run ``body`` under the guard for ``action``.

        Illegal transitions never call the body and leave the order untouched.
        A failing body leaves the state as it was.
        """
        match self.check(order, action):
            case Error(e):
                return Error(e)
            case Ok(target):
                pass

        result = await body()
        match result:
            case Ok(value):
                self.apply(order, target)
                return Ok(value)
            case Error(e):
                return Error(e)

    def apply(self, order: Order, state: OrderState) -> None:
        previous = order.state
        now = self._clock()
        order.state = state
        order.state_updated_at = now
        self.refresh_expiry(order)
        logger.info("Order %s: %s -> %s", order.id, previous.value, state.value)

    def refresh_expiry(self, order: Order) -> None:
        expiry = self._expirations.get(order.state)
        if order.state_updated_at is None or expiry is None:
            order.state_expires_at = None
        else:
            order.state_expires_at = order.state_updated_at + expiry


__all__ = ("TRANSITIONS", "StateMachine")
