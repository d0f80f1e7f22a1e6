"""
Inventory — deduct / undeduct line items against the inventory service.

Deductions become saga steps whose compensator is undeduct(), so the
saga's compensation log is the exact list of items to give back.
"""

from __future__ import annotations

import logging

from kungfu import LazyCoroResult, Result

from tradeflow import saga as S
from tradeflow.collaborators import InventoryService, Metrics, NullMetrics
from tradeflow.domain import LineItem, OrderError, OrderErrorKind, OrderErrors
from tradeflow.lift import from_awaitable

logger = logging.getLogger("tradeflow.inventory")


class InventoryCoordinator:
    def __init__(self, inventory: InventoryService, metrics: Metrics | None = None) -> None:
        self._inventory = inventory
        self._metrics = metrics or NullMetrics()

    def deduct_lazy(self, line_item: LineItem) -> LazyCoroResult[LineItem, OrderError]:
        """Deduction as a lazy computation; yields the line item on success."""

        async def _deduct() -> LineItem:
            await self._inventory.deduct(line_item)
            logger.debug("Deducted inventory for line item %s", line_item.id)
            return line_item

        return from_awaitable(
            _deduct,
            on_error=lambda e: OrderErrors.collaborator(
                OrderErrorKind.INVENTORY_DEDUCT_FAILED,
                e,
                line_item_id=line_item.id,
                artwork_id=line_item.artwork_id,
            ),
        )

    async def deduct(self, line_item: LineItem) -> Result[LineItem, OrderError]:
        return await self.deduct_lazy(line_item)

    async def undeduct(self, line_item: LineItem) -> None:
        """Best-effort reversal. Never raises; failures are logged and metered."""
        try:
            await self._inventory.undeduct(line_item)
        except Exception:
            logger.error(
                "Failed to undeduct inventory for line item %s (artwork %s)",
                line_item.id,
                line_item.artwork_id,
                exc_info=True,
            )
            self._metrics.increment(
                "submit.undeduct_inventory_failure",
                {"line_item_id": line_item.id, "artwork_id": line_item.artwork_id},
            )
        else:
            logger.info("Undeducted inventory for line item %s", line_item.id)

    def step(self, line_item: LineItem) -> S.SagaStep[LineItem, OrderError]:
        """Saga step: deduct now, undeduct on rollback."""
        return S.step(
            action=self.deduct_lazy(line_item),
            compensate=self.undeduct,
            name=f"deduct:{line_item.id}",
        )


__all__ = ("InventoryCoordinator",)
