"""
Inventory coordinator.
"""

import pytest
from kungfu import Error, Ok

from tradeflow.commit import InventoryCoordinator
from tradeflow.domain import OrderErrorKind

from conftest import make_line_item


class TestDeduct:

    async def test_success_yields_line_item(self, inventory):
        li = make_line_item(1)
        match await InventoryCoordinator(inventory).deduct(li):
            case Ok(value):
                assert value is li
            case Error(e):
                pytest.fail(f"unexpected error {e}")
        assert inventory.deducted == ["li-1"]

    async def test_failure_becomes_order_error(self, inventory):
        inventory.fail_on = {"li-1"}
        match await InventoryCoordinator(inventory).deduct(make_line_item(1)):
            case Error(e):
                assert e.kind is OrderErrorKind.INVENTORY_DEDUCT_FAILED
                assert e.data == {"line_item_id": "li-1", "artwork_id": "art-1"}
                assert "insufficient inventory" in e.message
            case Ok(_):
                pytest.fail("expected failure")


class TestUndeduct:

    async def test_undeducts(self, inventory):
        await InventoryCoordinator(inventory).undeduct(make_line_item(1))
        assert inventory.undeducted == ["li-1"]

    async def test_failure_is_swallowed_and_metered(self, inventory, metrics, caplog):
        inventory.fail_undeduct_on = {"li-1"}

        await InventoryCoordinator(inventory, metrics).undeduct(make_line_item(1))

        assert metrics.names() == ["submit.undeduct_inventory_failure"]
        assert "Failed to undeduct" in caplog.text


class TestStep:

    def test_step_is_named_and_compensated(self, inventory):
        coordinator = InventoryCoordinator(inventory)
        step = coordinator.step(make_line_item(3))
        assert step.name == "deduct:li-3"
        assert step.compensate == coordinator.undeduct
