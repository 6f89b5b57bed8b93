from __future__ import annotations

from datetime import datetime

import pytest

from concrete_ops.core.enums import EquipmentStatus, EquipmentType, InventoryTransactionType
from concrete_ops.core.exceptions import ConflictError, NotFoundError, ValidationError
from concrete_ops.inventory.service import InventoryService

from conftest import InMemoryEquipment, InMemoryInventory

NOW = datetime(2026, 3, 10, 7, 0, 0)


@pytest.fixture
def equipment(users):
    return InMemoryEquipment(users)


@pytest.fixture
def inventory(equipment):
    return InMemoryInventory(equipment)


@pytest.fixture
def service(inventory, equipment, users):
    return InventoryService(inventory, equipment, users)


def _blade(service, user, **overrides):
    body = {"name": '14" diamond blade', "category": "blade", "manufacturer": "Husqvarna", "quantity_in_stock": 2, "reorder_level": 1}
    body.update(overrides)
    return service.create_item(user, body=body)


def test_create_records_initial_stock(service, inventory, manager):
    item = _blade(service, manager)

    assert item.quantity_in_stock == 2
    [tx] = inventory.transactions
    assert tx.transaction_type == InventoryTransactionType.INITIAL_STOCK
    assert (tx.quantity_before, tx.quantity_after, tx.quantity_change) == (0, 2, 2)


def test_create_validation(service, manager):
    with pytest.raises(ValidationError, match="Name is required"):
        service.create_item(manager, body={"quantity_in_stock": 1})
    with pytest.raises(ValidationError, match="cannot be negative"):
        _blade(service, manager, quantity_in_stock=-1)


def test_low_stock_filter(service, manager):
    _blade(service, manager)
    low = _blade(service, manager, name="Core bit 2in", quantity_in_stock=1, reorder_level=3)

    assert [i.inventory_id for i in service.list_items(low_stock_only=True)] == [low.inventory_id]
    assert len(service.list_items()) == 2


def test_add_stock(service, inventory, manager):
    item = _blade(service, manager)

    change = service.add_stock(manager, inventory_id=item.inventory_id, quantity="3", notes="PO 881")

    assert (change.quantity_before, change.quantity_after) == (2, 5)
    assert inventory.transactions[-1].transaction_type == InventoryTransactionType.STOCK_ADDED
    with pytest.raises(ValidationError, match="at least 1"):
        service.add_stock(manager, inventory_id=item.inventory_id, quantity=0)
    with pytest.raises(NotFoundError):
        service.add_stock(manager, inventory_id=42, quantity=1)


def test_assign_turns_a_unit_into_equipment(service, inventory, equipment, manager, operator):
    item = _blade(service, manager)

    unit = service.assign(manager, inventory_id=item.inventory_id, operator_id=operator.user_id, serial_number="BL-001", now=NOW)

    assert unit.change.quantity_after == 1
    assert service.get_item(item.inventory_id).quantity_in_stock == 1
    created = equipment.get_by_id(unit.equipment_id)
    assert created.is_from_inventory is True
    assert created.status == EquipmentStatus.ASSIGNED
    assert created.assigned_to == operator.user_id
    assert created.equipment_type == EquipmentType.BLADE
    assert created.serial_number == "BL-001"
    assert created.qr_code == unit.qr_code
    assert len(equipment.list_assignments(equipment_id=unit.equipment_id, active_only=True)) == 1

    tx = inventory.transactions[-1]
    assert tx.transaction_type == InventoryTransactionType.ASSIGNED
    assert (tx.operator_id, tx.equipment_id, tx.quantity_change) == (operator.user_id, unit.equipment_id, -1)


def test_assign_rejects_reused_serial(service, manager, operator):
    item = _blade(service, manager)
    service.assign(manager, inventory_id=item.inventory_id, operator_id=operator.user_id, serial_number="BL-001")

    with pytest.raises(ConflictError) as exc:
        service.assign(manager, inventory_id=item.inventory_id, operator_id=operator.user_id, serial_number="BL-001")
    assert exc.value.message == (
        'Serial number "BL-001" has already been used for 14" diamond blade. Please use a unique serial number.'
    )


def test_assign_needs_stock_and_fields(service, manager, operator):
    item = _blade(service, manager, quantity_in_stock=0)

    with pytest.raises(ValidationError, match="left in stock"):
        service.assign(manager, inventory_id=item.inventory_id, operator_id=operator.user_id, serial_number="X")
    with pytest.raises(ValidationError, match="Missing required fields"):
        service.assign(manager, inventory_id=item.inventory_id, operator_id=None, serial_number="X")


def test_unknown_category_becomes_tool(service, equipment, manager, operator):
    item = _blade(service, manager, category="Consumables")
    unit = service.assign(manager, inventory_id=item.inventory_id, operator_id=operator.user_id, serial_number="C-1")
    assert equipment.get_by_id(unit.equipment_id).equipment_type == EquipmentType.TOOL


def test_history_newest_first(service, manager):
    item = _blade(service, manager)
    service.add_stock(manager, inventory_id=item.inventory_id, quantity=1)

    kinds = [t.transaction_type for t in service.history(inventory_id=item.inventory_id)]
    assert kinds == [InventoryTransactionType.STOCK_ADDED, InventoryTransactionType.INITIAL_STOCK]
    with pytest.raises(NotFoundError):
        service.history(inventory_id=99)
