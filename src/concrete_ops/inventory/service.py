from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_non_empty, require_positive_int
from ..core.enums import EquipmentStatus, EquipmentType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..equipment.labels import new_qr_code
from ..equipment.repository import EquipmentRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import InventoryItem, InventoryTransaction, StockChange
from .repository import InventoryRepository

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("category", "manufacturer", "model_number", "size", "location")


@dataclass(frozen=True)
class AssignedUnit:
    item: InventoryItem
    operator: User
    equipment_id: int
    serial_number: str
    qr_code: str
    change: StockChange


def _non_negative_int(value: Any, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number")
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    return number


def _equipment_type_for(category: Optional[str]) -> EquipmentType:
    try:
        return EquipmentType((category or "").strip().lower())
    except ValueError:
        return EquipmentType.TOOL


class InventoryService:
    """Use case: keep stock counts and issue units from stock to operators."""

    def __init__(self, inventory: InventoryRepository, equipment: EquipmentRepository, users: UserRepository):
        self._inventory = inventory
        self._equipment = equipment
        self._users = users

    def get_item(self, inventory_id: int) -> InventoryItem:
        item = self._inventory.get_by_id(int(inventory_id))
        if not item:
            raise NotFoundError("Inventory item not found")
        return item

    def list_items(self, *, low_stock_only: bool = False) -> list[InventoryItem]:
        return list(self._inventory.list_items(low_stock_only=low_stock_only))

    def create_item(self, user: User, *, body: dict[str, Any]) -> InventoryItem:
        fields: dict[str, Any] = {"name": require_non_empty(body.get("name"), "Name")}
        for key in TEXT_FIELDS:
            fields[key] = optional_str(body.get(key))
        fields["quantity_in_stock"] = _non_negative_int(body.get("quantity_in_stock", 0), "Quantity")
        fields["reorder_level"] = _non_negative_int(body.get("reorder_level", 0), "Reorder level")
        if body.get("unit_cost") not in (None, ""):
            try:
                fields["unit_cost"] = float(body["unit_cost"])
            except (TypeError, ValueError):
                raise ValidationError("Unit cost must be a number")

        inventory_id = self._inventory.create(fields, performed_by=user.user_id)
        logger.info("Inventory item %s (%s) created with %s in stock", inventory_id, fields["name"], fields["quantity_in_stock"])
        return self.get_item(inventory_id)

    def add_stock(self, user: User, *, inventory_id: Any, quantity: Any, notes: Optional[str] = None) -> StockChange:
        item = self.get_item(require_positive_int(inventory_id, "inventoryId"))
        quantity = require_positive_int(quantity, "Quantity")

        change = self._inventory.add_stock(
            item.inventory_id, quantity=quantity, performed_by=user.user_id, notes=optional_str(notes)
        )
        if change is None:
            raise NotFoundError("Inventory item not found")
        logger.info("Added %s to inventory item %s (%s -> %s)", quantity, item.inventory_id, change.quantity_before, change.quantity_after)
        return change

    def assign(
        self,
        user: User,
        *,
        inventory_id: Any,
        operator_id: Any,
        serial_number: Any,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AssignedUnit:
        if not inventory_id or not operator_id or not serial_number:
            raise ValidationError("Missing required fields: operator_id, serial_number")

        item = self.get_item(require_positive_int(inventory_id, "inventory_id"))
        if item.quantity_in_stock < 1:
            raise ValidationError(f"No {item.name} left in stock")

        operator = self._users.get_by_id(require_positive_int(operator_id, "operator_id"))
        if not operator:
            raise NotFoundError("Operator not found")

        serial = require_non_empty(serial_number, "Serial number")
        existing = self._equipment.get_by_serial(serial)
        if existing:
            raise ConflictError(
                f'Serial number "{serial}" has already been used for {existing.name}. '
                "Please use a unique serial number."
            )

        now = now or now_local()
        notes = optional_str(notes)
        qr_code = new_qr_code()
        change = self._inventory.assign_unit(
            item.inventory_id,
            operator_id=operator.user_id,
            equipment_fields={
                "name": item.name,
                "equipment_type": _equipment_type_for(item.category),
                "brand": item.manufacturer,
                "model": item.model_number,
                "serial_number": serial,
                "qr_code": qr_code,
                "status": EquipmentStatus.ASSIGNED,
                "assigned_to": operator.user_id,
                "assigned_at": now,
                "is_from_inventory": 1,
                "notes": notes,
            },
            performed_by=user.user_id,
            assigned_at=now,
            notes=notes,
        )
        if change is None:
            raise ValidationError(f"No {item.name} left in stock")

        logger.info(
            "Inventory item %s issued as equipment %s (serial %s) to operator %s by %s",
            item.inventory_id,
            change.equipment_id,
            serial,
            operator.user_id,
            user.user_id,
        )
        return AssignedUnit(
            item=item,
            operator=operator,
            equipment_id=int(change.equipment_id or 0),
            serial_number=serial,
            qr_code=qr_code,
            change=change,
        )

    def history(self, *, inventory_id: Optional[int] = None, limit: int = 100) -> list[InventoryTransaction]:
        if inventory_id is not None:
            self.get_item(inventory_id)
        limit = max(1, min(int(limit), 500))
        return list(self._inventory.list_transactions(inventory_id=inventory_id, limit=limit))
