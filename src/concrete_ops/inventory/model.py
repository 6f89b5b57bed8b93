from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import InventoryTransactionType


@dataclass(frozen=True)
class InventoryItem:
    """Stocked consumables/tools that can be issued to operators as equipment units."""

    inventory_id: int
    name: str
    quantity_in_stock: int = 0
    reorder_level: int = 0
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    model_number: Optional[str] = None
    size: Optional[str] = None
    unit_cost: Optional[float] = None
    location: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity_in_stock <= self.reorder_level

    def to_dict(self) -> dict:
        return {
            "id": self.inventory_id,
            "name": self.name,
            "category": self.category,
            "manufacturer": self.manufacturer,
            "model_number": self.model_number,
            "size": self.size,
            "quantity_in_stock": self.quantity_in_stock,
            "reorder_level": self.reorder_level,
            "unit_cost": self.unit_cost,
            "location": self.location,
            "is_low_stock": self.is_low_stock,
            "created_by": self.created_by,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


@dataclass(frozen=True)
class InventoryTransaction:
    transaction_id: int
    inventory_id: int
    transaction_type: InventoryTransactionType
    quantity_change: int
    quantity_before: int
    quantity_after: int
    operator_id: Optional[int] = None
    equipment_id: Optional[int] = None
    performed_by: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    item_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.transaction_id,
            "inventory_id": self.inventory_id,
            "item_name": self.item_name,
            "transaction_type": self.transaction_type.value,
            "quantity_change": self.quantity_change,
            "quantity_before": self.quantity_before,
            "quantity_after": self.quantity_after,
            "operator_id": self.operator_id,
            "equipment_id": self.equipment_id,
            "performed_by": self.performed_by,
            "notes": self.notes,
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class StockChange:
    quantity_before: int
    quantity_after: int
    equipment_id: Optional[int] = None
