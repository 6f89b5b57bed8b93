from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from .model import InventoryItem, InventoryTransaction, StockChange


class InventoryRepository(Protocol):
    """Stock levels change together with their transaction row (one DB transaction each)."""

    def create(self, fields: dict[str, Any], *, performed_by: int) -> int:
        """Insert the item and its `initial_stock` transaction."""
        raise NotImplementedError

    def get_by_id(self, inventory_id: int) -> Optional[InventoryItem]:
        raise NotImplementedError

    def list_items(self, *, low_stock_only: bool = False) -> Sequence[InventoryItem]:
        raise NotImplementedError

    def add_stock(
        self, inventory_id: int, *, quantity: int, performed_by: int, notes: Optional[str] = None
    ) -> Optional[StockChange]:
        raise NotImplementedError

    def assign_unit(
        self,
        inventory_id: int,
        *,
        operator_id: int,
        equipment_fields: dict[str, Any],
        performed_by: int,
        assigned_at: datetime,
        notes: Optional[str] = None,
    ) -> Optional[StockChange]:
        """Take one unit out of stock as a new equipment row assigned to the operator.

        Returns None when nothing is left in stock.
        """
        raise NotImplementedError

    def list_transactions(
        self, *, inventory_id: Optional[int] = None, limit: int = 100
    ) -> Sequence[InventoryTransaction]:
        raise NotImplementedError
