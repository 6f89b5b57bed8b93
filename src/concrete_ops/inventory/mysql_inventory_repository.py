from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import AssignmentStatus, InventoryTransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as_conflict, fetchall, fetchone, to_float, where_clause
from .model import InventoryItem, InventoryTransaction, StockChange
from .repository import InventoryRepository


def _to_item(r: dict) -> InventoryItem:
    return InventoryItem(
        inventory_id=int(r["inventory_id"]),
        name=r["name"],
        quantity_in_stock=int(r.get("quantity_in_stock") or 0),
        reorder_level=int(r.get("reorder_level") or 0),
        category=r.get("category"),
        manufacturer=r.get("manufacturer"),
        model_number=r.get("model_number"),
        size=r.get("size"),
        unit_cost=to_float(r.get("unit_cost")),
        location=r.get("location"),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_transaction(r: dict) -> InventoryTransaction:
    return InventoryTransaction(
        transaction_id=int(r["transaction_id"]),
        inventory_id=int(r["inventory_id"]),
        transaction_type=InventoryTransactionType(r["transaction_type"]),
        quantity_change=int(r["quantity_change"]),
        quantity_before=int(r["quantity_before"]),
        quantity_after=int(r["quantity_after"]),
        operator_id=r.get("operator_id"),
        equipment_id=r.get("equipment_id"),
        performed_by=r.get("performed_by"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        item_name=r.get("item_name"),
    )


def _insert_transaction(
    cur,
    *,
    inventory_id: int,
    transaction_type: InventoryTransactionType,
    before: int,
    after: int,
    performed_by: int,
    operator_id: Optional[int] = None,
    equipment_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> None:
    cur.execute(
        """
        INSERT INTO inventory_transactions(
            inventory_id, transaction_type, quantity_change, quantity_before, quantity_after,
            operator_id, equipment_id, performed_by, notes
        )
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            int(inventory_id),
            transaction_type.value,
            after - before,
            before,
            after,
            operator_id,
            equipment_id,
            int(performed_by),
            notes,
        ),
    )


class MySQLInventoryRepository(InventoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, fields: dict[str, Any], *, performed_by: int) -> int:
        values = dict(fields)
        values["created_by"] = int(performed_by)
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO inventory({columns}) VALUES({placeholders})", tuple(values.values()))
            inventory_id = int(cur.lastrowid)
            _insert_transaction(
                cur,
                inventory_id=inventory_id,
                transaction_type=InventoryTransactionType.INITIAL_STOCK,
                before=0,
                after=int(values.get("quantity_in_stock") or 0),
                performed_by=performed_by,
                notes="Initial stock",
            )
            return inventory_id

    def get_by_id(self, inventory_id: int) -> Optional[InventoryItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM inventory WHERE inventory_id=%s", (int(inventory_id),))
            r = fetchone(cur)
            return _to_item(r) if r else None

    def list_items(self, *, low_stock_only: bool = False) -> Sequence[InventoryItem]:
        where = "quantity_in_stock <= reorder_level" if low_stock_only else "1=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT * FROM inventory WHERE {where} ORDER BY name, inventory_id")
            return [_to_item(r) for r in fetchall(cur)]

    def _lock_stock(self, cur, inventory_id: int) -> Optional[int]:
        cur.execute("SELECT quantity_in_stock FROM inventory WHERE inventory_id=%s FOR UPDATE", (int(inventory_id),))
        r = fetchone(cur)
        return int(r["quantity_in_stock"]) if r else None

    def add_stock(
        self, inventory_id: int, *, quantity: int, performed_by: int, notes: Optional[str] = None
    ) -> Optional[StockChange]:
        with db_cursor(self._conn_factory) as (_, cur):
            before = self._lock_stock(cur, inventory_id)
            if before is None:
                return None
            after = before + int(quantity)
            cur.execute("UPDATE inventory SET quantity_in_stock=%s WHERE inventory_id=%s", (after, int(inventory_id)))
            _insert_transaction(
                cur,
                inventory_id=inventory_id,
                transaction_type=InventoryTransactionType.STOCK_ADDED,
                before=before,
                after=after,
                performed_by=performed_by,
                notes=notes,
            )
            return StockChange(quantity_before=before, quantity_after=after)

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
        with db_cursor(self._conn_factory) as (_, cur):
            before = self._lock_stock(cur, inventory_id)
            if before is None or before < 1:
                return None
            after = before - 1
            cur.execute("UPDATE inventory SET quantity_in_stock=%s WHERE inventory_id=%s", (after, int(inventory_id)))

            values = {k: (v.value if hasattr(v, "value") else v) for k, v in equipment_fields.items()}
            columns = ", ".join(values)
            placeholders = ",".join(["%s"] * len(values))
            with duplicate_key_as_conflict("Equipment with this serial number or QR code already exists"):
                cur.execute(f"INSERT INTO equipment({columns}) VALUES({placeholders})", tuple(values.values()))
            equipment_id = int(cur.lastrowid)

            cur.execute(
                """
                INSERT INTO equipment_assignments(equipment_id, operator_id, assigned_at, checkout_notes, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (equipment_id, int(operator_id), assigned_at, notes, AssignmentStatus.ACTIVE.value),
            )
            _insert_transaction(
                cur,
                inventory_id=inventory_id,
                transaction_type=InventoryTransactionType.ASSIGNED,
                before=before,
                after=after,
                performed_by=performed_by,
                operator_id=operator_id,
                equipment_id=equipment_id,
                notes=notes,
            )
            return StockChange(quantity_before=before, quantity_after=after, equipment_id=equipment_id)

    def list_transactions(
        self, *, inventory_id: Optional[int] = None, limit: int = 100
    ) -> Sequence[InventoryTransaction]:
        where, params = where_clause([("t.inventory_id=%s", inventory_id)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT t.*, i.name AS item_name
                FROM inventory_transactions t
                JOIN inventory i ON i.inventory_id = t.inventory_id
                WHERE {where}
                ORDER BY t.created_at DESC, t.transaction_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_transaction(r) for r in fetchall(cur)]
