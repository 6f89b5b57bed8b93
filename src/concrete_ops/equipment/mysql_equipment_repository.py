from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import AssignmentStatus, EquipmentStatus, EquipmentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    duplicate_key_as_conflict,
    fetchall,
    fetchone,
    to_bool,
    to_float,
    update_statement,
    where_clause,
)
from .model import Equipment, EquipmentAssignment
from .repository import EquipmentRepository

_SELECT = """
    SELECT e.*, u.full_name AS assigned_to_name
    FROM equipment e
    LEFT JOIN users u ON u.user_id = e.assigned_to
"""

_SELECT_ASSIGNMENTS = """
    SELECT a.*, e.name AS equipment_name, u.full_name AS operator_name
    FROM equipment_assignments a
    JOIN equipment e ON e.equipment_id = a.equipment_id
    LEFT JOIN users u ON u.user_id = a.operator_id
"""


def _to_equipment(r: dict) -> Equipment:
    return Equipment(
        equipment_id=int(r["equipment_id"]),
        name=r["name"],
        equipment_type=EquipmentType(r["equipment_type"]),
        qr_code=r["qr_code"],
        status=EquipmentStatus(r["status"]),
        brand=r.get("brand"),
        model=r.get("model"),
        serial_number=r.get("serial_number"),
        assigned_to=r.get("assigned_to"),
        assigned_to_name=r.get("assigned_to_name"),
        assigned_at=r.get("assigned_at"),
        location=r.get("location"),
        notes=r.get("notes"),
        is_from_inventory=to_bool(r.get("is_from_inventory")),
        total_usage_feet=to_float(r.get("total_usage_feet")) or 0.0,
        created_at=r.get("created_at"),
    )


def _to_assignment(r: dict) -> EquipmentAssignment:
    return EquipmentAssignment(
        assignment_id=int(r["assignment_id"]),
        equipment_id=int(r["equipment_id"]),
        operator_id=int(r["operator_id"]),
        assigned_at=r["assigned_at"],
        status=AssignmentStatus(r["status"]),
        returned_at=r.get("returned_at"),
        checkout_notes=r.get("checkout_notes"),
        return_notes=r.get("return_notes"),
        equipment_name=r.get("equipment_name"),
        operator_name=r.get("operator_name"),
    )


def _to_row_values(fields: dict[str, Any]) -> dict[str, Any]:
    values = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
    if "is_from_inventory" in values:
        values["is_from_inventory"] = 1 if values["is_from_inventory"] else 0
    return values


class MySQLEquipmentRepository(EquipmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, fields: dict[str, Any]) -> int:
        values = _to_row_values(fields)
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            with duplicate_key_as_conflict("Equipment with this serial number or QR code already exists"):
                cur.execute(f"INSERT INTO equipment({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def get_by_id(self, equipment_id: int) -> Optional[Equipment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE e.equipment_id=%s", (int(equipment_id),))
            r = fetchone(cur)
            return _to_equipment(r) if r else None

    def get_by_qr_code(self, qr_code: str) -> Optional[Equipment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE e.qr_code=%s", (qr_code,))
            r = fetchone(cur)
            return _to_equipment(r) if r else None

    def get_by_serial(self, serial_number: str) -> Optional[Equipment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE e.serial_number=%s", (serial_number,))
            r = fetchone(cur)
            return _to_equipment(r) if r else None

    def list_equipment(
        self, *, status: Optional[EquipmentStatus] = None, assigned_to: Optional[int] = None
    ) -> Sequence[Equipment]:
        where, params = where_clause(
            [
                ("e.status=%s", status.value if status else None),
                ("e.assigned_to=%s", assigned_to),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY e.name, e.equipment_id", tuple(params))
            return [_to_equipment(r) for r in fetchall(cur)]

    def update_fields(self, equipment_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("equipment", "equipment_id", _to_row_values(fields))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(equipment_id)]))
        return True

    def log_scan(self, *, equipment_id: int, user_id: Optional[int], action: str, notes: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO equipment_scan_log(equipment_id, user_id, scan_action, notes) VALUES(%s,%s,%s,%s)",
                (int(equipment_id), user_id, action, notes),
            )

    def create_assignment(
        self, *, equipment_id: int, operator_id: int, assigned_at: datetime, notes: Optional[str] = None
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO equipment_assignments(equipment_id, operator_id, assigned_at, checkout_notes, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(equipment_id), int(operator_id), assigned_at, notes, AssignmentStatus.ACTIVE.value),
            )
            return int(cur.lastrowid)

    def get_active_assignment(self, equipment_id: int) -> Optional[EquipmentAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT_ASSIGNMENTS} WHERE a.equipment_id=%s AND a.status=%s ORDER BY a.assigned_at DESC LIMIT 1",
                (int(equipment_id), AssignmentStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def close_assignment(self, assignment_id: int, *, returned_at: datetime, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE equipment_assignments
                SET status=%s, returned_at=%s, return_notes=%s
                WHERE assignment_id=%s AND status=%s
                """,
                (
                    AssignmentStatus.RETURNED.value,
                    returned_at,
                    notes,
                    int(assignment_id),
                    AssignmentStatus.ACTIVE.value,
                ),
            )
            return cur.rowcount > 0

    def list_assignments(
        self, *, equipment_id: Optional[int] = None, operator_id: Optional[int] = None, active_only: bool = False
    ) -> Sequence[EquipmentAssignment]:
        where, params = where_clause(
            [
                ("a.equipment_id=%s", equipment_id),
                ("a.operator_id=%s", operator_id),
                ("a.status=%s", AssignmentStatus.ACTIVE.value if active_only else None),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_ASSIGNMENTS} WHERE {where} ORDER BY a.assigned_at DESC", tuple(params))
            return [_to_assignment(r) for r in fetchall(cur)]
