from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import DifficultyLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float, where_clause
from .model import EquipmentUsage
from .repository import EquipmentUsageRepository

_SELECT = """
    SELECT g.*, j.job_number, u.full_name AS operator_name, e.name AS equipment_name
    FROM equipment_usage g
    JOIN job_orders j ON j.job_id = g.job_id
    LEFT JOIN users u ON u.user_id = g.operator_id
    LEFT JOIN equipment e ON e.equipment_id = g.equipment_id
"""


def _to_usage(r: dict) -> EquipmentUsage:
    return EquipmentUsage(
        usage_id=int(r["usage_id"]),
        job_id=int(r["job_id"]),
        operator_id=int(r["operator_id"]),
        equipment_type=r["equipment_type"],
        task_type=r["task_type"],
        equipment_id=r.get("equipment_id"),
        linear_feet_cut=to_float(r.get("linear_feet_cut")) or 0.0,
        difficulty_level=DifficultyLevel(r.get("difficulty_level") or DifficultyLevel.MEDIUM.value),
        difficulty_notes=r.get("difficulty_notes"),
        blade_type=r.get("blade_type"),
        blades_used=int(r.get("blades_used") or 0),
        blade_wear_notes=r.get("blade_wear_notes"),
        hydraulic_hose_used_ft=to_float(r.get("hydraulic_hose_used_ft")) or 0.0,
        water_hose_used_ft=to_float(r.get("water_hose_used_ft")) or 0.0,
        power_hours=to_float(r.get("power_hours")) or 0.0,
        location_changes=int(r.get("location_changes") or 0),
        setup_time_minutes=int(r.get("setup_time_minutes") or 0),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        job_number=r.get("job_number"),
        operator_name=r.get("operator_name"),
        equipment_name=r.get("equipment_name"),
    )


class MySQLEquipmentUsageRepository(EquipmentUsageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, fields: dict[str, Any]) -> int:
        values = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO equipment_usage({columns}) VALUES({placeholders})", tuple(values.values()))
            usage_id = int(cur.lastrowid)

            feet = values.get("linear_feet_cut") or 0
            if values.get("equipment_id") and feet > 0:
                cur.execute(
                    "UPDATE equipment SET total_usage_feet = total_usage_feet + %s WHERE equipment_id=%s",
                    (feet, int(values["equipment_id"])),
                )
            return usage_id

    def get_by_id(self, usage_id: int) -> Optional[EquipmentUsage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE g.usage_id=%s", (int(usage_id),))
            r = fetchone(cur)
            return _to_usage(r) if r else None

    def list_usage(
        self,
        *,
        job_id: Optional[int] = None,
        operator_id: Optional[int] = None,
        equipment_id: Optional[int] = None,
        equipment_type: Optional[str] = None,
        limit: int = 100,
    ) -> Sequence[EquipmentUsage]:
        where, params = where_clause(
            [
                ("g.job_id=%s", job_id),
                ("g.operator_id=%s", operator_id),
                ("g.equipment_id=%s", equipment_id),
                ("g.equipment_type=%s", equipment_type),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY g.created_at DESC, g.usage_id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_usage(r) for r in fetchall(cur)]
