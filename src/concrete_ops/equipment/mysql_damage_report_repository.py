from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import DamageReportStatus, DamageSeverity
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    dump_json_list,
    fetchall,
    fetchone,
    load_json_list,
    to_bool,
    to_float,
    update_statement,
    where_clause,
)
from .model import DamageReport
from .repository import DamageReportRepository

_SELECT = """
    SELECT d.*, e.name AS equipment_name, r.full_name AS reporter_name, v.full_name AS reviewer_name
    FROM equipment_damage_reports d
    JOIN equipment e ON e.equipment_id = d.equipment_id
    LEFT JOIN users r ON r.user_id = d.reported_by
    LEFT JOIN users v ON v.user_id = d.reviewed_by
"""

_LIST_COLUMNS = ("photo_urls", "video_urls", "parts_needed")


def _to_report(r: dict) -> DamageReport:
    downtime = r.get("estimated_downtime_days")
    return DamageReport(
        report_id=int(r["report_id"]),
        equipment_id=int(r["equipment_id"]),
        reported_by=int(r["reported_by"]),
        damage_title=r["damage_title"],
        damage_description=r["damage_description"],
        severity=DamageSeverity(r["severity"]),
        status=DamageReportStatus(r["status"]),
        job_id=r.get("job_id"),
        last_used_by=r.get("last_used_by"),
        incident_type=r.get("incident_type"),
        incident_description=r.get("incident_description"),
        location_of_incident=r.get("location_of_incident"),
        date_of_incident=r.get("date_of_incident"),
        photo_urls=[str(x) for x in load_json_list(r.get("photo_urls"))],
        video_urls=[str(x) for x in load_json_list(r.get("video_urls"))],
        equipment_operable=to_bool(r.get("equipment_operable")),
        safety_concern=to_bool(r.get("safety_concern")),
        assessment_notes=r.get("assessment_notes"),
        estimated_repair_cost=to_float(r.get("estimated_repair_cost")),
        estimated_downtime_days=int(downtime) if downtime is not None else None,
        parts_needed=[str(x) for x in load_json_list(r.get("parts_needed"))],
        admin_notes=r.get("admin_notes"),
        resolution_notes=r.get("resolution_notes"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        resolved_at=r.get("resolved_at"),
        created_at=r.get("created_at"),
        equipment_name=r.get("equipment_name"),
        reporter_name=r.get("reporter_name"),
        reviewer_name=r.get("reviewer_name"),
    )


def _to_row_values(fields: dict[str, Any]) -> dict[str, Any]:
    values = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
    for key in _LIST_COLUMNS:
        if key in values:
            values[key] = dump_json_list(values[key])
    for key in ("equipment_operable", "safety_concern"):
        if key in values:
            values[key] = 1 if values[key] else 0
    return values


class MySQLDamageReportRepository(DamageReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, fields: dict[str, Any]) -> int:
        values = _to_row_values(fields)
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO equipment_damage_reports({columns}) VALUES({placeholders})", tuple(values.values())
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[DamageReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE d.report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_reports(
        self,
        *,
        equipment_id: Optional[int] = None,
        status: Optional[DamageReportStatus] = None,
        reported_by: Optional[int] = None,
    ) -> Sequence[DamageReport]:
        where, params = where_clause(
            [
                ("d.equipment_id=%s", equipment_id),
                ("d.status=%s", status.value if status else None),
                ("d.reported_by=%s", reported_by),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY d.created_at DESC, d.report_id DESC", tuple(params))
            return [_to_report(r) for r in fetchall(cur)]

    def update_fields(self, report_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("equipment_damage_reports", "report_id", _to_row_values(fields))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(report_id)]))
        return True
