from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import JobPriority, JobStatus
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
from .model import JobOrder
from .repository import JobOrderRepository

_SELECT = """
    SELECT j.*, u.full_name AS operator_name
    FROM job_orders j
    LEFT JOIN users u ON u.user_id = j.assigned_to
"""

_FLOAT_COLUMNS = (
    "estimated_hours",
    "route_start_latitude",
    "route_start_longitude",
    "work_start_latitude",
    "work_start_longitude",
    "work_end_latitude",
    "work_end_longitude",
)


def _to_job(r: dict) -> JobOrder:
    floats = {col: to_float(r.get(col)) for col in _FLOAT_COLUMNS}
    return JobOrder(
        job_id=int(r["job_id"]),
        job_number=r["job_number"],
        title=r["title"],
        customer_name=r["customer_name"],
        job_type=r["job_type"],
        location=r["location"],
        address=r["address"],
        status=JobStatus(r["status"]),
        priority=JobPriority(r.get("priority") or JobPriority.MEDIUM.value),
        customer_contact=r.get("customer_contact"),
        customer_email=r.get("customer_email"),
        description=r.get("description"),
        assigned_to=r.get("assigned_to"),
        assigned_operator_name=r.get("operator_name"),
        foreman_name=r.get("foreman_name"),
        foreman_phone=r.get("foreman_phone"),
        salesman_name=r.get("salesman_name"),
        scheduled_date=r.get("scheduled_date"),
        arrival_time=r.get("arrival_time"),
        shop_arrival_time=r.get("shop_arrival_time"),
        equipment_needed=[str(x) for x in load_json_list(r.get("equipment_needed"))],
        po_number=r.get("po_number"),
        assigned_at=r.get("assigned_at"),
        route_started_at=r.get("route_started_at"),
        work_started_at=r.get("work_started_at"),
        work_completed_at=r.get("work_completed_at"),
        completion_signed_at=r.get("completion_signed_at"),
        completion_signer_name=r.get("completion_signer_name"),
        is_multi_day=to_bool(r.get("is_multi_day")),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        **floats,
    )


def _to_row_values(fields: dict[str, Any]) -> dict[str, Any]:
    values = dict(fields)
    if "equipment_needed" in values:
        values["equipment_needed"] = dump_json_list(values["equipment_needed"])
    for key in ("status", "priority"):
        if key in values and hasattr(values[key], "value"):
            values[key] = values[key].value
    if "is_multi_day" in values:
        values["is_multi_day"] = 1 if values["is_multi_day"] else 0
    return values


class MySQLJobOrderRepository(JobOrderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, fields: dict[str, Any]) -> int:
        values = _to_row_values(fields)
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO job_orders({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def get_by_id(self, job_id: int) -> Optional[JobOrder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE j.job_id=%s", (int(job_id),))
            r = fetchone(cur)
            return _to_job(r) if r else None

    def get_by_number(self, job_number: str) -> Optional[JobOrder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE j.job_number=%s", (job_number,))
            r = fetchone(cur)
            return _to_job(r) if r else None

    def list_jobs(
        self,
        *,
        status: Optional[JobStatus] = None,
        assigned_to: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_completed: bool = True,
    ) -> Sequence[JobOrder]:
        where, params = where_clause(
            [
                ("j.status=%s", status.value if status else None),
                ("j.assigned_to=%s", assigned_to),
                ("j.scheduled_date>=%s", start_date),
                ("j.scheduled_date<=%s", end_date),
                ("j.status<>%s", None if include_completed else JobStatus.COMPLETED.value),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY j.scheduled_date IS NULL, j.scheduled_date, j.job_number",
                tuple(params),
            )
            return [_to_job(r) for r in fetchall(cur)]

    def update_fields(self, job_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("job_orders", "job_id", _to_row_values(fields))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(job_id)]))
        return True

    def delete_by_id(self, job_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM job_orders WHERE job_id=%s", (int(job_id),))
            return cur.rowcount > 0
