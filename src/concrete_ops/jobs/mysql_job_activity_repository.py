from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import JobStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, load_json_list, to_float
from .model import DailyLog, PerformanceRecord, StatusHistoryEntry, WorkItem
from .repository import JobActivityRepository


class MySQLJobActivityRepository(JobActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Status history --------
    def add_status_history(
        self,
        *,
        job_id: int,
        operator_id: int,
        status: JobStatus,
        latitude: Optional[float],
        longitude: Optional[float],
        changed_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO job_status_history(job_id, operator_id, status, latitude, longitude, changed_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(job_id), int(operator_id), status.value, latitude, longitude, changed_at),
            )
            return int(cur.lastrowid)

    def list_status_history(self, job_id: int) -> Sequence[StatusHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT history_id, job_id, operator_id, status, latitude, longitude, changed_at
                FROM job_status_history
                WHERE job_id=%s
                ORDER BY changed_at, history_id
                """,
                (int(job_id),),
            )
            return [
                StatusHistoryEntry(
                    history_id=int(r["history_id"]),
                    job_id=int(r["job_id"]),
                    operator_id=int(r["operator_id"]),
                    status=JobStatus(r["status"]),
                    changed_at=r["changed_at"],
                    latitude=to_float(r.get("latitude")),
                    longitude=to_float(r.get("longitude")),
                )
                for r in fetchall(cur)
            ]

    # -------- Daily logs --------
    def add_daily_log(
        self,
        *,
        job_id: int,
        operator_id: int,
        log_date: date,
        route_started_at: Optional[datetime],
        work_started_at: Optional[datetime],
        day_completed_at: datetime,
        work_performed: list[str],
        notes: Optional[str],
        hours_worked: float,
        signer_name: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_job_logs(
                    job_id, operator_id, log_date, route_started_at, work_started_at, day_completed_at,
                    work_performed, notes, hours_worked, signer_name, day_end_latitude, day_end_longitude
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(job_id),
                    int(operator_id),
                    log_date,
                    route_started_at,
                    work_started_at,
                    day_completed_at,
                    dump_json_list(work_performed),
                    notes,
                    hours_worked,
                    signer_name,
                    latitude,
                    longitude,
                ),
            )
            return int(cur.lastrowid)

    def list_daily_logs(self, job_id: int) -> Sequence[DailyLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM daily_job_logs WHERE job_id=%s ORDER BY log_date, log_id",
                (int(job_id),),
            )
            return [
                DailyLog(
                    log_id=int(r["log_id"]),
                    job_id=int(r["job_id"]),
                    operator_id=int(r["operator_id"]),
                    log_date=r["log_date"],
                    day_completed_at=r["day_completed_at"],
                    hours_worked=to_float(r.get("hours_worked")) or 0.0,
                    route_started_at=r.get("route_started_at"),
                    work_started_at=r.get("work_started_at"),
                    work_performed=[str(x) for x in load_json_list(r.get("work_performed"))],
                    notes=r.get("notes"),
                    signer_name=r.get("signer_name"),
                    day_end_latitude=to_float(r.get("day_end_latitude")),
                    day_end_longitude=to_float(r.get("day_end_longitude")),
                )
                for r in fetchall(cur)
            ]

    # -------- Work items --------
    def add_work_item(
        self,
        *,
        job_id: int,
        operator_id: Optional[int],
        work_type: str,
        linear_feet_cut: Optional[float],
        core_quantity: Optional[int],
        core_depth_inches: Optional[float],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_items(
                    job_id, operator_id, work_type, linear_feet_cut, core_quantity, core_depth_inches, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(job_id), operator_id, work_type, linear_feet_cut, core_quantity, core_depth_inches, notes),
            )
            return int(cur.lastrowid)

    def list_work_items(self, job_id: int) -> Sequence[WorkItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM work_items WHERE job_id=%s ORDER BY item_id", (int(job_id),))
            return [
                WorkItem(
                    item_id=int(r["item_id"]),
                    job_id=int(r["job_id"]),
                    work_type=r["work_type"],
                    operator_id=r.get("operator_id"),
                    linear_feet_cut=to_float(r.get("linear_feet_cut")),
                    core_quantity=r.get("core_quantity"),
                    core_depth_inches=to_float(r.get("core_depth_inches")),
                    notes=r.get("notes"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    # -------- Performance --------
    def upsert_performance(self, record: PerformanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO operator_job_history(
                    operator_id, job_id, work_type, linear_feet_cut, hours_worked,
                    productivity_rate, customer_rating, job_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    work_type=VALUES(work_type),
                    linear_feet_cut=VALUES(linear_feet_cut),
                    hours_worked=VALUES(hours_worked),
                    productivity_rate=VALUES(productivity_rate),
                    customer_rating=VALUES(customer_rating),
                    job_date=VALUES(job_date)
                """,
                (
                    int(record.operator_id),
                    int(record.job_id),
                    record.work_type,
                    record.linear_feet_cut,
                    record.hours_worked,
                    record.productivity_rate,
                    record.customer_rating,
                    record.job_date,
                ),
            )
