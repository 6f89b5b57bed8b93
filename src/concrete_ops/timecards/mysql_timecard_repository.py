from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool, to_float, update_statement, where_clause
from .model import Timecard, TimecardRow
from .repository import TimecardRepository

_COLUMNS = """
    t.timecard_id, t.user_id, t.work_date, t.clock_in_time, t.clock_out_time,
    t.clock_in_latitude, t.clock_in_longitude, t.clock_in_accuracy,
    t.clock_out_latitude, t.clock_out_longitude, t.clock_out_accuracy,
    t.total_hours, t.notes, t.is_approved, t.approved_by, t.approved_at
"""


def _to_timecard(r: dict) -> Timecard:
    return Timecard(
        timecard_id=int(r["timecard_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        clock_in_latitude=to_float(r.get("clock_in_latitude")),
        clock_in_longitude=to_float(r.get("clock_in_longitude")),
        clock_in_accuracy=to_float(r.get("clock_in_accuracy")),
        clock_out_latitude=to_float(r.get("clock_out_latitude")),
        clock_out_longitude=to_float(r.get("clock_out_longitude")),
        clock_out_accuracy=to_float(r.get("clock_out_accuracy")),
        total_hours=to_float(r.get("total_hours")),
        notes=r.get("notes"),
        is_approved=to_bool(r.get("is_approved")),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )


class MySQLTimecardRepository(TimecardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, timecard_id: int) -> Optional[Timecard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timecards t WHERE t.timecard_id=%s", (int(timecard_id),))
            r = fetchone(cur)
            return _to_timecard(r) if r else None

    def get_active_for_user(self, user_id: int) -> Optional[Timecard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM timecards t
                WHERE t.user_id=%s AND t.clock_out_time IS NULL
                ORDER BY t.clock_in_time DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_timecard(r) if r else None

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in_time: datetime,
        latitude: float,
        longitude: float,
        accuracy: Optional[float],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timecards(
                    user_id, work_date, clock_in_time,
                    clock_in_latitude, clock_in_longitude, clock_in_accuracy, is_approved
                )
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (int(user_id), work_date, clock_in_time, latitude, longitude, accuracy),
            )
            return int(cur.lastrowid)

    def set_clock_out(
        self,
        timecard_id: int,
        *,
        clock_out_time: datetime,
        latitude: float,
        longitude: float,
        accuracy: Optional[float],
        total_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timecards
                SET clock_out_time=%s, clock_out_latitude=%s, clock_out_longitude=%s,
                    clock_out_accuracy=%s, total_hours=%s
                WHERE timecard_id=%s AND clock_out_time IS NULL
                """,
                (clock_out_time, latitude, longitude, accuracy, total_hours, int(timecard_id)),
            )
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
    ) -> Sequence[Timecard]:
        where, params = where_clause(
            [
                ("t.user_id=%s", int(user_id)),
                ("t.work_date>=%s", start_date),
                ("t.work_date<=%s", end_date),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timecards t WHERE {where} ORDER BY t.clock_in_time DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_timecard(r) for r in fetchall(cur)]

    def list_with_users(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pending_only: bool = False,
        limit: int = 500,
    ) -> Sequence[TimecardRow]:
        where, params = where_clause(
            [
                ("t.user_id=%s", user_id),
                ("t.work_date>=%s", start_date),
                ("t.work_date<=%s", end_date),
                ("t.is_approved=%s", 0 if pending_only else None),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name, u.email
                FROM timecards t
                JOIN users u ON u.user_id = t.user_id
                WHERE {where}
                ORDER BY t.clock_in_time DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                TimecardRow(timecard=_to_timecard(r), full_name=r["full_name"], email=r["email"])
                for r in fetchall(cur)
            ]

    def approve(self, timecard_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timecards SET is_approved=1, approved_by=%s, approved_at=%s WHERE timecard_id=%s",
                (int(approved_by), approved_at, int(timecard_id)),
            )
            return cur.rowcount > 0

    def update_fields(self, timecard_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("timecards", "timecard_id", fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(timecard_id)]))
        return True
