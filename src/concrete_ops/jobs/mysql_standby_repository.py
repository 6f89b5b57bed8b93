from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import StandbyStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float, where_clause
from .model import StandbyLog
from .repository import StandbyRepository

_SELECT = """
    SELECT s.*, j.job_number, u.full_name AS operator_name
    FROM standby_logs s
    JOIN job_orders j ON j.job_id = s.job_id
    LEFT JOIN users u ON u.user_id = s.operator_id
"""


def _to_standby(r: dict) -> StandbyLog:
    return StandbyLog(
        standby_id=int(r["standby_id"]),
        job_id=int(r["job_id"]),
        operator_id=int(r["operator_id"]),
        reason=r["reason"],
        started_at=r["started_at"],
        status=StandbyStatus(r["status"]),
        ended_at=r.get("ended_at"),
        duration_hours=to_float(r.get("duration_hours")),
        billed_amount=to_float(r.get("billed_amount")),
        created_at=r.get("created_at"),
        job_number=r.get("job_number"),
        operator_name=r.get("operator_name"),
    )


class MySQLStandbyRepository(StandbyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, job_id: int, operator_id: int, reason: str, started_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO standby_logs(job_id, operator_id, reason, status, started_at) VALUES(%s,%s,%s,%s,%s)",
                (int(job_id), int(operator_id), reason, StandbyStatus.ACTIVE.value, started_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, standby_id: int) -> Optional[StandbyLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.standby_id=%s", (int(standby_id),))
            r = fetchone(cur)
            return _to_standby(r) if r else None

    def find_active(self, *, job_id: int, operator_id: int) -> Optional[StandbyLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE s.job_id=%s AND s.operator_id=%s AND s.status=%s ORDER BY s.started_at DESC LIMIT 1",
                (int(job_id), int(operator_id), StandbyStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_standby(r) if r else None

    def list_logs(self, *, job_id: Optional[int] = None, operator_id: Optional[int] = None) -> Sequence[StandbyLog]:
        where, params = where_clause([("s.job_id=%s", job_id), ("s.operator_id=%s", operator_id)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY s.started_at DESC, s.standby_id DESC", tuple(params))
            return [_to_standby(r) for r in fetchall(cur)]

    def finish(self, standby_id: int, *, ended_at: datetime, duration_hours: float, billed_amount: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE standby_logs
                SET ended_at=%s, duration_hours=%s, billed_amount=%s, status=%s
                WHERE standby_id=%s AND status=%s
                """,
                (
                    ended_at,
                    duration_hours,
                    billed_amount,
                    StandbyStatus.COMPLETED.value,
                    int(standby_id),
                    StandbyStatus.ACTIVE.value,
                ),
            )
            return cur.rowcount > 0
