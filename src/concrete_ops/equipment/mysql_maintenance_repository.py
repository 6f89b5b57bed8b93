from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import TurnInStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool, to_float, update_statement, where_clause
from .model import MaintenanceAlert, TurnInRequest
from .repository import MaintenanceRepository

_SELECT_TURN_INS = """
    SELECT t.*, e.name AS equipment_name, u.full_name AS requester_name
    FROM equipment_turn_in_requests t
    JOIN equipment e ON e.equipment_id = t.equipment_id
    LEFT JOIN users u ON u.user_id = t.requested_by
"""


def _to_turn_in(r: dict) -> TurnInRequest:
    return TurnInRequest(
        request_id=int(r["request_id"]),
        equipment_id=int(r["equipment_id"]),
        requested_by=int(r["requested_by"]),
        reason=r["reason"],
        description=r["description"],
        urgency=r.get("urgency") or "normal",
        status=TurnInStatus(r["status"]),
        admin_notes=r.get("admin_notes"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        service_started_at=r.get("service_started_at"),
        service_completed_at=r.get("service_completed_at"),
        service_performed_by=r.get("service_performed_by"),
        service_cost=to_float(r.get("service_cost")),
        created_at=r.get("created_at"),
        equipment_name=r.get("equipment_name"),
        requester_name=r.get("requester_name"),
    )


def _to_alert(r: dict) -> MaintenanceAlert:
    return MaintenanceAlert(
        alert_id=int(r["alert_id"]),
        equipment_id=int(r["equipment_id"]),
        alert_type=r["alert_type"],
        severity=r["severity"],
        title=r["title"],
        message=r["message"],
        operator_id=r.get("operator_id"),
        is_resolved=to_bool(r.get("is_resolved")),
        resolved_at=r.get("resolved_at"),
        created_at=r.get("created_at"),
    )


class MySQLMaintenanceRepository(MaintenanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Turn-in requests --------
    def create_turn_in(
        self,
        *,
        equipment_id: int,
        requested_by: int,
        reason: str,
        description: str,
        urgency: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO equipment_turn_in_requests(equipment_id, requested_by, reason, description, urgency, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(equipment_id), int(requested_by), reason, description, urgency, TurnInStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_turn_in(self, request_id: int) -> Optional[TurnInRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_TURN_INS} WHERE t.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_turn_in(r) if r else None

    def list_turn_ins(
        self,
        *,
        status: Optional[TurnInStatus] = None,
        equipment_id: Optional[int] = None,
        requested_by: Optional[int] = None,
    ) -> Sequence[TurnInRequest]:
        where, params = where_clause(
            [
                ("t.status=%s", status.value if status else None),
                ("t.equipment_id=%s", equipment_id),
                ("t.requested_by=%s", requested_by),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_TURN_INS} WHERE {where} ORDER BY t.created_at DESC, t.request_id DESC", tuple(params))
            return [_to_turn_in(r) for r in fetchall(cur)]

    def update_turn_in(self, request_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        values = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
        sql, params = update_statement("equipment_turn_in_requests", "request_id", values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(request_id)]))
        return True

    # -------- Maintenance alerts --------
    def create_alert(
        self,
        *,
        equipment_id: int,
        operator_id: Optional[int],
        alert_type: str,
        severity: str,
        title: str,
        message: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO maintenance_alerts(equipment_id, operator_id, alert_type, severity, title, message)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(equipment_id), operator_id, alert_type, severity, title, message),
            )
            return int(cur.lastrowid)

    def get_alert(self, alert_id: int) -> Optional[MaintenanceAlert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM maintenance_alerts WHERE alert_id=%s", (int(alert_id),))
            r = fetchone(cur)
            return _to_alert(r) if r else None

    def list_alerts(self, *, resolved: Optional[bool] = None) -> Sequence[MaintenanceAlert]:
        where, params = where_clause([("is_resolved=%s", None if resolved is None else int(resolved))])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT * FROM maintenance_alerts WHERE {where} ORDER BY created_at DESC, alert_id DESC",
                tuple(params),
            )
            return [_to_alert(r) for r in fetchall(cur)]

    def resolve_alert(self, alert_id: int, *, resolved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE maintenance_alerts SET is_resolved=1, resolved_at=%s WHERE alert_id=%s AND is_resolved=0",
                (resolved_at, int(alert_id)),
            )
            return cur.rowcount > 0
