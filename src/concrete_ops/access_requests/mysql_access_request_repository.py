from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import AccessRequestStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, update_statement, where_clause
from .model import AccessRequest
from .repository import AccessRequestRepository

_COLUMNS = """
    request_id, full_name, email, password_hash, date_of_birth, position, status,
    assigned_role, reviewed_by, reviewed_at, denial_reason, created_at
"""


def _to_request(r: dict) -> AccessRequest:
    return AccessRequest(
        request_id=int(r["request_id"]),
        full_name=r["full_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        date_of_birth=r["date_of_birth"],
        position=r["position"],
        status=AccessRequestStatus(r["status"]),
        created_at=r.get("created_at"),
        assigned_role=Role(r["assigned_role"]) if r.get("assigned_role") else None,
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        denial_reason=r.get("denial_reason"),
    )


class MySQLAccessRequestRepository(AccessRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        date_of_birth: date,
        position: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO access_requests(full_name, email, password_hash, date_of_birth, position, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (full_name, email, password_hash, date_of_birth, position, AccessRequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[AccessRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM access_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_by_email(self, email: str, *, status: AccessRequestStatus) -> Optional[AccessRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM access_requests WHERE email=%s AND status=%s ORDER BY created_at DESC LIMIT 1",
                (email, status.value),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(self, *, status: Optional[AccessRequestStatus] = None) -> Sequence[AccessRequest]:
        where, params = where_clause([("status=%s", status.value if status else None)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM access_requests WHERE {where} ORDER BY created_at DESC, request_id DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def mark_approved(self, request_id: int, *, reviewed_by: int, role: Role, reviewed_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE access_requests
                SET status=%s, assigned_role=%s, reviewed_by=%s, reviewed_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    AccessRequestStatus.APPROVED.value,
                    role.value,
                    int(reviewed_by),
                    reviewed_at,
                    int(request_id),
                    AccessRequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_denied(self, request_id: int, *, reviewed_by: int, reason: str, reviewed_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE access_requests
                SET status=%s, denial_reason=%s, reviewed_by=%s, reviewed_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    AccessRequestStatus.DENIED.value,
                    reason,
                    int(reviewed_by),
                    reviewed_at,
                    int(request_id),
                    AccessRequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def update_fields(self, request_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("access_requests", "request_id", fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(request_id)]))
        return True

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM access_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0
