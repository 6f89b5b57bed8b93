from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool, update_statement, where_clause
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, password_hash, role, phone, position, is_active, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        phone=row.get("phone"),
        position=row.get("position"),
        is_active=to_bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        phone: Optional[str] = None,
        position: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, email, password_hash, role, phone, position, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (full_name, email.lower(), password_hash, role.value, phone, position),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, fields: dict[str, Any]) -> bool:
        if not fields:
            return True
        sql, params = update_statement("users", "user_id", fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params + [int(user_id)]))
        return True

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_users(self, *, role: Optional[Role] = None, active_only: bool = False) -> Sequence[User]:
        where, params = where_clause(
            [
                ("role=%s", role.value if role else None),
                ("is_active=%s", 1 if active_only else None),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where} ORDER BY full_name", tuple(params))
            return [_to_user(r) for r in fetchall(cur)]
