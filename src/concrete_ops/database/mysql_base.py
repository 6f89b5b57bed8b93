from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def duplicate_key_as_conflict(message: str):
    """Re-raise a duplicate-key IntegrityError from the block as ConflictError(message)."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if e.errno != errorcode.ER_DUP_ENTRY:
            raise
        raise ConflictError(message, details=e.msg) from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def where_clause(filters: Iterable[Tuple[str, Any]]) -> Tuple[str, list]:
    """Build `WHERE a AND b` from (sql_fragment, param) pairs, skipping None params.

    Fragments hold exactly one %s placeholder.
    """
    clauses = ["1=1"]
    params: list = []
    for fragment, value in filters:
        if value is None:
            continue
        clauses.append(fragment)
        params.append(value)
    return " AND ".join(clauses), params


def update_statement(table: str, key_column: str, fields: Dict[str, Any]) -> Tuple[str, list]:
    """UPDATE for whitelisted column names (never user-supplied keys)."""
    assignments = ", ".join(f"{col}=%s" for col in fields)
    return f"UPDATE {table} SET {assignments} WHERE {key_column}=%s", list(fields.values())


def to_float(value: Any) -> Optional[float]:
    """DECIMAL columns come back as Decimal; JSON wants float."""
    if value is None:
        return None
    return float(value)


def to_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False


def load_json_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    parsed = json.loads(value)
    return list(parsed) if isinstance(parsed, (list, tuple)) else []


def dump_json_list(value: Optional[Sequence[Any]]) -> str:
    return json.dumps(list(value or []))
