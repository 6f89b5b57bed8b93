from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # full_name, email, password, role, position
    ("Admin Demo", "admin@pontifex.example", "admin123", "admin", "Office Manager"),
    ("Demo Operator", "operator@pontifex.example", "operator123", "operator", "Saw Operator"),
    ("Shop Inventory", "inventory@pontifex.example", "inventory123", "inventory_manager", "Shop Lead"),
)

_DB_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def split_statements(sql: str) -> list[str]:
    """Split a SQL script on top-level ';', ignoring ones inside quoted strings.

    CREATE DATABASE / USE lines and full-line `--` comments are dropped so the
    scripts apply to whichever database DB_CONFIG names.
    """
    sql = _LINE_COMMENT.sub("", _DB_DIRECTIVES.sub("", sql))

    statements: list[str] = []
    start = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            statements.append(sql[start:i])
            start = i + 1
        i += 1
    statements.append(sql[start:])
    return [s.strip() for s in statements if s.strip()]


@contextmanager
def _connected(db_config: dict, *, with_database: bool = True, dictionary: bool = False):
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)
    try:
        yield conn.cursor(dictionary=dictionary)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _connected(db_config, with_database=False) as cur:
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")


def _run_script(db_config: dict, path: str | Path) -> int:
    statements = split_statements(Path(path).read_text(encoding="utf-8"))
    with _connected(db_config) as cur:
        for stmt in statements:
            cur.execute(stmt)
    return len(statements)


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied schema %s (%s statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied seed %s (%s statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Create the demo accounts, or reset their password/role if they already exist."""
    with _connected(db_config, dictionary=True) as cur:
        for full_name, email, password, role, position in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET full_name=%s, password_hash=%s, role=%s, position=%s, is_active=1 WHERE email=%s",
                    (full_name, password_hash, role, position, email),
                )
            else:
                cur.execute(
                    "INSERT INTO users (full_name, email, password_hash, role, position) VALUES (%s, %s, %s, %s, %s)",
                    (full_name, email, password_hash, role, position),
                )
            logger.info("Demo user ready: %s (%s)", email, role)


def list_tables(db_config: dict) -> list[str]:
    with _connected(db_config) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
