from __future__ import annotations

from concrete_ops import DATABASE_DIR
from concrete_ops.database.bootstrap import split_statements


def test_split_ignores_semicolons_inside_strings():
    sql = """
    -- header comment
    CREATE DATABASE IF NOT EXISTS other_db;
    USE other_db;
    INSERT INTO notes (body) VALUES ('first; still first');
    INSERT INTO notes (body) VALUES ("say \\"hi\\"; ok")
    """

    statements = split_statements(sql)

    assert statements == [
        "INSERT INTO notes (body) VALUES ('first; still first')",
        'INSERT INTO notes (body) VALUES ("say \\"hi\\"; ok")',
    ]


def test_split_schema_file_has_every_table():
    statements = split_statements((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8"))

    created = [s for s in statements if s.upper().startswith("CREATE TABLE")]
    assert len(created) == len(statements)
    for table in (
        "users",
        "timecards",
        "job_orders",
        "standby_logs",
        "equipment",
        "equipment_damage_reports",
        "equipment_usage",
        "inventory",
        "job_documents",
    ):
        assert any(f"CREATE TABLE IF NOT EXISTS {table} " in s for s in created)
