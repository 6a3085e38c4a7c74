from pathlib import Path

from src.ritual_sessions.ritual_sessions.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_splits_on_semicolons():
    sql = "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\n"
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


def test_ignores_semicolons_in_quotes_and_comments():
    sql = (
        "-- seed data; do not edit\n"
        "INSERT INTO participants (name) VALUES ('a;b');\n"
        'INSERT INTO participants (name) VALUES ("c;d") -- trailing; note\n'
        ";"
    )
    statements = list(iter_sql_statements(sql))

    assert statements == [
        "INSERT INTO participants (name) VALUES ('a;b')",
        'INSERT INTO participants (name) VALUES ("c;d")',
    ]


def test_keeps_a_trailing_statement_without_semicolon():
    assert list(iter_sql_statements("SELECT 1; SELECT 2")) == ["SELECT 1", "SELECT 2"]


def test_strips_database_selection():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE t (id INT);\n"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_file_creates_every_table():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))
    created = [s.split("(")[0].split()[-1].strip("`") for s in statements if s.upper().startswith("CREATE TABLE")]

    assert created == ["participants", "sessions", "attendance_marks", "learning_points"]
