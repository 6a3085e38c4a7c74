"""Schema bootstrap for local setups, tests against a real server and the ``init-db`` command."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Quoted strings and comments are consumed whole so a ';' inside them never splits.
_SQL_TOKEN = re.compile(
    r"""
      '(?:[^'\\]|\\.)*'      # single-quoted literal
    | "(?:[^"\\]|\\.)*"      # double-quoted literal
    | --[^\n]*               # line comment
    | ;
    | [^'";-]+
    | -
    """,
    re.VERBOSE | re.DOTALL,
)

_DATABASE_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")

DEMO_PARTICIPANTS = (
    ("Demo Admin", "admin@example.com", "EMP-000"),
    ("Asha Rao", "asha@example.com", "EMP-001"),
    ("Vikram Shah", "vikram@example.com", "EMP-002"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    return _DATABASE_SELECTION.sub("", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    current: list[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        token = match.group(0)
        if token.startswith("--"):
            continue
        if token == ";":
            statement = "".join(current).strip()
            current = []
            if statement:
                yield statement
            continue
        current.append(token)

    statement = "".join(current).strip()
    if statement:
        yield statement


@contextmanager
def _connection(db_config: dict, *, with_database: bool = True) -> Iterator:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)
    try:
        yield conn
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _connection(db_config, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    statements = list(iter_sql_statements(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))))

    with _connection(db_config) as conn:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    logger.info("Applied %d statements from %s to %s", len(statements), schema_path, DBConfig.from_dict(db_config).describe())


def ensure_demo_participants(db_config: dict) -> None:
    with _connection(db_config) as conn:
        cur = conn.cursor()
        cur.executemany(
            """
            INSERT INTO participants (name, email, employee_code)
            VALUES (%s, %s, %s)
            ON DUPLICATE KEY UPDATE name=VALUES(name), archived=0
            """,
            list(DEMO_PARTICIPANTS),
        )
        conn.commit()
    logger.info("Demo participants ready (%d)", len(DEMO_PARTICIPANTS))


def list_tables(db_config: dict) -> list[str]:
    with _connection(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
