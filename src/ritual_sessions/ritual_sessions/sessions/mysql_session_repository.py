from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import SessionStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, first_row
from .model import Session
from .repository import SessionRepository

_COLUMNS = "day, session_type, status, scheduled_at, scheduled_by, started_at, ended_at, synced, version"


def _to_session(row: Dict[str, Any]) -> Session:
    return Session(
        day=row["day"],
        session_type=SessionType(row["session_type"]),
        status=SessionStatus(row["status"]),
        scheduled_at=row["scheduled_at"],
        scheduled_by=row["scheduled_by"],
        started_at=row.get("started_at"),
        ended_at=row.get("ended_at"),
        synced=bool(row.get("synced", False)),
        version=int(row.get("version", 0)),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, day: date, session_type: SessionType) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sessions WHERE day=%s AND session_type=%s",
                (day, session_type.value),
            )
            row = first_row(cur)
            return _to_session(row) if row else None

    def create(self, session: Session) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO sessions({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.day,
                        session.session_type.value,
                        session.status.value,
                        session.scheduled_at,
                        session.scheduled_by,
                        session.started_at,
                        session.ended_at,
                        int(session.synced),
                        int(session.version),
                    ),
                )
        except IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                return False
            raise
        return True

    def update(self, session: Session, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sessions
                SET status=%s, scheduled_at=%s, started_at=%s, ended_at=%s, synced=%s, version=%s
                WHERE day=%s AND session_type=%s AND version=%s
                """,
                (
                    session.status.value,
                    session.scheduled_at,
                    session.started_at,
                    session.ended_at,
                    int(session.synced),
                    int(session.version),
                    session.day,
                    session.session_type.value,
                    int(expected_version),
                ),
            )
            return cur.rowcount == 1

    def list_range(self, *, start: date, end: date, session_type: Optional[SessionType] = None) -> Sequence[Session]:
        clauses = ["day BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if session_type is not None:
            clauses.append("session_type=%s")
            params.append(session_type.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sessions WHERE {where} ORDER BY day ASC, session_type ASC",
                tuple(params),
            )
            return [_to_session(r) for r in all_rows(cur)]
