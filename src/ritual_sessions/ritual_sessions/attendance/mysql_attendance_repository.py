from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor
from .model import AttendanceMark
from .repository import AttendanceRepository


def _to_mark(row: Dict[str, Any]) -> AttendanceMark:
    return AttendanceMark(
        day=row["day"],
        session_type=SessionType(row["session_type"]),
        participant_id=int(row["participant_id"]),
        status=AttendanceStatus(row["status"]),
        scheduled_at=row["scheduled_at"],
        marked_at=row["marked_at"],
        reason=row.get("reason"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace_roster(self, *, day: date, session_type: SessionType, marks: Sequence[AttendanceMark]) -> None:
        # Single transaction: db_cursor rolls back the DELETE if any INSERT fails.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_marks WHERE day=%s AND session_type=%s",
                (day, session_type.value),
            )
            if not marks:
                return
            cur.executemany(
                """
                INSERT INTO attendance_marks(day, session_type, participant_id, status, reason, scheduled_at, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        m.day,
                        m.session_type.value,
                        int(m.participant_id),
                        m.status.value,
                        m.reason,
                        m.scheduled_at,
                        m.marked_at,
                    )
                    for m in marks
                ],
            )

    def list_for_session(self, *, day: date, session_type: SessionType) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT day, session_type, participant_id, status, reason, scheduled_at, marked_at
                FROM attendance_marks
                WHERE day=%s AND session_type=%s
                ORDER BY participant_id ASC
                """,
                (day, session_type.value),
            )
            return [_to_mark(r) for r in all_rows(cur)]

    def history_for_participant(
        self,
        *,
        participant_id: int,
        session_type: SessionType,
        since: Optional[date] = None,
    ) -> Sequence[AttendanceMark]:
        clauses = ["m.participant_id=%s", "m.session_type=%s", "s.status=%s"]
        params: list[object] = [int(participant_id), session_type.value, SessionStatus.ENDED.value]
        if since is not None:
            clauses.append("m.day>=%s")
            params.append(since)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT m.day, m.session_type, m.participant_id, m.status, m.reason, m.scheduled_at, m.marked_at
                FROM attendance_marks m
                JOIN sessions s ON s.day = m.day AND s.session_type = m.session_type
                WHERE {where}
                ORDER BY m.day DESC
                """,
                tuple(params),
            )
            return [_to_mark(r) for r in all_rows(cur)]
