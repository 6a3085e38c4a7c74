from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, first_row
from .model import Participant
from .repository import ParticipantRepository


def _to_participant(row: Dict[str, Any]) -> Participant:
    return Participant(
        participant_id=int(row["participant_id"]),
        name=row["name"],
        email=row["email"],
        employee_code=row.get("employee_code"),
        archived=bool(row.get("archived", False)),
    )


class MySQLParticipantRepository(ParticipantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, participant_id: int) -> Optional[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT participant_id, name, email, employee_code, archived
                FROM participants
                WHERE participant_id=%s
                """,
                (int(participant_id),),
            )
            row = first_row(cur)
            return _to_participant(row) if row else None

    def list_active(self) -> Sequence[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT participant_id, name, email, employee_code, archived
                FROM participants
                WHERE archived=0
                ORDER BY participant_id ASC
                """
            )
            return [_to_participant(r) for r in all_rows(cur)]
