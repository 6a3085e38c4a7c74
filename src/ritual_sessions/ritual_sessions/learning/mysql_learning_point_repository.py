from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, first_row
from .model import LearningPoint, PointType
from .repository import LearningPointRepository


def _to_point(row: Dict[str, Any]) -> LearningPoint:
    details = row.get("details") or {}
    if isinstance(details, (str, bytes)):
        details = json.loads(details)
    return LearningPoint(
        point_id=int(row["point_id"]),
        participant_id=int(row["participant_id"]),
        day=row["day"],
        task_name=row["task_name"],
        point_type=PointType(row["point_type"]),
        created_at=row["created_at"],
        details=details,
    )


class MySQLLearningPointRepository(LearningPointRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, point_id: int) -> Optional[LearningPoint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT point_id, participant_id, day, task_name, point_type, details, created_at
                FROM learning_points
                WHERE point_id=%s
                """,
                (int(point_id),),
            )
            row = first_row(cur)
            return _to_point(row) if row else None

    def create(
        self,
        *,
        participant_id: int,
        day: date,
        task_name: str,
        point_type: PointType,
        details: dict,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO learning_points(participant_id, day, task_name, point_type, details, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(participant_id), day, task_name, point_type.value, json.dumps(details), created_at),
            )
            return int(cur.lastrowid)

    def update(self, *, point_id: int, task_name: str, point_type: PointType, details: dict) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE learning_points
                SET task_name=%s, point_type=%s, details=%s
                WHERE point_id=%s
                """,
                (task_name, point_type.value, json.dumps(details), int(point_id)),
            )
            return cur.rowcount > 0

    def list_for_day(self, *, day: date, participant_id: Optional[int] = None) -> Sequence[LearningPoint]:
        clauses = ["day=%s"]
        params: list[object] = [day]
        if participant_id is not None:
            clauses.append("participant_id=%s")
            params.append(int(participant_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT point_id, participant_id, day, task_name, point_type, details, created_at
                FROM learning_points
                WHERE {where}
                ORDER BY created_at ASC, point_id ASC
                """,
                tuple(params),
            )
            return [_to_point(r) for r in all_rows(cur)]
