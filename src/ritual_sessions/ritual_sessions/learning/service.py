from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import SessionStatus, SessionType
from ..core.exceptions import ArtifactLockedError, AuthorizationError, ValidationError
from ..sessions.repository import SessionRepository
from .model import LearningPoint, PointType
from .repository import LearningPointRepository


class LearningPointService:
    """Learning points for a day's learning hour, writable until that session ends.

    The lock is never cached: every check reads the session record, so it
    flips in the same write that ends the session.
    """

    def __init__(
        self,
        points: LearningPointRepository,
        sessions: SessionRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._points = points
        self._sessions = sessions
        self._clock = clock

    def is_editable(self, day: date) -> bool:
        session = self._sessions.get(day=day, session_type=SessionType.LEARNING_HOUR)
        return session is None or session.status != SessionStatus.ENDED

    def ensure_editable(self, day: date) -> None:
        if not self.is_editable(day):
            raise ArtifactLockedError(f"Learning points for {day.isoformat()} are locked; the session has ended")

    @staticmethod
    def _parse_type(point_type: PointType | str) -> PointType:
        try:
            return PointType(point_type)
        except ValueError:
            raise ValidationError(f"Unknown learning point type: {point_type!r}")

    def add_point(
        self,
        *,
        participant_id: int,
        day: date,
        task_name: str,
        point_type: PointType | str,
        details: Optional[dict] = None,
    ) -> int:
        task_name = require_non_empty(task_name, "Task name")
        point_type = self._parse_type(point_type)
        self.ensure_editable(day)
        return self._points.create(
            participant_id=int(participant_id),
            day=day,
            task_name=task_name,
            point_type=point_type,
            details=dict(details or {}),
            created_at=self._clock(),
        )

    def update_point(
        self,
        *,
        participant_id: int,
        point_id: int,
        task_name: str,
        point_type: PointType | str,
        details: Optional[dict] = None,
    ) -> None:
        point = self._points.get(int(point_id))
        if not point:
            raise ValidationError("Learning point not found")
        if point.participant_id != int(participant_id):
            raise AuthorizationError("You can only edit your own learning points")

        task_name = require_non_empty(task_name, "Task name")
        point_type = self._parse_type(point_type)
        self.ensure_editable(point.day)

        if not self._points.update(
            point_id=point.point_id, task_name=task_name, point_type=point_type, details=dict(details or {})
        ):
            raise ValidationError("Updating the learning point failed")

    def list_for_day(self, *, day: date, participant_id: Optional[int] = None) -> list[dict]:
        editable = self.is_editable(day)
        points: list[LearningPoint] = list(self._points.list_for_day(day=day, participant_id=participant_id))
        return [p.to_dict(editable=editable) for p in points]
