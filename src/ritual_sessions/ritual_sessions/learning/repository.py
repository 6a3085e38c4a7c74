from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import LearningPoint, PointType


class LearningPointRepository(Protocol):
    def get(self, point_id: int) -> Optional[LearningPoint]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, *, point_id: int, task_name: str, point_type: PointType, details: dict) -> bool:
        raise NotImplementedError

    def list_for_day(self, *, day: date, participant_id: Optional[int] = None) -> Sequence[LearningPoint]:
        raise NotImplementedError
