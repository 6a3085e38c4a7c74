from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class PointType(str, Enum):
    R1 = "R1"
    R2 = "R2"
    R3 = "R3"


@dataclass(frozen=True)
class LearningPoint:
    """A participant's note for a learning-hour session.

    ``details`` holds the free-form fields (situation/behavior/impact, problem,
    action item...); their content is not interpreted here.
    """

    point_id: int
    participant_id: int
    day: date
    task_name: str
    point_type: PointType
    created_at: datetime
    details: dict = field(default_factory=dict)

    def to_dict(self, *, editable: Optional[bool] = None) -> dict:
        data = {
            "point_id": self.point_id,
            "participant_id": self.participant_id,
            "day": self.day.isoformat(),
            "task_name": self.task_name,
            "point_type": self.point_type.value,
            "created_at": self.created_at.isoformat(),
            "details": dict(self.details),
        }
        if editable is not None:
            data["editable"] = editable
        return data
