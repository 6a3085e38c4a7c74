from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionStatus, SessionType


@dataclass(frozen=True)
class SessionKey:
    day: date
    session_type: SessionType

    def __str__(self) -> str:
        return f"{self.session_type.value}/{self.day.isoformat()}"


@dataclass(frozen=True)
class Session:
    """Domain entity: one day's occurrence of a ritual.

    ``version`` increases on every stored change and backs the optimistic
    compare-and-set used for transitions.
    """

    day: date
    session_type: SessionType
    status: SessionStatus
    scheduled_at: datetime
    scheduled_by: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    synced: bool = False
    version: int = 0

    @property
    def key(self) -> SessionKey:
        return SessionKey(self.day, self.session_type)

    @property
    def is_ended(self) -> bool:
        return self.status == SessionStatus.ENDED

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "type": self.session_type.value,
            "status": self.status.value,
            "scheduled_at": self.scheduled_at.isoformat(),
            "scheduled_by": self.scheduled_by,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "synced": self.synced,
        }
