from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus, SessionType
from ..sessions.model import SessionKey


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one participant's committed attendance for one session."""

    day: date
    session_type: SessionType
    participant_id: int
    status: AttendanceStatus
    scheduled_at: datetime
    marked_at: datetime
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "status": self.status.value,
            "reason": self.reason,
            "marked_at": self.marked_at.isoformat(),
        }


@dataclass(frozen=True)
class TentativeMark:
    """Working-set entry; never persisted."""

    status: AttendanceStatus
    reason: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    """Read-model row for the editor's roster view."""

    participant_id: int
    name: str
    email: str
    status: AttendanceStatus
    reason: Optional[str] = None
    edited: bool = False

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "email": self.email,
            "status": self.status.value,
            "reason": self.reason,
            "edited": self.edited,
        }


@dataclass(frozen=True)
class RosterSnapshot:
    key: SessionKey
    marks: tuple[AttendanceMark, ...]

    def status_of(self, participant_id: int) -> Optional[AttendanceStatus]:
        for m in self.marks:
            if m.participant_id == participant_id:
                return m.status
        return None

    def to_dict(self) -> dict:
        return {
            "day": self.key.day.isoformat(),
            "type": self.key.session_type.value,
            "marks": [m.to_dict() for m in self.marks],
        }


@dataclass(frozen=True)
class SessionStatistics:
    total: int = 0
    present: int = 0
    absent: int = 0
    missed: int = 0
    not_available: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "SessionStatistics":
        counts = {s: 0 for s in AttendanceStatus}
        total = 0
        for s in statuses:
            counts[s] += 1
            total += 1
        return cls(
            total=total,
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            missed=counts[AttendanceStatus.MISSED],
            not_available=counts[AttendanceStatus.NOT_AVAILABLE],
        )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "missed": self.missed,
            "not_available": self.not_available,
        }
