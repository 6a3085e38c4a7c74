from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used by service-level permission checks."""

    ADMIN = "admin"
    CO_ADMIN = "co_admin"
    MEMBER = "member"


class SessionType(str, Enum):
    STANDUP = "standup"
    LEARNING_HOUR = "learning_hour"


class SessionStatus(str, Enum):
    """Lifecycle states, declared in transition order."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    ENDED = "ended"

    @property
    def rank(self) -> int:
        return list(SessionStatus).index(self)


class AttendanceStatus(str, Enum):
    """Attendance mark values as stored and exported."""

    PRESENT = "Present"
    ABSENT = "Absent"
    MISSED = "Missed"
    NOT_AVAILABLE = "Not Available"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.CO_ADMIN})

# Statuses that keep an attendance streak alive (an excused absence counts).
STREAK_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.NOT_AVAILABLE})

# Learning hours only drop sessions the participant missed outright.
LEARNING_STREAK_STATUSES = frozenset(s for s in AttendanceStatus if s != AttendanceStatus.MISSED)
