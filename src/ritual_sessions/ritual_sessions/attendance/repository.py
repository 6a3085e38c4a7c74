from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionType
from .model import AttendanceMark


class AttendanceRepository(Protocol):
    def replace_roster(self, *, day: date, session_type: SessionType, marks: Sequence[AttendanceMark]) -> None:
        """Atomically replace every mark of one session with ``marks``.

        All marks are stored or none are; calling it again with the same marks
        leaves the same rows behind.
        """

        raise NotImplementedError

    def list_for_session(self, *, day: date, session_type: SessionType) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def history_for_participant(
        self,
        *,
        participant_id: int,
        session_type: SessionType,
        since: Optional[date] = None,
    ) -> Sequence[AttendanceMark]:
        """Marks of ended sessions only, most recent first.

        A roster written by a terminate that then failed to close its session
        stays invisible here until the session is ended.
        """

        raise NotImplementedError
