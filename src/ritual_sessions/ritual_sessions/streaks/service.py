from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_OFF_DAY
from ..core.enums import SessionStatus, SessionType
from ..sessions.repository import SessionRepository
from .calculator import compute_learning_streak, compute_streak


class StreakService:
    """Streaks computed on demand from the marks of ended sessions."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        *,
        off_day: int = DEFAULT_OFF_DAY,
        current_month_only: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._off_day = int(off_day)
        self._current_month_only = bool(current_month_only)
        self._clock = clock

    def streak_for(
        self,
        *,
        participant_id: int,
        session_type: SessionType = SessionType.STANDUP,
        today: Optional[date] = None,
    ) -> int:
        today = today or self._clock().date()
        since = today.replace(day=1) if self._current_month_only else None

        marks = self._attendance.history_for_participant(
            participant_id=int(participant_id),
            session_type=session_type,
            since=since,
        )
        history = [(m.day, m.status) for m in marks]

        if session_type == SessionType.STANDUP:
            return compute_streak(history, today, off_day=self._off_day, since=since)

        if not history:
            return 0
        start = since or min(m.day for m in marks)
        conducted = [
            s.day
            for s in self._sessions.list_range(start=start, end=today, session_type=session_type)
            if s.status == SessionStatus.ENDED
        ]
        return compute_learning_streak(history, conducted, today, off_day=self._off_day, since=since)
