from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..core.exceptions import (
    CommitFailureError,
    DomainError,
    IllegalTransitionError,
    MissingReasonError,
    SessionNotFoundError,
    ValidationError,
)
from ..participants.repository import ParticipantRepository
from ..sessions.model import Session, SessionKey
from ..sessions.repository import SessionRepository
from .model import AttendanceMark, RosterEntry, RosterSnapshot, SessionStatistics, TentativeMark
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

DEFAULT_STATUS = AttendanceStatus.MISSED


class AttendanceReconciler:
    """Buffers attendance edits while a session is active and commits the roster in one batch.

    The working set is per session key and lives only in memory. Editors are
    not merged against each other: the last edit per participant wins and the
    whole roster is re-derived from the working set at commit time.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        participants: ParticipantRepository,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._participants = participants
        self._attendance = attendance
        self._clock = clock
        self._working: Dict[SessionKey, Dict[int, TentativeMark]] = {}
        self._lock = threading.Lock()

    def _require_session(self, day: date, session_type: SessionType) -> Session:
        session = self._sessions.get(day=day, session_type=session_type)
        if not session:
            raise SessionNotFoundError(f"No {session_type.value} session on {day.isoformat()}")
        return session

    def _require_active(self, day: date, session_type: SessionType) -> Session:
        session = self._require_session(day, session_type)
        if session.status != SessionStatus.ACTIVE:
            raise IllegalTransitionError(
                f"Attendance can only be edited while the session is active (status={session.status.value})"
            )
        return session

    def _edits(self, key: SessionKey) -> Dict[int, TentativeMark]:
        with self._lock:
            return dict(self._working.get(key, {}))

    def set_tentative_status(
        self,
        *,
        day: date,
        session_type: SessionType,
        participant_id: int,
        status: AttendanceStatus | str,
        reason: Optional[str] = None,
    ) -> TentativeMark:
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {status!r}")

        reason = (reason or "").strip() or None
        if status == AttendanceStatus.NOT_AVAILABLE:
            if not reason:
                raise MissingReasonError("A reason is required when marking someone Not Available")
        else:
            reason = None

        session = self._require_active(day, session_type)

        participant = self._participants.get_by_id(int(participant_id))
        if not participant or participant.archived:
            raise ValidationError(f"Participant {participant_id} is not on the roster")

        mark = TentativeMark(status=status, reason=reason)
        with self._lock:
            self._working.setdefault(session.key, {})[participant.participant_id] = mark
        return mark

    def clear_tentative_status(self, *, day: date, session_type: SessionType, participant_id: int) -> None:
        session = self._require_active(day, session_type)
        with self._lock:
            self._working.get(session.key, {}).pop(int(participant_id), None)

    def working_set(self, *, day: date, session_type: SessionType) -> List[RosterEntry]:
        """Full roster as the editor sees it: explicit edits, everyone else Missed."""
        session = self._require_active(day, session_type)
        edits = self._edits(session.key)

        rows: List[RosterEntry] = []
        for p in self._participants.list_active():
            edit = edits.get(p.participant_id)
            rows.append(
                RosterEntry(
                    participant_id=p.participant_id,
                    name=p.name,
                    email=p.email,
                    status=edit.status if edit else DEFAULT_STATUS,
                    reason=edit.reason if edit else None,
                    edited=edit is not None,
                )
            )
        return rows

    def statistics(self, *, day: date, session_type: SessionType) -> SessionStatistics:
        session = self._require_session(day, session_type)
        if session.status == SessionStatus.ENDED:
            marks = self._attendance.list_for_session(day=day, session_type=session_type)
            return SessionStatistics.from_statuses(m.status for m in marks)
        if session.status == SessionStatus.ACTIVE:
            return SessionStatistics.from_statuses(r.status for r in self.working_set(day=day, session_type=session_type))
        return SessionStatistics(total=len(self._participants.list_active()))

    def commit(self, session: Session) -> RosterSnapshot:
        """Write one mark per roster participant as a single atomic batch.

        On failure nothing is stored, the working set is kept and
        CommitFailureError is raised. Retrying rewrites the same roster.
        """
        if session.status != SessionStatus.ACTIVE:
            raise IllegalTransitionError(f"Cannot commit attendance for a {session.status.value} session")

        key = session.key
        edits = self._edits(key)
        marked_at = self._clock()

        try:
            roster = self._participants.list_active()
            marks = []
            for p in roster:
                edit = edits.get(p.participant_id)
                marks.append(
                    AttendanceMark(
                        day=session.day,
                        session_type=session.session_type,
                        participant_id=p.participant_id,
                        status=edit.status if edit else DEFAULT_STATUS,
                        reason=edit.reason if edit else None,
                        scheduled_at=session.scheduled_at,
                        marked_at=marked_at,
                    )
                )
            self._attendance.replace_roster(day=session.day, session_type=session.session_type, marks=marks)
        except DomainError:
            raise
        except Exception as exc:
            logger.exception("Roster commit failed for %s", key)
            raise CommitFailureError(f"Attendance for {key} could not be saved; the session is still active") from exc

        logger.info("Committed %d attendance marks for %s (%d edited)", len(marks), key, len(edits))
        return RosterSnapshot(key=key, marks=tuple(marks))

    def discard(self, key: SessionKey) -> None:
        with self._lock:
            self._working.pop(key, None)

    def final_roster(self, *, day: date, session_type: SessionType) -> RosterSnapshot:
        session = self._require_session(day, session_type)
        if session.status != SessionStatus.ENDED:
            raise IllegalTransitionError("The final roster is available once the session has ended")
        marks = self._attendance.list_for_session(day=day, session_type=session_type)
        return RosterSnapshot(key=session.key, marks=tuple(marks))
