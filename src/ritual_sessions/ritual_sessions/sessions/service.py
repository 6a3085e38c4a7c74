from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import RosterSnapshot
from ..attendance.reconciler import AttendanceReconciler
from ..common.datetime_utils import now_local
from ..common.validators import require_admin, require_non_empty
from ..core.enums import Role, SessionStatus, SessionType
from ..core.events import SessionEventBus, SessionStatusChanged
from ..core.exceptions import (
    CommitFailureError,
    ConcurrentTransitionError,
    IllegalTransitionError,
    InvalidScheduleError,
    SessionNotFoundError,
    ValidationError,
)
from .locks import TransitionLocks
from .model import Session, SessionKey
from .repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerminationResult:
    session: Session
    roster: RosterSnapshot


class SessionLifecycleService:
    """State machine for one day's session: scheduled -> active -> ended.

    Transitions for a key are serialized twice over: an in-process lock that
    rejects overlapping callers, and a version compare-and-set in storage that
    rejects writers from other processes.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        reconciler: AttendanceReconciler,
        *,
        events: Optional[SessionEventBus] = None,
        locks: Optional[TransitionLocks] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._reconciler = reconciler
        self._events = events or SessionEventBus()
        self._locks = locks or TransitionLocks()
        self._clock = clock

    @property
    def events(self) -> SessionEventBus:
        return self._events

    def find(self, *, day: date, session_type: SessionType) -> Optional[Session]:
        return self._sessions.get(day=day, session_type=session_type)

    def get(self, *, day: date, session_type: SessionType) -> Session:
        session = self.find(day=day, session_type=session_type)
        if not session:
            raise SessionNotFoundError(f"No {session_type.value} session on {day.isoformat()}")
        return session

    def list_range(self, *, start: date, end: date, session_type: Optional[SessionType] = None) -> Sequence[Session]:
        if end < start:
            raise ValidationError("End date is before start date")
        return self._sessions.list_range(start=start, end=end, session_type=session_type)

    def _check_schedule_time(self, day: date, when: datetime) -> None:
        if when.date() != day:
            raise ValidationError(f"Scheduled time {when.isoformat()} is not on {day.isoformat()}")
        if when < self._clock():
            raise InvalidScheduleError("A session cannot be scheduled in the past")

    def _store(self, previous: Session, updated: Session) -> Session:
        updated = replace(updated, version=previous.version + 1)
        if not self._sessions.update(updated, expected_version=previous.version):
            raise ConcurrentTransitionError(f"Session {previous.key} was changed by another operator")
        return updated

    def _notify(self, previous: Optional[Session], current: Session, *, synced: bool = False) -> None:
        self._events.publish(
            SessionStatusChanged(
                day=current.day,
                session_type=current.session_type,
                previous=previous.status if previous else None,
                current=current.status,
                at=self._clock(),
                synced=synced,
            )
        )

    def schedule(
        self,
        *,
        current_role: Role,
        day: date,
        session_type: SessionType,
        when: datetime,
        operator: str,
    ) -> Session:
        require_admin(current_role)
        operator = require_non_empty(operator, "Operator")
        self._check_schedule_time(day, when)

        key = SessionKey(day, session_type)
        with self._locks.hold(key):
            session = Session(
                day=day,
                session_type=session_type,
                status=SessionStatus.SCHEDULED,
                scheduled_at=when,
                scheduled_by=operator,
            )
            if not self._sessions.create(session):
                raise IllegalTransitionError(f"Session {key} is already scheduled")

        logger.info("Scheduled %s at %s by %s", key, when.isoformat(), operator)
        self._notify(None, session)
        return session

    def reschedule(self, *, current_role: Role, day: date, session_type: SessionType, when: datetime) -> Session:
        """Move the start time. Only allowed before the session starts; status is unchanged."""
        require_admin(current_role)
        self._check_schedule_time(day, when)

        key = SessionKey(day, session_type)
        with self._locks.hold(key):
            session = self.get(day=day, session_type=session_type)
            if session.status != SessionStatus.SCHEDULED:
                raise IllegalTransitionError(f"Cannot reschedule a {session.status.value} session")
            updated = self._store(session, replace(session, scheduled_at=when))

        logger.info("Rescheduled %s to %s", key, when.isoformat())
        return updated

    def activate(self, *, current_role: Role, day: date, session_type: SessionType) -> Session:
        require_admin(current_role)

        key = SessionKey(day, session_type)
        with self._locks.hold(key):
            session = self.get(day=day, session_type=session_type)
            if session.status != SessionStatus.SCHEDULED:
                raise IllegalTransitionError(f"Cannot start a {session.status.value} session")
            updated = self._store(
                session, replace(session, status=SessionStatus.ACTIVE, started_at=self._clock())
            )

        logger.info("Started %s", key)
        self._notify(session, updated)
        return updated

    def terminate(self, *, current_role: Role, day: date, session_type: SessionType) -> TerminationResult:
        """End an active session.

        The roster is committed first; only then is the session marked ended.
        If either write fails the session stays active and the call can be
        retried.
        """
        require_admin(current_role)

        key = SessionKey(day, session_type)
        with self._locks.hold(key):
            session = self.get(day=day, session_type=session_type)
            if session.status != SessionStatus.ACTIVE:
                raise IllegalTransitionError(f"Cannot end a {session.status.value} session")

            roster = self._reconciler.commit(session)

            try:
                updated = self._store(
                    session, replace(session, status=SessionStatus.ENDED, ended_at=self._clock())
                )
            except ConcurrentTransitionError:
                raise
            except Exception as exc:
                logger.exception("Roster saved but %s could not be closed", key)
                raise CommitFailureError(f"Session {key} could not be ended; it is still active") from exc

            self._reconciler.discard(key)

        logger.info("Ended %s with %d attendance marks", key, len(roster.marks))
        self._notify(session, updated)
        return TerminationResult(session=updated, roster=roster)

    def mark_synced(self, *, day: date, session_type: SessionType) -> Session:
        """Record that the export job has processed this session. Repeated calls are no-ops."""
        key = SessionKey(day, session_type)
        with self._locks.hold(key):
            session = self.get(day=day, session_type=session_type)
            if session.status != SessionStatus.ENDED:
                raise IllegalTransitionError("Only ended sessions can be marked as synced")
            if session.synced:
                return session
            updated = self._store(session, replace(session, synced=True))

        logger.info("Marked %s as synced", key)
        self._notify(session, updated, synced=True)
        return updated
