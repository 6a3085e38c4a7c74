from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.ritual_sessions.ritual_sessions.attendance.model import AttendanceMark
from src.ritual_sessions.ritual_sessions.container import assemble
from src.ritual_sessions.ritual_sessions.core.enums import SessionStatus, SessionType
from src.ritual_sessions.ritual_sessions.learning.model import LearningPoint, PointType
from src.ritual_sessions.ritual_sessions.participants.model import Participant
from src.ritual_sessions.ritual_sessions.sessions.model import Session, SessionKey


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryParticipants:
    def __init__(self, participants: list[Participant]):
        self._by_id = {p.participant_id: p for p in participants}

    def get_by_id(self, participant_id: int) -> Optional[Participant]:
        return self._by_id.get(participant_id)

    def list_active(self):
        return [p for _, p in sorted(self._by_id.items()) if not p.archived]


class InMemorySessions:
    def __init__(self):
        self.rows: dict[SessionKey, Session] = {}
        self.fail_updates = False

    def get(self, *, day, session_type):
        return self.rows.get(SessionKey(day, session_type))

    def create(self, session: Session) -> bool:
        if session.key in self.rows:
            return False
        self.rows[session.key] = session
        return True

    def update(self, session: Session, *, expected_version: int) -> bool:
        if self.fail_updates:
            raise RuntimeError("database unavailable")
        current = self.rows.get(session.key)
        if not current or current.version != expected_version:
            return False
        self.rows[session.key] = session
        return True

    def list_range(self, *, start, end, session_type=None):
        out = [
            s
            for s in self.rows.values()
            if start <= s.day <= end and (session_type is None or s.session_type == session_type)
        ]
        return sorted(out, key=lambda s: (s.day, s.session_type.value))

    def bump_version(self, key: SessionKey) -> None:
        """Simulate a write by another process."""
        s = self.rows[key]
        self.rows[key] = replace(s, version=s.version + 1)


class InMemoryAttendance:
    def __init__(self, sessions: InMemorySessions):
        self._sessions = sessions
        self.rows: dict[tuple[date, SessionType], list[AttendanceMark]] = {}
        self.fail_commits = 0
        self.commit_calls = 0

    def replace_roster(self, *, day, session_type, marks):
        self.commit_calls += 1
        if self.fail_commits:
            self.fail_commits -= 1
            raise ConnectionError("lost connection to MySQL server during query")
        self.rows[(day, session_type)] = list(marks)

    def list_for_session(self, *, day, session_type):
        return sorted(self.rows.get((day, session_type), []), key=lambda m: m.participant_id)

    def _ended(self, day, session_type) -> bool:
        s = self._sessions.get(day=day, session_type=session_type)
        return s is not None and s.status == SessionStatus.ENDED

    def history_for_participant(self, *, participant_id, session_type, since=None):
        marks = [
            m
            for (d, t), ms in self.rows.items()
            if t == session_type and self._ended(d, t) and (since is None or d >= since)
            for m in ms
            if m.participant_id == participant_id
        ]
        marks.sort(key=lambda m: m.day, reverse=True)
        return marks


class InMemoryLearningPoints:
    def __init__(self):
        self.rows: dict[int, LearningPoint] = {}
        self._next_id = 1

    def get(self, point_id):
        return self.rows.get(int(point_id))

    def create(self, *, participant_id, day, task_name, point_type, details, created_at):
        pid = self._next_id
        self._next_id += 1
        self.rows[pid] = LearningPoint(
            point_id=pid,
            participant_id=participant_id,
            day=day,
            task_name=task_name,
            point_type=PointType(point_type),
            created_at=created_at,
            details=details,
        )
        return pid

    def update(self, *, point_id, task_name, point_type, details):
        p = self.rows.get(int(point_id))
        if not p:
            return False
        self.rows[p.point_id] = replace(p, task_name=task_name, point_type=point_type, details=details)
        return True

    def list_for_day(self, *, day, participant_id=None):
        return [
            p
            for p in self.rows.values()
            if p.day == day and (participant_id is None or p.participant_id == participant_id)
        ]


@pytest.fixture
def participants():
    return [
        Participant(participant_id=1, name="Asha", email="asha@example.com", employee_code="EMP-001"),
        Participant(participant_id=2, name="Vikram", email="vikram@example.com", employee_code="EMP-002"),
        Participant(participant_id=3, name="Meera", email="meera@example.com", employee_code="EMP-003"),
        Participant(participant_id=4, name="Old Timer", email="old@example.com", archived=True),
    ]


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 12, 8, 0))


@pytest.fixture
def engine(participants, clock):
    sessions = InMemorySessions()
    return assemble(
        participants_repo=InMemoryParticipants(participants),
        sessions_repo=sessions,
        attendance_repo=InMemoryAttendance(sessions),
        learning_points_repo=InMemoryLearningPoints(),
        clock=clock,
    )
