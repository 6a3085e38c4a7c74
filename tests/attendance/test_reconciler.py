from __future__ import annotations

from datetime import date, datetime

import pytest

from src.ritual_sessions.ritual_sessions.core.enums import AttendanceStatus, Role, SessionType
from src.ritual_sessions.ritual_sessions.core.exceptions import (
    IllegalTransitionError,
    MissingReasonError,
    SessionNotFoundError,
    ValidationError,
)

MONDAY = date(2026, 10, 12)
STANDUP = SessionType.STANDUP


@pytest.fixture
def active(engine):
    svc = engine.lifecycle_service
    svc.schedule(
        current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP, when=datetime(2026, 10, 12, 9, 0), operator="Priya"
    )
    svc.activate(current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP)
    return engine


def _set(engine, participant_id, status, reason=None):
    return engine.reconciler.set_tentative_status(
        day=MONDAY, session_type=STANDUP, participant_id=participant_id, status=status, reason=reason
    )


def test_not_available_requires_a_reason(active):
    with pytest.raises(MissingReasonError):
        _set(active, 1, AttendanceStatus.NOT_AVAILABLE)
    with pytest.raises(MissingReasonError):
        _set(active, 1, AttendanceStatus.NOT_AVAILABLE, reason="   ")

    mark = _set(active, 1, AttendanceStatus.NOT_AVAILABLE, reason="  On leave ")
    assert mark.reason == "On leave"


def test_missing_reason_is_a_validation_error(active):
    with pytest.raises(ValidationError):
        _set(active, 1, "Not Available")


def test_unknown_status_is_rejected(active):
    with pytest.raises(ValidationError):
        _set(active, 1, "Late")


def test_edits_are_not_persisted_before_commit(active):
    _set(active, 1, AttendanceStatus.PRESENT)
    _set(active, 2, AttendanceStatus.ABSENT)

    assert active.attendance_repo.list_for_session(day=MONDAY, session_type=STANDUP) == []
    assert active.attendance_repo.commit_calls == 0


def test_working_set_defaults_to_missed(active):
    _set(active, 2, AttendanceStatus.PRESENT)

    rows = {r.participant_id: r for r in active.reconciler.working_set(day=MONDAY, session_type=STANDUP)}

    # Archived participants are not on the roster.
    assert set(rows) == {1, 2, 3}
    assert rows[2].status == AttendanceStatus.PRESENT and rows[2].edited
    assert rows[1].status == AttendanceStatus.MISSED and not rows[1].edited


def test_last_write_wins_and_reason_is_dropped(active):
    _set(active, 1, AttendanceStatus.NOT_AVAILABLE, reason="Travel")
    mark = _set(active, 1, AttendanceStatus.PRESENT, reason="ignored")

    assert mark.reason is None
    row = next(r for r in active.reconciler.working_set(day=MONDAY, session_type=STANDUP) if r.participant_id == 1)
    assert row.status == AttendanceStatus.PRESENT
    assert row.reason is None


def test_clear_reverts_to_default(active):
    _set(active, 1, AttendanceStatus.PRESENT)
    active.reconciler.clear_tentative_status(day=MONDAY, session_type=STANDUP, participant_id=1)
    # Clearing a participant without edits is a no-op.
    active.reconciler.clear_tentative_status(day=MONDAY, session_type=STANDUP, participant_id=3)

    row = next(r for r in active.reconciler.working_set(day=MONDAY, session_type=STANDUP) if r.participant_id == 1)
    assert row.status == AttendanceStatus.MISSED


def test_edits_need_an_active_session(engine):
    with pytest.raises(SessionNotFoundError):
        _set(engine, 1, AttendanceStatus.PRESENT)

    engine.lifecycle_service.schedule(
        current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP, when=datetime(2026, 10, 12, 9, 0), operator="Priya"
    )
    with pytest.raises(IllegalTransitionError):
        _set(engine, 1, AttendanceStatus.PRESENT)


def test_edits_after_end_are_rejected(active):
    active.lifecycle_service.terminate(current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP)
    with pytest.raises(IllegalTransitionError):
        _set(active, 1, AttendanceStatus.PRESENT)


def test_unknown_or_archived_participant_is_rejected(active):
    with pytest.raises(ValidationError):
        _set(active, 99, AttendanceStatus.PRESENT)
    with pytest.raises(ValidationError):
        _set(active, 4, AttendanceStatus.PRESENT)


def test_statistics_follow_the_session_phase(active):
    scheduled = active.reconciler.statistics(day=MONDAY, session_type=STANDUP)
    assert scheduled.total == 3

    _set(active, 1, AttendanceStatus.PRESENT)
    _set(active, 2, AttendanceStatus.NOT_AVAILABLE, reason="Sick")
    live = active.reconciler.statistics(day=MONDAY, session_type=STANDUP)
    assert (live.total, live.present, live.not_available, live.missed) == (3, 1, 1, 1)

    active.lifecycle_service.terminate(current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP)
    final = active.reconciler.statistics(day=MONDAY, session_type=STANDUP)
    assert final == live


def test_statistics_before_activation(engine):
    engine.lifecycle_service.schedule(
        current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP, when=datetime(2026, 10, 12, 9, 0), operator="Priya"
    )
    stats = engine.reconciler.statistics(day=MONDAY, session_type=STANDUP)
    assert stats.total == 3
    assert stats.present == 0


def test_final_roster_only_after_end(active):
    with pytest.raises(IllegalTransitionError):
        active.reconciler.final_roster(day=MONDAY, session_type=STANDUP)

    _set(active, 3, AttendanceStatus.ABSENT)
    active.lifecycle_service.terminate(current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP)

    roster = active.reconciler.final_roster(day=MONDAY, session_type=STANDUP)
    assert [m.participant_id for m in roster.marks] == [1, 2, 3]
    assert roster.status_of(3) == AttendanceStatus.ABSENT
    assert roster.to_dict()["type"] == "standup"


def test_working_set_is_discarded_after_end(active):
    _set(active, 1, AttendanceStatus.PRESENT)
    active.lifecycle_service.terminate(current_role=Role.ADMIN, day=MONDAY, session_type=STANDUP)

    with pytest.raises(IllegalTransitionError):
        active.reconciler.working_set(day=MONDAY, session_type=STANDUP)


def test_sessions_keep_separate_working_sets(active):
    active.lifecycle_service.schedule(
        current_role=Role.ADMIN,
        day=MONDAY,
        session_type=SessionType.LEARNING_HOUR,
        when=datetime(2026, 10, 12, 16, 0),
        operator="Priya",
    )
    active.lifecycle_service.activate(current_role=Role.ADMIN, day=MONDAY, session_type=SessionType.LEARNING_HOUR)

    _set(active, 1, AttendanceStatus.PRESENT)
    rows = active.reconciler.working_set(day=MONDAY, session_type=SessionType.LEARNING_HOUR)
    assert all(r.status == AttendanceStatus.MISSED for r in rows)
