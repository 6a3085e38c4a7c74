from __future__ import annotations

from datetime import date, datetime, time

from src.ritual_sessions.ritual_sessions.automation import SYSTEM_OPERATOR, StandupAutomation
from src.ritual_sessions.ritual_sessions.core.enums import Role, SessionStatus, SessionType

MONDAY = date(2026, 10, 12)
SUNDAY = date(2026, 10, 18)
STANDUP = SessionType.STANDUP


def _at(clock, hour, minute=0, day=MONDAY):
    clock.now = datetime.combine(day, time(hour, minute))
    return clock.now


def test_nothing_is_scheduled_on_the_off_day(engine, clock):
    now = _at(clock, 6, day=SUNDAY)
    assert engine.automation.schedule_today(now) is None
    assert engine.lifecycle_service.find(day=SUNDAY, session_type=STANDUP) is None


def test_morning_run_schedules_the_standup(engine, clock):
    now = _at(clock, 6)
    s = engine.automation.schedule_today(now)

    assert s.status == SessionStatus.SCHEDULED
    assert s.scheduled_at == datetime(2026, 10, 12, 9, 0)
    assert s.scheduled_by == SYSTEM_OPERATOR
    # Repeated runs leave the existing session alone.
    assert engine.automation.schedule_today(now) is None


def test_late_run_does_not_schedule_in_the_past(engine, clock):
    now = _at(clock, 10)
    assert engine.automation.schedule_today(now) is None


def test_full_day(engine, clock):
    report = engine.automation.tick(_at(clock, 6))
    assert report.scheduled == ["standup/2026-10-12"]
    assert report.started == [] and report.ended == []

    report = engine.automation.tick(_at(clock, 9))
    assert report.started == ["standup/2026-10-12"]
    assert engine.lifecycle_service.get(day=MONDAY, session_type=STANDUP).status == SessionStatus.ACTIVE

    report = engine.automation.tick(_at(clock, 9, 10))
    assert report.to_dict() == {"scheduled": [], "started": [], "ended": [], "errors": []}

    report = engine.automation.tick(_at(clock, 9, 15))
    assert report.ended == ["standup/2026-10-12"]
    assert engine.lifecycle_service.get(day=MONDAY, session_type=STANDUP).status == SessionStatus.ENDED
    assert len(engine.attendance_repo.list_for_session(day=MONDAY, session_type=STANDUP)) == 3

    report = engine.automation.tick(_at(clock, 9, 30))
    assert report.to_dict() == {"scheduled": [], "started": [], "ended": [], "errors": []}


def test_learning_hours_are_left_to_the_admin(engine, clock):
    _at(clock, 8)
    engine.lifecycle_service.schedule(
        current_role=Role.ADMIN,
        day=MONDAY,
        session_type=SessionType.LEARNING_HOUR,
        when=datetime(2026, 10, 12, 16, 0),
        operator="Priya",
    )

    report = engine.automation.tick(_at(clock, 16))
    assert report.started == []
    lh = engine.lifecycle_service.get(day=MONDAY, session_type=SessionType.LEARNING_HOUR)
    assert lh.status == SessionStatus.SCHEDULED

    engine.lifecycle_service.activate(current_role=Role.ADMIN, day=MONDAY, session_type=SessionType.LEARNING_HOUR)
    report = engine.automation.tick(_at(clock, 18))
    assert report.ended == []
    lh = engine.lifecycle_service.get(day=MONDAY, session_type=SessionType.LEARNING_HOUR)
    assert lh.status == SessionStatus.ACTIVE


def test_failed_end_is_reported_and_retried(engine, clock):
    engine.automation.tick(_at(clock, 6))
    engine.automation.tick(_at(clock, 9))

    engine.attendance_repo.fail_commits = 1
    report = engine.automation.tick(_at(clock, 9, 15))
    assert report.ended == []
    assert len(report.errors) == 1 and report.errors[0].startswith("end:")
    assert engine.lifecycle_service.get(day=MONDAY, session_type=STANDUP).status == SessionStatus.ACTIVE

    report = engine.automation.tick(_at(clock, 9, 20))
    assert report.ended == ["standup/2026-10-12"]


def test_custom_time_and_window(engine, clock):
    automation = StandupAutomation(engine.lifecycle_service, standup_time=time(10, 30), duration_minutes=5)

    automation.tick(_at(clock, 7))
    assert engine.lifecycle_service.get(day=MONDAY, session_type=STANDUP).scheduled_at == datetime(2026, 10, 12, 10, 30)

    automation.tick(_at(clock, 10, 30))
    assert automation.tick(_at(clock, 10, 34)).ended == []
    assert automation.tick(_at(clock, 10, 35)).ended == ["standup/2026-10-12"]
