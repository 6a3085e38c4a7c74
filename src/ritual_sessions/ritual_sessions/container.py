from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceRepository
from .automation import StandupAutomation
from .core.constants import DEFAULT_OFF_DAY, DEFAULT_STANDUP_DURATION_MINUTES, DEFAULT_STANDUP_TIME
from .core.events import SessionEventBus
from .database.connection import DatabaseConnection, DBConfig
from .learning.mysql_learning_point_repository import MySQLLearningPointRepository
from .learning.repository import LearningPointRepository
from .learning.service import LearningPointService
from .participants.mysql_participant_repository import MySQLParticipantRepository
from .participants.repository import ParticipantRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionLifecycleService
from .streaks.service import StreakService


@dataclass(frozen=True)
class EngineSettings:
    off_day: int = DEFAULT_OFF_DAY
    standup_time: time = DEFAULT_STANDUP_TIME
    standup_duration_minutes: int = DEFAULT_STANDUP_DURATION_MINUTES
    streak_current_month_only: bool = False


@dataclass(frozen=True)
class Container:
    participants_repo: ParticipantRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository
    learning_points_repo: LearningPointRepository

    events: SessionEventBus
    reconciler: AttendanceReconciler
    lifecycle_service: SessionLifecycleService
    learning_point_service: LearningPointService
    streak_service: StreakService
    automation: StandupAutomation


def assemble(
    *,
    participants_repo: ParticipantRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    learning_points_repo: LearningPointRepository,
    settings: Optional[EngineSettings] = None,
    clock=None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    settings = settings or EngineSettings()
    clock_kwargs = {"clock": clock} if clock else {}

    events = SessionEventBus()
    reconciler = AttendanceReconciler(sessions_repo, participants_repo, attendance_repo, **clock_kwargs)
    lifecycle_service = SessionLifecycleService(sessions_repo, reconciler, events=events, **clock_kwargs)
    learning_point_service = LearningPointService(learning_points_repo, sessions_repo, **clock_kwargs)
    streak_service = StreakService(
        attendance_repo,
        sessions_repo,
        off_day=settings.off_day,
        current_month_only=settings.streak_current_month_only,
        **clock_kwargs,
    )
    automation = StandupAutomation(
        lifecycle_service,
        off_day=settings.off_day,
        standup_time=settings.standup_time,
        duration_minutes=settings.standup_duration_minutes,
    )

    return Container(
        participants_repo=participants_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        learning_points_repo=learning_points_repo,
        events=events,
        reconciler=reconciler,
        lifecycle_service=lifecycle_service,
        learning_point_service=learning_point_service,
        streak_service=streak_service,
        automation=automation,
    )


def build_container(*, db_config: dict, settings: Optional[EngineSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        participants_repo=MySQLParticipantRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        learning_points_repo=MySQLLearningPointRepository(conn),
        settings=settings,
    )
