"""Daily standup automation: schedule in the early morning, start on time, end after a fixed window.

Meant to be driven by cron (``flask rituals tick`` or scripts/run_automation.py)
every few minutes. Every step is safe to repeat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Optional

from .core.constants import DEFAULT_OFF_DAY, DEFAULT_STANDUP_DURATION_MINUTES, DEFAULT_STANDUP_TIME
from .core.enums import Role, SessionStatus, SessionType
from .core.exceptions import DomainError
from .sessions.model import Session
from .sessions.service import SessionLifecycleService

logger = logging.getLogger(__name__)

SYSTEM_OPERATOR = "System Automation"


@dataclass
class TickReport:
    scheduled: list[str] = field(default_factory=list)
    started: list[str] = field(default_factory=list)
    ended: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"scheduled": self.scheduled, "started": self.started, "ended": self.ended, "errors": self.errors}


class StandupAutomation:
    def __init__(
        self,
        lifecycle: SessionLifecycleService,
        *,
        off_day: int = DEFAULT_OFF_DAY,
        standup_time: time = DEFAULT_STANDUP_TIME,
        duration_minutes: int = DEFAULT_STANDUP_DURATION_MINUTES,
    ):
        self._lifecycle = lifecycle
        self._off_day = int(off_day)
        self._standup_time = standup_time
        self._duration = timedelta(minutes=int(duration_minutes))

    def schedule_today(self, now: datetime) -> Optional[Session]:
        today = now.date()
        if today.weekday() == self._off_day:
            logger.info("Skipping standup scheduling on the off-day (%s)", today.isoformat())
            return None
        if self._lifecycle.find(day=today, session_type=SessionType.STANDUP):
            return None

        when = datetime.combine(today, self._standup_time)
        if when < now:
            return None
        return self._lifecycle.schedule(
            current_role=Role.ADMIN,
            day=today,
            session_type=SessionType.STANDUP,
            when=when,
            operator=SYSTEM_OPERATOR,
        )

    def start_due(self, now: datetime) -> list[Session]:
        """Start today's standup once its time has come. Learning hours are started by an admin."""
        started = []
        for session in self._lifecycle.list_range(start=now.date(), end=now.date(), session_type=SessionType.STANDUP):
            if session.status == SessionStatus.SCHEDULED and session.scheduled_at <= now:
                started.append(
                    self._lifecycle.activate(current_role=Role.ADMIN, day=session.day, session_type=session.session_type)
                )
        return started

    def end_due(self, now: datetime) -> list[Session]:
        """Close active standups whose window has passed. Learning hours are ended by an admin."""
        ended = []
        for session in self._lifecycle.list_range(start=now.date(), end=now.date(), session_type=SessionType.STANDUP):
            if session.status == SessionStatus.ACTIVE and session.scheduled_at + self._duration <= now:
                result = self._lifecycle.terminate(
                    current_role=Role.ADMIN, day=session.day, session_type=session.session_type
                )
                ended.append(result.session)
        return ended

    def tick(self, now: datetime) -> TickReport:
        report = TickReport()

        steps = (
            ("schedule", lambda: [s for s in [self.schedule_today(now)] if s], report.scheduled),
            ("start", lambda: self.start_due(now), report.started),
            ("end", lambda: self.end_due(now), report.ended),
        )
        for name, step, sink in steps:
            try:
                sink.extend(str(s.key) for s in step())
            except DomainError as exc:
                logger.error("Automation step %s failed: %s", name, exc)
                report.errors.append(f"{name}: {exc}")
            except Exception as exc:
                logger.exception("Automation step %s crashed", name)
                report.errors.append(f"{name}: {exc}")

        return report
