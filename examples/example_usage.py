"""Example: driving the engine through the service layer (no Flask).

Controllers are thin; all session rules live in the services.
"""

import importlib
from datetime import timedelta

from config import get_settings_module

from src.ritual_sessions.ritual_sessions.common.datetime_utils import now_local
from src.ritual_sessions.ritual_sessions.container import build_container
from src.ritual_sessions.ritual_sessions.core.enums import AttendanceStatus, Role, SessionType


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    lifecycle = container.lifecycle_service

    container.events.subscribe(lambda e: print("event:", e))

    now = now_local()
    day = now.date()
    lifecycle.schedule(
        current_role=Role.ADMIN,
        day=day,
        session_type=SessionType.LEARNING_HOUR,
        when=now + timedelta(minutes=1),
        operator="example",
    )
    lifecycle.activate(current_role=Role.ADMIN, day=day, session_type=SessionType.LEARNING_HOUR)

    for p in container.participants_repo.list_active()[:1]:
        container.reconciler.set_tentative_status(
            day=day,
            session_type=SessionType.LEARNING_HOUR,
            participant_id=p.participant_id,
            status=AttendanceStatus.PRESENT,
        )

    result = lifecycle.terminate(current_role=Role.ADMIN, day=day, session_type=SessionType.LEARNING_HOUR)
    print(result.roster.to_dict())


if __name__ == "__main__":
    main()
