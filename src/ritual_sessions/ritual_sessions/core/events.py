from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .enums import SessionStatus, SessionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStatusChanged:
    """Published after a session write has been stored.

    A sync acknowledgement is published with ``previous == current == ENDED``
    and ``synced=True``.
    """

    day: date
    session_type: SessionType
    previous: Optional[SessionStatus]
    current: SessionStatus
    at: datetime
    synced: bool = False


Subscriber = Callable[[SessionStatusChanged], None]


class SessionEventBus:
    """Observer Pattern: in-process fan-out of session status changes.

    Consumers (dashboards, export jobs) subscribe instead of polling storage.
    """

    def __init__(self):
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: SessionStatusChanged) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                # The transition is already stored; a broken listener must not undo it.
                logger.exception(
                    "Session event subscriber failed for %s %s", event.session_type.value, event.day
                )
