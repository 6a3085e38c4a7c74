from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionType
from .model import Session


class SessionRepository(Protocol):
    def get(self, *, day: date, session_type: SessionType) -> Optional[Session]:
        raise NotImplementedError

    def create(self, session: Session) -> bool:
        """Insert a new session.

        Returns False when a session already exists for (day, type).
        """

        raise NotImplementedError

    def update(self, session: Session, *, expected_version: int) -> bool:
        """Store every mutable field of ``session`` if the stored version still equals ``expected_version``.

        Returns False when the row changed underneath the caller.
        """

        raise NotImplementedError

    def list_range(self, *, start: date, end: date, session_type: Optional[SessionType] = None) -> Sequence[Session]:
        raise NotImplementedError
