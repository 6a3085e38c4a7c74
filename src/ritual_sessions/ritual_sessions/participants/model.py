from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """Domain entity: a team member who appears on session rosters.

    Note: Plain data object (no DB access code).
    """

    participant_id: int
    name: str
    email: str
    employee_code: Optional[str] = None
    archived: bool = False
