from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Participant


class ParticipantRepository(Protocol):
    """Roster source.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, participant_id: int) -> Optional[Participant]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Participant]:
        """Participants on every roster (archived members excluded), ordered by id."""

        raise NotImplementedError
