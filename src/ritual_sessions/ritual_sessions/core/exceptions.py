class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class InvalidScheduleError(ValidationError):
    """Raised when a session is scheduled into the past."""


class MissingReasonError(ValidationError):
    """Raised when a Not Available mark has no reason."""


class SessionNotFoundError(DomainError):
    """Raised when no session exists for a (day, type) key."""


class IllegalTransitionError(DomainError):
    """Raised when an operation is not valid for the session's current status."""


class ConcurrentTransitionError(DomainError):
    """Raised when another caller is transitioning (or has just transitioned) the same session."""


class CommitFailureError(DomainError):
    """Raised when the roster could not be written atomically.

    The session stays active and the working set is untouched, so the caller
    may retry the termination.
    """


class ArtifactLockedError(DomainError):
    """Raised when a learning point is modified after its session has ended."""
