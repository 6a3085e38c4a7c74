from __future__ import annotations

from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role, SessionType
from ..core.exceptions import (
    ArtifactLockedError,
    AuthorizationError,
    CommitFailureError,
    ConcurrentTransitionError,
    DomainError,
    IllegalTransitionError,
    SessionNotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (SessionNotFoundError, 404),
    (IllegalTransitionError, 409),
    (ConcurrentTransitionError, 409),
    (ArtifactLockedError, 409),
    (CommitFailureError, 503),
)


def error_response(exc: DomainError):
    code = next((status for cls, status in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
    return jsonify({"error": type(exc).__name__, "message": str(exc)}), code


def current_role() -> Role:
    try:
        return Role(session.get("role") or Role.MEMBER.value)
    except ValueError:
        return Role.MEMBER


def current_participant_id() -> Optional[int]:
    value = session.get("participant_id")
    return int(value) if value is not None else None


def current_operator() -> str:
    return str(session.get("name") or current_role().value)


def parse_session_type(value: str) -> SessionType:
    try:
        return SessionType(value)
    except ValueError:
        raise ValidationError(f"Unknown session type: {value!r}")


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
