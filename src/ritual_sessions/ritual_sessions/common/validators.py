from __future__ import annotations

from typing import Optional

from ..core.enums import ADMIN_ROLES, Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_admin(current_role: Role) -> None:
    if current_role not in ADMIN_ROLES:
        raise AuthorizationError("Only administrators can manage sessions")
