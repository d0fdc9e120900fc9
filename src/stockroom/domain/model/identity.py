"""Request-scoped identity of the acting user.

Built once at the edge (CLI options, HTTP middleware) and passed explicitly
into every stock-mutating use case; core logic never looks it up itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stockroom.domain.exceptions import PermissionDeniedError, ValidationError


class Role(Enum):
    ADMIN = "admin"
    STAFF = "staff"


@dataclass(frozen=True)
class Identity:

    user_id: int
    role: Role = Role.STAFF

    @staticmethod
    def of(user_id: int, role: str) -> Identity:
        try:
            return Identity(user_id=user_id, role=Role(role.lower()))
        except ValueError as exc:
            raise ValidationError(f"Unknown role: {role!r}") from exc

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def require_admin(self, action: str) -> None:
        if not self.is_admin:
            raise PermissionDeniedError(f"Only admins may {action}")
