"""Authenticated caller context."""

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Portal roles relevant to attendance."""

    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller passed explicitly into every operation."""

    user_id: str
    role: Role
    session_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
