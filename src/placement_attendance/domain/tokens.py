"""Domain models for signed QR tokens."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class QRTokenClaims:
    """Verified contents of an attendance or confirmation token."""

    student_id: str
    job_id: str
    round_id: str | None
    session_id: str | None
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and its validity window."""

    token: str
    issued_at: datetime
    expires_at: datetime
