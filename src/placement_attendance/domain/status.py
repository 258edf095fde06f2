"""Domain models for the per-round status projection."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from placement_attendance.domain.attendance import AttendanceRecord


class RoundStatus(StrEnum):
    """Student-facing status of a round."""

    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    NOT_STARTED = "NOT_STARTED"
    ACTIVE = "ACTIVE"
    TEMP_CLOSED = "TEMP_CLOSED"
    PERM_CLOSED = "PERM_CLOSED"
    ATTENDED_ATTENDED = "ATTENDED_ATTENDED"
    ATTENDED_PASSED = "ATTENDED_PASSED"
    ATTENDED_FAILED = "ATTENDED_FAILED"


@dataclass(frozen=True)
class RoundStatusView:
    """Read-only status of one round for one student."""

    round_id: str
    round_name: str
    round_order: int
    status: RoundStatus
    token: str | None = None
    token_expires_at: datetime | None = None
    attendance: AttendanceRecord | None = None


@dataclass(frozen=True)
class RoundStatusReport:
    """All round statuses of a job for one student."""

    job_id: str
    rounds: list[RoundStatusView]
    refresh_after_seconds: int
