"""Domain models for attendance facts."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class AttendanceOutcome(StrEnum):
    """Round result attached to an attendance record."""

    NONE = "NONE"
    PASSED = "PASSED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class AttendanceKey:
    """Uniqueness key of an attendance fact.

    ``round_id`` is ``None`` for legacy single-round jobs.
    """

    student_id: str
    job_id: str
    round_id: str | None


@dataclass(frozen=True)
class AttendanceDraft:
    """Attendance fact about to be written."""

    key: AttendanceKey
    scanned_at: datetime
    scanned_by: str
    location: str | None = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Persisted attendance fact."""

    id: str
    student_id: str
    job_id: str
    round_id: str | None
    scanned_at: datetime
    scanned_by: str
    location: str | None
    outcome: AttendanceOutcome = AttendanceOutcome.NONE

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.student_id, self.job_id, self.round_id)
