"""Domain models for scan and confirmation results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from placement_attendance.domain.attendance import AttendanceKey, AttendanceRecord
from placement_attendance.domain.directory import JobSummary, StudentSummary
from placement_attendance.domain.rounds import Round


class ScanKind(StrEnum):
    """How a scan or confirmation ended."""

    RECORDED = "RECORDED"
    CONFIRMED = "CONFIRMED"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    ALREADY_ATTENDED = "ALREADY_ATTENDED"


@dataclass(frozen=True)
class ConfirmationTicket:
    """Tuple an operator must confirm, with its signature."""

    student_id: str
    job_id: str
    round_id: str | None
    session_id: str | None
    confirmation_token: str
    expires_at: datetime | None = None

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.student_id, self.job_id, self.round_id)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a scan or confirmation with display context."""

    kind: ScanKind
    key: AttendanceKey
    student: StudentSummary | None = None
    job: JobSummary | None = None
    round: Round | None = None
    record: AttendanceRecord | None = None
    ticket: ConfirmationTicket | None = None
    candidate_rounds: list[Round] = field(default_factory=list)

    @property
    def scanned_at(self) -> datetime | None:
        return self.record.scanned_at if self.record else None

    @property
    def require_confirmation(self) -> bool:
        return self.kind == ScanKind.CONFIRMATION_REQUIRED
