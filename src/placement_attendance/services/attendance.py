"""Attendance persistence contract shared by scan and confirm."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from placement_attendance.domain.attendance import (
    AttendanceDraft,
    AttendanceKey,
    AttendanceRecord,
)
from placement_attendance.domain.audit import SecurityEvent
from placement_attendance.domain.directory import JobSummary, StudentSummary
from placement_attendance.domain.errors import AlreadyAttended, NotAuthorized
from placement_attendance.domain.identity import Principal
from placement_attendance.domain.rounds import Application, Round
from placement_attendance.domain.scans import (
    ConfirmationTicket,
    ScanKind,
    ScanResult,
)
from placement_attendance.services.audit import AuditService


class AttendanceRepository(Protocol):
    """Persistence interface for attendance facts."""

    def create_if_absent(
        self, draft: AttendanceDraft
    ) -> tuple[AttendanceRecord, bool]:
        """Atomically insert the record unless its key exists.

        Returns the stored record and whether this call created it.
        """

    def list_for_student_job(
        self, student_id: str, job_id: str
    ) -> list[AttendanceRecord]:
        """Return every attendance fact of a student for a job."""

    def list_for_job(
        self, job_id: str, round_id: str | None = None
    ) -> list[AttendanceRecord]:
        """Return attendance facts for a job, newest scan first."""


class RoundRepository(Protocol):
    """Read-only access to job rounds."""

    def list_rounds(self, job_id: str) -> list[Round]:
        """Return the rounds configured for a job."""

    def get_round(self, round_id: str) -> Round | None:
        """Return a round by id, if present."""


class ApplicationRepository(Protocol):
    """Read-only access to job applications."""

    def get_application(self, application_id: str) -> Application | None:
        """Return an application by id, if present."""

    def find_application(self, student_id: str, job_id: str) -> Application | None:
        """Return the student's application to a job, if present."""


class DirectoryRepository(Protocol):
    """Read-only access to student and job display data."""

    def get_student(self, student_id: str) -> StudentSummary | None:
        """Return display data for a student."""

    def get_job(self, job_id: str) -> JobSummary | None:
        """Return display data for a job."""


def require_admin(principal: Principal) -> None:
    """Reject callers that are not placement operators."""
    if not principal.is_admin:
        raise NotAuthorized("Operator access required")


def attendance_by_round(
    records: list[AttendanceRecord],
) -> dict[str | None, AttendanceRecord]:
    """Index a student's attendance facts for one job by round id."""
    return {record.round_id: record for record in records}


@dataclass
class AttendanceRecorder:
    """Writes attendance through the create-if-absent contract."""

    repository: AttendanceRepository
    round_repository: RoundRepository
    directory: DirectoryRepository
    audit_service: AuditService

    def mark(  # noqa: PLR0913
        self,
        principal: Principal,
        key: AttendanceKey,
        now: datetime,
        location: str | None,
        kind: ScanKind,
        event_type: str,
    ) -> ScanResult:
        """Record attendance once, raising AlreadyAttended on a repeat."""
        draft = AttendanceDraft(
            key=key,
            scanned_at=now,
            scanned_by=principal.user_id,
            location=location,
        )
        record, created = self.repository.create_if_absent(draft)
        if not created:
            self.audit_service.record(
                SecurityEvent(
                    event_type="attendance_duplicate",
                    actor_id=principal.user_id,
                    occurred_at=now,
                    outcome="already_attended",
                    student_id=key.student_id,
                    job_id=key.job_id,
                    round_id=key.round_id,
                    details={
                        "attendance_id": record.id,
                        "existing_scanned_at": record.scanned_at.isoformat(),
                    },
                )
            )
            raise AlreadyAttended(
                self.describe(ScanKind.ALREADY_ATTENDED, key, record=record)
            )

        self.audit_service.record(
            SecurityEvent(
                event_type=event_type,
                actor_id=principal.user_id,
                occurred_at=now,
                outcome="recorded",
                student_id=key.student_id,
                job_id=key.job_id,
                round_id=key.round_id,
                details={"attendance_id": record.id, "location": location},
            )
        )
        return self.describe(kind, key, record=record)

    def describe(
        self,
        kind: ScanKind,
        key: AttendanceKey,
        record: AttendanceRecord | None = None,
        ticket: ConfirmationTicket | None = None,
        candidate_rounds: list[Round] | None = None,
    ) -> ScanResult:
        """Attach student, job and round display data to a result."""
        round_ = self.round_repository.get_round(key.round_id) if key.round_id else None
        return ScanResult(
            kind=kind,
            key=key,
            student=self.directory.get_student(key.student_id),
            job=self.directory.get_job(key.job_id),
            round=round_,
            record=record,
            ticket=ticket,
            candidate_rounds=candidate_rounds or [],
        )
