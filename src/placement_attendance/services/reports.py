"""Attendance listings for operators."""

from dataclasses import dataclass

from placement_attendance.domain.attendance import AttendanceRecord
from placement_attendance.domain.identity import Principal
from placement_attendance.services.attendance import (
    AttendanceRepository,
    require_admin,
)


@dataclass
class AttendanceReportService:
    """Service for the operator attendance list."""

    repository: AttendanceRepository

    def list_for_job(
        self, principal: Principal, job_id: str, round_id: str | None = None
    ) -> list[dict[str, object]]:
        """Return attendance rows for a job, newest scan first."""
        require_admin(principal)
        records = self.repository.list_for_job(job_id, round_id)
        ordered = sorted(records, key=lambda record: record.scanned_at, reverse=True)
        return [_serialize_record(record) for record in ordered]


def _serialize_record(record: AttendanceRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "studentId": record.student_id,
        "jobId": record.job_id,
        "roundId": record.round_id,
        "scannedAt": record.scanned_at.isoformat(),
        "scannedBy": record.scanned_by,
        "location": record.location,
        "outcome": record.outcome.value,
    }
