"""Errors raised by attendance operations."""

from placement_attendance.domain.attendance import AttendanceRecord
from placement_attendance.domain.scans import ScanResult


class AttendanceError(Exception):
    """Base class for attendance failures surfaced to callers."""

    status_code = 400
    code = "attendance_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPayload(AttendanceError):
    """QR content could not be parsed."""

    code = "invalid_payload"


class ExpiredOrInvalidToken(AttendanceError):
    """Token signature, type or validity window check failed."""

    status_code = 410
    code = "expired_or_invalid_token"


class JobMismatch(AttendanceError):
    """Scanned payload belongs to a job other than the operator's filter."""

    code = "job_mismatch"

    def __init__(self, expected_job_id: str, actual_job_id: str) -> None:
        super().__init__(
            "This QR code is for a different job. "
            "Clear the job filter or select the matching job and scan again."
        )
        self.expected_job_id = expected_job_id
        self.actual_job_id = actual_job_id


class ApplicationNotFound(AttendanceError):
    """No application matches the scanned identifier or caller."""

    status_code = 404
    code = "application_not_found"


class NoOpenRound(AttendanceError):
    """A legacy scan found no active round the student may attend."""

    status_code = 409
    code = "no_open_round"


class AlreadyAttended(AttendanceError):
    """Attendance for the tuple was recorded earlier.

    Carries the scan context so operators see whose record they hit.
    """

    status_code = 409
    code = "already_attended"

    def __init__(self, result: ScanResult) -> None:
        super().__init__("Attendance already recorded")
        self.result = result

    @property
    def record(self) -> AttendanceRecord | None:
        return self.result.record


class NotAuthorized(AttendanceError):
    """Caller's role does not permit the operation."""

    status_code = 403
    code = "not_authorized"


class AttendanceStoreUnavailable(AttendanceError):
    """Storage tier failed; the operator may retry."""

    status_code = 503
    code = "store_unavailable"
