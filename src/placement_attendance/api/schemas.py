"""Pydantic request and response models for the attendance API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from placement_attendance.domain.attendance import AttendanceRecord
from placement_attendance.domain.rounds import Round
from placement_attendance.domain.scans import ConfirmationTicket, ScanKind, ScanResult
from placement_attendance.domain.status import RoundStatusReport, RoundStatusView


class ApiModel(BaseModel):
    """Base model using the portal client's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanRequest(ApiModel):
    """Decoded QR text posted by an operator device."""

    qr_data: str
    job_id: str | None = None
    location: str | None = None


class ConfirmRequest(ApiModel):
    """Tuple returned by a confirmation-required scan."""

    student_id: str
    job_id: str
    round_id: str | None = None
    session_id: str | None = None
    confirmation_token: str
    location: str | None = None

    def to_ticket(self) -> ConfirmationTicket:
        return ConfirmationTicket(
            student_id=self.student_id,
            job_id=self.job_id,
            round_id=self.round_id,
            session_id=self.session_id,
            confirmation_token=self.confirmation_token,
        )


class StudentOut(ApiModel):
    id: str
    name: str | None = None
    email: str | None = None
    usn: str | None = None
    branch: str | None = None


class JobOut(ApiModel):
    id: str
    title: str
    company: str | None = None


class RoundOut(ApiModel):
    id: str
    name: str
    order: int


class TokenDataOut(ApiModel):
    student_id: str
    job_id: str
    round_id: str | None = None
    session_id: str | None = None
    confirmation_token: str
    expires_at: datetime | None = None


class ScanResponse(ApiModel):
    """Operator-facing result of a scan or confirmation."""

    success: bool
    message: str
    require_confirmation: bool = False
    already_attended: bool = False
    student: StudentOut | None = None
    job: JobOut | None = None
    round: RoundOut | None = None
    candidate_rounds: list[RoundOut] = []
    token_data: TokenDataOut | None = None
    scanned_at: datetime | None = None
    marked_at: datetime | None = None


class AttendanceOut(ApiModel):
    marked_at: datetime
    result: str


class RoundStatusOut(ApiModel):
    round_id: str
    round_name: str
    round_order: int
    status: str
    qr_token: str | None = None
    token_expires_at: datetime | None = None
    attendance: AttendanceOut | None = None


class RoundStatusResponse(ApiModel):
    job_id: str
    refresh_after_seconds: int
    rounds: list[RoundStatusOut]


_MESSAGES = {
    ScanKind.RECORDED: "Attendance recorded successfully",
    ScanKind.CONFIRMED: "Attendance confirmed",
    ScanKind.CONFIRMATION_REQUIRED: "Verify the student's identity to confirm",
    ScanKind.ALREADY_ATTENDED: "Attendance already recorded",
}


def scan_response(result: ScanResult) -> dict[str, object]:
    """Serialize a scan result for the operator client."""
    response = ScanResponse(
        success=result.kind != ScanKind.ALREADY_ATTENDED,
        message=_MESSAGES[result.kind],
        require_confirmation=result.require_confirmation,
        already_attended=result.kind == ScanKind.ALREADY_ATTENDED,
        student=StudentOut(**vars(result.student)) if result.student else None,
        job=JobOut(**vars(result.job)) if result.job else None,
        round=_round_out(result.round) if result.round else None,
        candidate_rounds=[_round_out(round_) for round_ in result.candidate_rounds],
        token_data=_token_data_out(result.ticket) if result.ticket else None,
        scanned_at=result.scanned_at,
        marked_at=result.scanned_at
        if result.kind in {ScanKind.RECORDED, ScanKind.CONFIRMED}
        else None,
    )
    return response.model_dump(by_alias=True, mode="json")


def round_status_response(report: RoundStatusReport) -> dict[str, object]:
    """Serialize a round status report for the student client."""
    response = RoundStatusResponse(
        job_id=report.job_id,
        refresh_after_seconds=report.refresh_after_seconds,
        rounds=[_round_status_out(view) for view in report.rounds],
    )
    return response.model_dump(by_alias=True, mode="json")


def _round_out(round_: Round) -> RoundOut:
    return RoundOut(id=round_.id, name=round_.name, order=round_.order)


def _token_data_out(ticket: ConfirmationTicket) -> TokenDataOut:
    return TokenDataOut(
        student_id=ticket.student_id,
        job_id=ticket.job_id,
        round_id=ticket.round_id,
        session_id=ticket.session_id,
        confirmation_token=ticket.confirmation_token,
        expires_at=ticket.expires_at,
    )


def _attendance_out(record: AttendanceRecord) -> AttendanceOut:
    return AttendanceOut(marked_at=record.scanned_at, result=record.outcome.value)


def _round_status_out(view: RoundStatusView) -> RoundStatusOut:
    return RoundStatusOut(
        round_id=view.round_id,
        round_name=view.round_name,
        round_order=view.round_order,
        status=view.status.value,
        qr_token=view.token,
        token_expires_at=view.token_expires_at,
        attendance=_attendance_out(view.attendance) if view.attendance else None,
    )
