"""Per-round status projection for students."""

from dataclasses import dataclass
from datetime import datetime

from placement_attendance.domain.attendance import AttendanceOutcome, AttendanceRecord
from placement_attendance.domain.errors import ApplicationNotFound, NotAuthorized
from placement_attendance.domain.identity import Principal, Role
from placement_attendance.domain.rounds import Application, Round, RoundState
from placement_attendance.domain.status import (
    RoundStatus,
    RoundStatusReport,
    RoundStatusView,
)
from placement_attendance.services.attendance import (
    ApplicationRepository,
    AttendanceRepository,
    RoundRepository,
    attendance_by_round,
)
from placement_attendance.services.eligibility import EligibilityPolicy
from placement_attendance.services.tokens import TokenIssuer

_ATTENDED = {
    AttendanceOutcome.NONE: RoundStatus.ATTENDED_ATTENDED,
    AttendanceOutcome.PASSED: RoundStatus.ATTENDED_PASSED,
    AttendanceOutcome.FAILED: RoundStatus.ATTENDED_FAILED,
}

_CLOSED = {
    RoundState.INACTIVE: RoundStatus.NOT_STARTED,
    RoundState.TEMP_CLOSED: RoundStatus.TEMP_CLOSED,
    RoundState.PERM_CLOSED: RoundStatus.PERM_CLOSED,
}


@dataclass
class RoundStatusResolver:
    """Recomputes a student's round statuses on every request.

    Attendance facts take precedence over round activation state, and a
    token is only issued for ACTIVE rounds the student is eligible for and
    has not attended yet. Nothing is written.
    """

    round_repository: RoundRepository
    application_repository: ApplicationRepository
    attendance_repository: AttendanceRepository
    eligibility: EligibilityPolicy
    token_issuer: TokenIssuer
    refresh_after_seconds: int = 240

    def resolve(
        self, principal: Principal, job_id: str, now: datetime
    ) -> RoundStatusReport:
        """Return the ordered round statuses of a job for the caller."""
        if principal.role != Role.STUDENT:
            raise NotAuthorized("Round status is only available to students")
        application = self.application_repository.find_application(
            principal.user_id, job_id
        )
        if application is None:
            raise ApplicationNotFound("You have not applied to this job")

        rounds = sorted(
            self.round_repository.list_rounds(job_id), key=lambda item: item.order
        )
        records = attendance_by_round(
            self.attendance_repository.list_for_student_job(principal.user_id, job_id)
        )

        return RoundStatusReport(
            job_id=job_id,
            rounds=[
                self._view(principal, application, round_, rounds, records, now)
                for round_ in rounds
            ],
            refresh_after_seconds=self.refresh_after_seconds,
        )

    def _view(  # noqa: PLR0913
        self,
        principal: Principal,
        application: Application,
        round_: Round,
        rounds: list[Round],
        records: dict[str | None, AttendanceRecord],
        now: datetime,
    ) -> RoundStatusView:
        record = records.get(round_.id)
        if record is not None:
            return _attended_view(round_, record)
        if not self.eligibility.is_eligible(application, round_, rounds, records):
            return _plain_view(round_, RoundStatus.NOT_ELIGIBLE)
        if round_.state != RoundState.ACTIVE:
            return _plain_view(round_, _CLOSED[round_.state])

        issued = self.token_issuer.issue(
            principal.user_id, round_.job_id, round_.id, principal.session_id, now
        )
        return RoundStatusView(
            round_id=round_.id,
            round_name=round_.name,
            round_order=round_.order,
            status=RoundStatus.ACTIVE,
            token=issued.token,
            token_expires_at=issued.expires_at,
        )


def _plain_view(round_: Round, status: RoundStatus) -> RoundStatusView:
    return RoundStatusView(
        round_id=round_.id,
        round_name=round_.name,
        round_order=round_.order,
        status=status,
    )


def _attended_view(round_: Round, record: AttendanceRecord) -> RoundStatusView:
    return RoundStatusView(
        round_id=round_.id,
        round_name=round_.name,
        round_order=round_.order,
        status=_ATTENDED[record.outcome],
        attendance=record,
    )
