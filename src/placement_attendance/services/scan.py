"""Scan processing for operator devices."""

import logging
from dataclasses import dataclass
from datetime import datetime

from placement_attendance.domain.attendance import AttendanceKey, AttendanceRecord
from placement_attendance.domain.audit import EventSeverity, SecurityEvent
from placement_attendance.domain.errors import (
    AlreadyAttended,
    ApplicationNotFound,
    ExpiredOrInvalidToken,
    InvalidPayload,
    JobMismatch,
    NoOpenRound,
)
from placement_attendance.domain.identity import Principal
from placement_attendance.domain.rounds import Application, RoundState
from placement_attendance.domain.scans import ConfirmationTicket, ScanKind, ScanResult
from placement_attendance.services.attendance import (
    ApplicationRepository,
    AttendanceRecorder,
    attendance_by_round,
    require_admin,
)
from placement_attendance.services.audit import AuditService
from placement_attendance.services.eligibility import EligibilityPolicy
from placement_attendance.services.payloads import (
    LegacyPayload,
    TokenPayload,
    decode_payload,
)
from placement_attendance.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class ScanProcessor:
    """Validates scanned QR payloads and records attendance."""

    recorder: AttendanceRecorder
    application_repository: ApplicationRepository
    eligibility: EligibilityPolicy
    token_issuer: TokenIssuer
    audit_service: AuditService
    allow_legacy_qr: bool = True

    def scan(  # noqa: PLR0913
        self,
        principal: Principal,
        qr_payload: str,
        now: datetime,
        job_filter: str | None = None,
        location: str | None = None,
    ) -> ScanResult:
        """Process one decoded QR payload from an operator device."""
        require_admin(principal)
        try:
            payload = decode_payload(qr_payload)
        except InvalidPayload:
            logger.info("Rejected unparseable QR payload from %s", principal.user_id)
            raise

        if isinstance(payload, TokenPayload):
            return self._scan_token(principal, payload, now, job_filter, location)
        return self._scan_legacy(principal, payload, now, job_filter)

    def _scan_token(  # noqa: PLR0913
        self,
        principal: Principal,
        payload: TokenPayload,
        now: datetime,
        job_filter: str | None,
        location: str | None,
    ) -> ScanResult:
        try:
            claims = self.token_issuer.verify(payload.token, now)
        except ExpiredOrInvalidToken as exc:
            self.audit_service.record(
                SecurityEvent(
                    event_type="qr_token_rejected",
                    actor_id=principal.user_id,
                    occurred_at=now,
                    outcome="rejected",
                    severity=EventSeverity.WARNING,
                    details={"reason": exc.message},
                )
            )
            raise

        _check_job_filter(principal, job_filter, claims.job_id)
        key = AttendanceKey(claims.student_id, claims.job_id, claims.round_id)
        return self.recorder.mark(
            principal,
            key,
            now,
            location,
            kind=ScanKind.RECORDED,
            event_type="attendance_recorded",
        )

    def _scan_legacy(
        self,
        principal: Principal,
        payload: LegacyPayload,
        now: datetime,
        job_filter: str | None,
    ) -> ScanResult:
        if not self.allow_legacy_qr:
            logger.info("Legacy QR payload refused for %s", principal.user_id)
            raise InvalidPayload(
                "Application QR codes are no longer accepted; "
                "ask the student to open the round QR"
            )

        application = self.application_repository.get_application(
            payload.application_id
        )
        if application is None:
            logger.info(
                "Legacy scan for unknown application %s", payload.application_id
            )
            raise ApplicationNotFound("Invalid QR code - application not found")
        _check_job_filter(principal, job_filter, application.job_id)

        records = attendance_by_round(
            self.recorder.repository.list_for_student_job(
                application.student_id, application.job_id
            )
        )
        candidates = self._candidate_rounds(application, records)
        if not candidates:
            logger.info(
                "No open round for student %s on job %s",
                application.student_id,
                application.job_id,
            )
            raise NoOpenRound("No active round is open for this student")

        open_candidates = [
            round_id for round_id in candidates if round_id not in records
        ]
        if not open_candidates:
            existing = records[candidates[0]]
            key = existing.key
            self._record_legacy_duplicate(principal, key, now, existing.id)
            raise AlreadyAttended(
                self.recorder.describe(ScanKind.ALREADY_ATTENDED, key, record=existing)
            )

        key = AttendanceKey(
            application.student_id, application.job_id, open_candidates[0]
        )
        issued = self.token_issuer.issue_confirmation(
            key.student_id, key.job_id, key.round_id, None, now
        )
        ticket = ConfirmationTicket(
            student_id=key.student_id,
            job_id=key.job_id,
            round_id=key.round_id,
            session_id=None,
            confirmation_token=issued.token,
            expires_at=issued.expires_at,
        )
        self.audit_service.record(
            SecurityEvent(
                event_type="attendance_confirmation_required",
                actor_id=principal.user_id,
                occurred_at=now,
                outcome="confirmation_required",
                student_id=key.student_id,
                job_id=key.job_id,
                round_id=key.round_id,
                details={
                    "application_id": application.id,
                    "candidate_round_ids": open_candidates,
                },
            )
        )
        rounds = {
            round_.id: round_
            for round_ in self.recorder.round_repository.list_rounds(key.job_id)
        }
        return self.recorder.describe(
            ScanKind.CONFIRMATION_REQUIRED,
            key,
            ticket=ticket,
            candidate_rounds=[
                rounds[round_id] for round_id in open_candidates if round_id in rounds
            ],
        )

    def _candidate_rounds(
        self,
        application: Application,
        records: dict[str | None, AttendanceRecord],
    ) -> list[str | None]:
        rounds = sorted(
            self.recorder.round_repository.list_rounds(application.job_id),
            key=lambda item: item.order,
        )
        if not rounds:
            return [None]
        return [
            round_.id
            for round_ in rounds
            if round_.state == RoundState.ACTIVE
            and self.eligibility.is_eligible(application, round_, rounds, records)
        ]

    def _record_legacy_duplicate(
        self,
        principal: Principal,
        key: AttendanceKey,
        now: datetime,
        attendance_id: str,
    ) -> None:
        self.audit_service.record(
            SecurityEvent(
                event_type="attendance_duplicate",
                actor_id=principal.user_id,
                occurred_at=now,
                outcome="already_attended",
                student_id=key.student_id,
                job_id=key.job_id,
                round_id=key.round_id,
                details={"attendance_id": attendance_id},
            )
        )


def _check_job_filter(
    principal: Principal, job_filter: str | None, job_id: str
) -> None:
    if job_filter and job_filter != job_id:
        logger.warning(
            "Job filter mismatch for %s: filter=%s payload=%s",
            principal.user_id,
            job_filter,
            job_id,
        )
        raise JobMismatch(job_filter, job_id)
