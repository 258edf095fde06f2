"""Second phase of confirmation-required scans."""

import logging
from dataclasses import dataclass
from datetime import datetime

from placement_attendance.domain.audit import EventSeverity, SecurityEvent
from placement_attendance.domain.errors import ExpiredOrInvalidToken
from placement_attendance.domain.identity import Principal
from placement_attendance.domain.scans import ConfirmationTicket, ScanKind, ScanResult
from placement_attendance.services.attendance import AttendanceRecorder, require_admin
from placement_attendance.services.audit import AuditService
from placement_attendance.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationHandler:
    """Commits attendance for a tuple an operator confirmed visually."""

    recorder: AttendanceRecorder
    token_issuer: TokenIssuer
    audit_service: AuditService

    def confirm(
        self,
        principal: Principal,
        ticket: ConfirmationTicket,
        now: datetime,
        location: str | None = None,
    ) -> ScanResult:
        """Mark attendance for the confirmed tuple exactly once.

        Round state is deliberately not consulted: a round closed between
        scan and confirmation still accepts the attendance fact.
        """
        require_admin(principal)
        try:
            claims = self.token_issuer.verify_confirmation(
                ticket.confirmation_token, now
            )
        except ExpiredOrInvalidToken as exc:
            self._reject(principal, ticket, now, exc.message)
            raise

        signed = (claims.student_id, claims.job_id, claims.round_id, claims.session_id)
        submitted = (
            ticket.student_id,
            ticket.job_id,
            ticket.round_id,
            ticket.session_id,
        )
        if signed != submitted:
            reason = "Confirmation does not match the scanned QR code"
            self._reject(principal, ticket, now, reason)
            raise ExpiredOrInvalidToken(reason)

        return self.recorder.mark(
            principal,
            ticket.key,
            now,
            location,
            kind=ScanKind.CONFIRMED,
            event_type="attendance_confirmed",
        )

    def _reject(
        self,
        principal: Principal,
        ticket: ConfirmationTicket,
        now: datetime,
        reason: str,
    ) -> None:
        logger.warning("Confirmation rejected for %s: %s", principal.user_id, reason)
        self.audit_service.record(
            SecurityEvent(
                event_type="confirmation_rejected",
                actor_id=principal.user_id,
                occurred_at=now,
                outcome="rejected",
                severity=EventSeverity.WARNING,
                student_id=ticket.student_id,
                job_id=ticket.job_id,
                round_id=ticket.round_id,
                details={"reason": reason},
            )
        )
