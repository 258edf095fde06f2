"""Security event logging service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from placement_attendance.app_logging import SECURITY_LOGGER
from placement_attendance.domain.audit import EventSeverity, SecurityEvent

_LEVELS = {
    EventSeverity.INFO: logging.INFO,
    EventSeverity.WARNING: logging.WARNING,
}


class AuditRepository(Protocol):
    """Append-only persistence interface for security events."""

    def create_event(self, event: SecurityEvent) -> None:
        """Create a security event row."""


@dataclass
class AuditService:
    """Service for recording security events."""

    repository: AuditRepository

    def record(self, event: SecurityEvent) -> None:
        """Persist a security event and mirror it to the security log."""
        logging.getLogger(SECURITY_LOGGER).log(
            _LEVELS[event.severity],
            "%s outcome=%s actor=%s student=%s job=%s round=%s",
            event.event_type,
            event.outcome,
            event.actor_id,
            event.student_id,
            event.job_id,
            event.round_id,
        )
        self.repository.create_event(event)
