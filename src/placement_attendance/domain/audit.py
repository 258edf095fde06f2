"""Domain models for security events."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class EventSeverity(StrEnum):
    """Severity recorded with a security event."""

    INFO = "INFO"
    WARNING = "WARNING"


@dataclass(frozen=True)
class SecurityEvent:
    """Audit entry for a scan, confirm or rejection."""

    event_type: str
    actor_id: str
    occurred_at: datetime
    outcome: str
    severity: EventSeverity = EventSeverity.INFO
    student_id: str | None = None
    job_id: str | None = None
    round_id: str | None = None
    details: dict[str, object] = field(default_factory=dict)
