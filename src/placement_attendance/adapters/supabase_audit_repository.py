"""Supabase repository for security events."""

from dataclasses import dataclass

from supabase import Client

from placement_attendance.adapters.supabase_errors import storage_errors
from placement_attendance.domain.audit import SecurityEvent
from placement_attendance.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed append-only audit repository."""

    client: Client

    def create_event(self, event: SecurityEvent) -> None:
        """Create a security event row."""
        with storage_errors("write security event"):
            self.client.table("security_events").insert(
                {
                    "event_type": event.event_type,
                    "severity": event.severity.value,
                    "actor_id": event.actor_id,
                    "student_id": event.student_id,
                    "job_id": event.job_id,
                    "round_id": event.round_id,
                    "outcome": event.outcome,
                    "occurred_at": event.occurred_at.isoformat(),
                    "details_json": event.details,
                }
            ).execute()
