"""Supabase repository for job applications."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from placement_attendance.adapters.supabase_errors import storage_errors
from placement_attendance.domain.rounds import Application
from placement_attendance.services.attendance import ApplicationRepository

_COLUMNS = "id, user_id, job_id, status, created_at"


@dataclass
class SupabaseApplicationRepository(ApplicationRepository):
    """Supabase implementation for application lookups."""

    client: Client

    def get_application(self, application_id: str) -> Application | None:
        """Return an application by id, if present."""
        with storage_errors("read application"):
            response = (
                self.client.table("applications")
                .select(_COLUMNS)
                .eq("id", application_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def find_application(self, student_id: str, job_id: str) -> Application | None:
        """Return the student's application to a job, if present."""
        with storage_errors("find application"):
            response = (
                self.client.table("applications")
                .select(_COLUMNS)
                .eq("user_id", student_id)
                .eq("job_id", job_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> Application:
    created_raw = row.get("created_at")
    return Application(
        id=str(row["id"]),
        student_id=str(row["user_id"]),
        job_id=str(row["job_id"]),
        status=str(row.get("status") or "PENDING"),
        created_at=datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None,
    )
