"""Supabase repository for student and job display data."""

from dataclasses import dataclass

from supabase import Client

from placement_attendance.adapters.supabase_errors import storage_errors
from placement_attendance.domain.directory import JobSummary, StudentSummary
from placement_attendance.services.attendance import DirectoryRepository


@dataclass
class SupabaseDirectoryRepository(DirectoryRepository):
    """Supabase implementation for profile and job summaries."""

    client: Client

    def get_student(self, student_id: str) -> StudentSummary | None:
        """Return display data for a student."""
        with storage_errors("read profile"):
            response = (
                self.client.table("profiles")
                .select("user_id, first_name, last_name, usn, branch, users(name, email)")
                .eq("user_id", student_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        user = row.get("users") or {}
        if not isinstance(user, dict):
            user = {}
        full_name = " ".join(
            part for part in (row.get("first_name"), row.get("last_name")) if part
        )
        return StudentSummary(
            id=str(row["user_id"]),
            name=user.get("name") or full_name or None,
            email=user.get("email"),
            usn=row.get("usn"),
            branch=row.get("branch"),
        )

    def get_job(self, job_id: str) -> JobSummary | None:
        """Return display data for a job."""
        with storage_errors("read job"):
            response = (
                self.client.table("jobs")
                .select("id, title, company_name")
                .eq("id", job_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        return JobSummary(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            company=row.get("company_name"),
        )
