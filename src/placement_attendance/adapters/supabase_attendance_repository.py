"""Supabase-backed attendance repository.

The ``attendance_records`` table carries a unique index declared as
``UNIQUE NULLS NOT DISTINCT (student_id, job_id, round_id)`` so legacy rows
without a round are unique per student and job as well.
"""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from placement_attendance.adapters.supabase_errors import storage_errors
from placement_attendance.domain.attendance import (
    AttendanceDraft,
    AttendanceKey,
    AttendanceOutcome,
    AttendanceRecord,
)
from placement_attendance.domain.errors import AttendanceStoreUnavailable
from placement_attendance.services.attendance import AttendanceRepository

_TABLE = "attendance_records"
_COLUMNS = "id, student_id, job_id, round_id, scanned_at, scanned_by, location, outcome"
_CONFLICT_COLUMNS = "student_id,job_id,round_id"


@dataclass
class SupabaseAttendanceRepository(AttendanceRepository):
    """Supabase implementation for attendance facts."""

    client: Client

    def create_if_absent(
        self, draft: AttendanceDraft
    ) -> tuple[AttendanceRecord, bool]:
        """Insert with ON CONFLICT DO NOTHING and report who won."""
        with storage_errors("create attendance"):
            response = (
                self.client.table(_TABLE)
                .upsert(
                    {
                        "student_id": draft.key.student_id,
                        "job_id": draft.key.job_id,
                        "round_id": draft.key.round_id,
                        "scanned_at": draft.scanned_at.isoformat(),
                        "scanned_by": draft.scanned_by,
                        "location": draft.location,
                        "outcome": AttendanceOutcome.NONE.value,
                    },
                    on_conflict=_CONFLICT_COLUMNS,
                    ignore_duplicates=True,
                )
                .execute()
            )
        if response.data:
            return _parse_row(response.data[0]), True

        existing = self.get_by_key(draft.key)
        if existing is None:
            raise AttendanceStoreUnavailable(
                "Attendance write was ignored but no existing record was found"
            )
        return existing, False

    def get_by_key(self, key: AttendanceKey) -> AttendanceRecord | None:
        """Return the record stored under a key, if present."""
        with storage_errors("read attendance"):
            query = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("student_id", key.student_id)
                .eq("job_id", key.job_id)
            )
            if key.round_id is None:
                query = query.is_("round_id", "null")
            else:
                query = query.eq("round_id", key.round_id)
            response = query.limit(1).execute()
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_for_student_job(
        self, student_id: str, job_id: str
    ) -> list[AttendanceRecord]:
        """Return every attendance fact of a student for a job."""
        with storage_errors("list student attendance"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("student_id", student_id)
                .eq("job_id", job_id)
                .execute()
            )
        return [_parse_row(row) for row in response.data or []]

    def list_for_job(
        self, job_id: str, round_id: str | None = None
    ) -> list[AttendanceRecord]:
        """Return attendance facts for a job, newest scan first."""
        with storage_errors("list job attendance"):
            query = self.client.table(_TABLE).select(_COLUMNS).eq("job_id", job_id)
            if round_id is not None:
                query = query.eq("round_id", round_id)
            response = query.order("scanned_at", desc=True).execute()
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> AttendanceRecord:
    outcome_raw = str(row.get("outcome") or AttendanceOutcome.NONE.value).upper()
    try:
        outcome = AttendanceOutcome(outcome_raw)
    except ValueError:
        outcome = AttendanceOutcome.NONE
    round_id = row.get("round_id")
    location = row.get("location")
    return AttendanceRecord(
        id=str(row["id"]),
        student_id=str(row["student_id"]),
        job_id=str(row["job_id"]),
        round_id=str(round_id) if round_id else None,
        scanned_at=datetime.fromisoformat(str(row["scanned_at"])),
        scanned_by=str(row.get("scanned_by") or ""),
        location=str(location) if location else None,
        outcome=outcome,
    )
