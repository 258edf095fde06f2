"""Supabase repository for job rounds."""

from dataclasses import dataclass

from supabase import Client

from placement_attendance.adapters.supabase_errors import storage_errors
from placement_attendance.domain.rounds import Round, RoundState
from placement_attendance.services.attendance import RoundRepository

_COLUMNS = "id, job_id, round_order, name, state"


@dataclass
class SupabaseRoundRepository(RoundRepository):
    """Supabase implementation for round lookups."""

    client: Client

    def list_rounds(self, job_id: str) -> list[Round]:
        """Return the rounds configured for a job in pipeline order."""
        with storage_errors("list rounds"):
            response = (
                self.client.table("job_rounds")
                .select(_COLUMNS)
                .eq("job_id", job_id)
                .order("round_order", desc=False)
                .execute()
            )
        return [_parse_row(row) for row in response.data or []]

    def get_round(self, round_id: str) -> Round | None:
        """Return a round by id, if present."""
        with storage_errors("read round"):
            response = (
                self.client.table("job_rounds")
                .select(_COLUMNS)
                .eq("id", round_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> Round:
    state_raw = str(row.get("state") or RoundState.INACTIVE.value).upper()
    try:
        state = RoundState(state_raw)
    except ValueError:
        state = RoundState.INACTIVE
    return Round(
        id=str(row["id"]),
        job_id=str(row["job_id"]),
        order=int(row.get("round_order") or 0),
        name=str(row.get("name") or ""),
        state=state,
    )
