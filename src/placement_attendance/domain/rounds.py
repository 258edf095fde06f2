"""Domain models for job selection rounds and applications."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class RoundState(StrEnum):
    """Administrative activation state of a round."""

    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"
    TEMP_CLOSED = "TEMP_CLOSED"
    PERM_CLOSED = "PERM_CLOSED"


@dataclass(frozen=True)
class Round:
    """Ordered stage within a job's selection pipeline."""

    id: str
    job_id: str
    order: int
    name: str
    state: RoundState


@dataclass(frozen=True)
class Application:
    """A student's application to a job."""

    id: str
    student_id: str
    job_id: str
    status: str
    created_at: datetime | None = None
