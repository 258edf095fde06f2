"""Display summaries for students and jobs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StudentSummary:
    """Student details shown to the operator after a scan."""

    id: str
    name: str | None
    email: str | None
    usn: str | None = None
    branch: str | None = None


@dataclass(frozen=True)
class JobSummary:
    """Job details shown to the operator after a scan."""

    id: str
    title: str
    company: str | None = None
