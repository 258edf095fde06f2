"""Round eligibility rules."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from placement_attendance.domain.attendance import AttendanceOutcome, AttendanceRecord
from placement_attendance.domain.rounds import Application, Round


class EligibilityPolicy(Protocol):
    """Decides whether an applicant may attend a round."""

    def is_eligible(
        self,
        application: Application,
        round_: Round,
        rounds: Sequence[Round],
        attendance: Mapping[str | None, AttendanceRecord],
    ) -> bool:
        """Return True when the applicant may attend ``round_``."""


@dataclass
class PipelineEligibility(EligibilityPolicy):
    """Applicants progress round by round.

    The first round is open to every active applicant; a later round requires
    a passing result in the round immediately before it.
    """

    excluded_statuses: frozenset[str] = field(
        default_factory=lambda: frozenset({"REJECTED", "WITHDRAWN"})
    )

    def is_eligible(
        self,
        application: Application,
        round_: Round,
        rounds: Sequence[Round],
        attendance: Mapping[str | None, AttendanceRecord],
    ) -> bool:
        if application.status.upper() in self.excluded_statuses:
            return False
        ordered = sorted(rounds, key=lambda item: item.order)
        previous = [item for item in ordered if item.order < round_.order]
        if not previous:
            return True
        record = attendance.get(previous[-1].id)
        return record is not None and record.outcome == AttendanceOutcome.PASSED
