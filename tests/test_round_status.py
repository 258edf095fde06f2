"""Tests for the round status resolver."""

from datetime import timedelta

import pytest

from placement_attendance.domain.attendance import AttendanceOutcome
from placement_attendance.domain.errors import ApplicationNotFound, NotAuthorized
from placement_attendance.domain.rounds import RoundState
from placement_attendance.domain.status import RoundStatus
from tests.conftest import (
    APPLICATION_ID,
    JOB_ID,
    NOW,
    STUDENT_ID,
    Harness,
    operator,
    student,
)


def _seed(harness: Harness) -> None:
    harness.applications.add(APPLICATION_ID, STUDENT_ID, JOB_ID)
    harness.rounds.add("rnd_2", JOB_ID, 2, RoundState.INACTIVE)
    harness.rounds.add("rnd_1", JOB_ID, 1, RoundState.ACTIVE)


def test_active_round_returns_token_bound_to_session(harness: Harness) -> None:
    _seed(harness)

    report = harness.resolver.resolve(student(session_id="sess-42"), JOB_ID, NOW)

    assert [view.round_id for view in report.rounds] == ["rnd_1", "rnd_2"]
    active, later = report.rounds
    assert active.status == RoundStatus.ACTIVE
    assert active.token is not None
    assert active.token_expires_at == NOW + timedelta(minutes=5)
    claims = harness.token_issuer.verify(active.token, NOW)
    assert (claims.student_id, claims.job_id, claims.round_id, claims.session_id) == (
        STUDENT_ID,
        JOB_ID,
        "rnd_1",
        "sess-42",
    )
    assert later.status == RoundStatus.NOT_ELIGIBLE
    assert later.token is None
    assert report.refresh_after_seconds == 240


def test_round_states_without_attendance(harness: Harness) -> None:
    harness.applications.add(APPLICATION_ID, STUDENT_ID, JOB_ID)
    harness.rounds.add("rnd_1", JOB_ID, 1, RoundState.INACTIVE)

    assert harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0].status == (
        RoundStatus.NOT_STARTED
    )
    harness.rounds.set_state("rnd_1", RoundState.TEMP_CLOSED)
    assert harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0].status == (
        RoundStatus.TEMP_CLOSED
    )
    harness.rounds.set_state("rnd_1", RoundState.PERM_CLOSED)
    view = harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0]
    assert view.status == RoundStatus.PERM_CLOSED
    assert view.token is None


@pytest.mark.parametrize(
    ("outcome", "expected"),
    [
        (AttendanceOutcome.NONE, RoundStatus.ATTENDED_ATTENDED),
        (AttendanceOutcome.PASSED, RoundStatus.ATTENDED_PASSED),
        (AttendanceOutcome.FAILED, RoundStatus.ATTENDED_FAILED),
    ],
)
def test_attendance_outcome_maps_to_status(
    harness: Harness, outcome: AttendanceOutcome, expected: RoundStatus
) -> None:
    _seed(harness)
    record = harness.attendance.add(STUDENT_ID, JOB_ID, "rnd_1", outcome)

    view = harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0]

    assert view.status == expected
    assert view.token is None
    assert view.attendance == record


def test_attendance_takes_precedence_over_closed_round(harness: Harness) -> None:
    _seed(harness)
    harness.attendance.add(STUDENT_ID, JOB_ID, "rnd_1", AttendanceOutcome.PASSED)
    harness.rounds.set_state("rnd_1", RoundState.PERM_CLOSED)

    view = harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0]

    assert view.status == RoundStatus.ATTENDED_PASSED


def test_pass_unlocks_next_active_round(harness: Harness) -> None:
    _seed(harness)
    harness.attendance.add(STUDENT_ID, JOB_ID, "rnd_1", AttendanceOutcome.PASSED)
    harness.rounds.set_state("rnd_2", RoundState.ACTIVE)

    later = harness.resolver.resolve(student(), JOB_ID, NOW).rounds[1]

    assert later.status == RoundStatus.ACTIVE
    assert later.token is not None


def test_temp_close_hides_token_but_keeps_issued_tokens_valid(
    harness: Harness,
) -> None:
    _seed(harness)
    before = harness.resolver.resolve(student(), JOB_ID, NOW).rounds[0]

    harness.rounds.set_state("rnd_1", RoundState.TEMP_CLOSED)
    after = harness.resolver.resolve(student(), JOB_ID, NOW + timedelta(minutes=1))

    assert after.rounds[0].status == RoundStatus.TEMP_CLOSED
    assert after.rounds[0].token is None
    assert before.token is not None
    claims = harness.token_issuer.verify(before.token, NOW + timedelta(minutes=2))
    assert claims.round_id == "rnd_1"


def test_resolver_requires_application(harness: Harness) -> None:
    harness.rounds.add("rnd_1", JOB_ID, 1, RoundState.ACTIVE)

    with pytest.raises(ApplicationNotFound):
        harness.resolver.resolve(student(), JOB_ID, NOW)


def test_resolver_is_for_students_only(harness: Harness) -> None:
    _seed(harness)

    with pytest.raises(NotAuthorized):
        harness.resolver.resolve(operator(), JOB_ID, NOW)


def test_resolver_does_not_write(harness: Harness) -> None:
    _seed(harness)

    harness.resolver.resolve(student(), JOB_ID, NOW)

    assert harness.attendance.records == {}
    assert harness.audit.events == []
