"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from placement_attendance.config import Settings
from placement_attendance.containers import AppContainer
from placement_attendance.domain.attendance import (
    AttendanceDraft,
    AttendanceKey,
    AttendanceOutcome,
    AttendanceRecord,
)
from placement_attendance.domain.audit import SecurityEvent
from placement_attendance.domain.directory import JobSummary, StudentSummary
from placement_attendance.domain.errors import AttendanceStoreUnavailable
from placement_attendance.domain.identity import Principal, Role
from placement_attendance.domain.rounds import Application, Round, RoundState
from placement_attendance.services.attendance import (
    ApplicationRepository,
    AttendanceRecorder,
    AttendanceRepository,
    DirectoryRepository,
    RoundRepository,
)
from placement_attendance.services.audit import AuditRepository, AuditService
from placement_attendance.services.confirm import ConfirmationHandler
from placement_attendance.services.eligibility import PipelineEligibility
from placement_attendance.services.reports import AttendanceReportService
from placement_attendance.services.round_status import RoundStatusResolver
from placement_attendance.services.scan import ScanProcessor
from placement_attendance.services.tokens import TokenIssuer

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
QR_SECRET = "qr-secret-for-tests-0123456789abcdef"
SESSION_SECRET = "session-secret-for-tests-0123456789"

STUDENT_ID = "stu_asha01"
OTHER_STUDENT_ID = "stu_ravi002"
OPERATOR_ID = "adm_volunteer1"
JOB_ID = "job_acme001"
OTHER_JOB_ID = "job_globex02"
APPLICATION_ID = "app_asha_acme"


@dataclass
class InMemoryAttendanceRepository(AttendanceRepository):
    """In-memory attendance repository for tests.

    ``create_if_absent`` runs under a lock, standing in for the unique
    index the real store enforces.
    """

    records: dict[AttendanceKey, AttendanceRecord] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)
    fail_writes: bool = False

    def create_if_absent(
        self, draft: AttendanceDraft
    ) -> tuple[AttendanceRecord, bool]:
        if self.fail_writes:
            raise AttendanceStoreUnavailable("store down")
        with self.lock:
            existing = self.records.get(draft.key)
            if existing is not None:
                return existing, False
            record = AttendanceRecord(
                id=f"att_{len(self.records) + 1}",
                student_id=draft.key.student_id,
                job_id=draft.key.job_id,
                round_id=draft.key.round_id,
                scanned_at=draft.scanned_at,
                scanned_by=draft.scanned_by,
                location=draft.location,
            )
            self.records[draft.key] = record
            return record, True

    def list_for_student_job(
        self, student_id: str, job_id: str
    ) -> list[AttendanceRecord]:
        return [
            record
            for record in self.records.values()
            if record.student_id == student_id and record.job_id == job_id
        ]

    def list_for_job(
        self, job_id: str, round_id: str | None = None
    ) -> list[AttendanceRecord]:
        return [
            record
            for record in self.records.values()
            if record.job_id == job_id
            and (round_id is None or record.round_id == round_id)
        ]

    def add(
        self,
        student_id: str,
        job_id: str,
        round_id: str | None,
        outcome: AttendanceOutcome = AttendanceOutcome.NONE,
        scanned_at: datetime = NOW - timedelta(days=1),
    ) -> AttendanceRecord:
        record = AttendanceRecord(
            id=f"att_seed_{len(self.records) + 1}",
            student_id=student_id,
            job_id=job_id,
            round_id=round_id,
            scanned_at=scanned_at,
            scanned_by=OPERATOR_ID,
            location=None,
            outcome=outcome,
        )
        self.records[record.key] = record
        return record


@dataclass
class InMemoryRoundRepository(RoundRepository):
    """In-memory round repository for tests."""

    rounds: dict[str, Round] = field(default_factory=dict)

    def list_rounds(self, job_id: str) -> list[Round]:
        return [round_ for round_ in self.rounds.values() if round_.job_id == job_id]

    def get_round(self, round_id: str) -> Round | None:
        return self.rounds.get(round_id)

    def add(
        self, round_id: str, job_id: str, order: int, state: RoundState
    ) -> Round:
        round_ = Round(
            id=round_id,
            job_id=job_id,
            order=order,
            name=f"Round {order}",
            state=state,
        )
        self.rounds[round_id] = round_
        return round_

    def set_state(self, round_id: str, state: RoundState) -> None:
        current = self.rounds[round_id]
        self.rounds[round_id] = Round(
            id=current.id,
            job_id=current.job_id,
            order=current.order,
            name=current.name,
            state=state,
        )


@dataclass
class InMemoryApplicationRepository(ApplicationRepository):
    """In-memory application repository for tests."""

    applications: dict[str, Application] = field(default_factory=dict)

    def get_application(self, application_id: str) -> Application | None:
        return self.applications.get(application_id)

    def find_application(self, student_id: str, job_id: str) -> Application | None:
        for application in self.applications.values():
            if application.student_id == student_id and application.job_id == job_id:
                return application
        return None

    def add(
        self, application_id: str, student_id: str, job_id: str, status: str = "PENDING"
    ) -> Application:
        application = Application(
            id=application_id, student_id=student_id, job_id=job_id, status=status
        )
        self.applications[application_id] = application
        return application


@dataclass
class InMemoryDirectoryRepository(DirectoryRepository):
    """In-memory directory for tests."""

    def get_student(self, student_id: str) -> StudentSummary | None:
        return StudentSummary(
            id=student_id,
            name=f"Student {student_id}",
            email=f"{student_id}@campus.test",
            usn="1XX21CS001",
            branch="CSE",
        )

    def get_job(self, job_id: str) -> JobSummary | None:
        return JobSummary(id=job_id, title="Graduate Engineer", company="Acme")


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[SecurityEvent] = field(default_factory=list)

    def create_event(self, event: SecurityEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [event.event_type for event in self.events]


@dataclass
class AllowAllEligibility:
    """Eligibility policy admitting every applicant to every round."""

    def is_eligible(self, application, round_, rounds, attendance) -> bool:  # type: ignore[no-untyped-def]
        return True


@dataclass
class Clock:
    """Mutable clock for tests."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class Harness:
    """Services wired over in-memory repositories."""

    attendance: InMemoryAttendanceRepository
    rounds: InMemoryRoundRepository
    applications: InMemoryApplicationRepository
    audit: InMemoryAuditRepository
    token_issuer: TokenIssuer
    resolver: RoundStatusResolver
    scanner: ScanProcessor
    confirmer: ConfirmationHandler
    reports: AttendanceReportService


def build_harness(eligibility=None, allow_legacy_qr: bool = True) -> Harness:  # type: ignore[no-untyped-def]
    attendance = InMemoryAttendanceRepository()
    rounds = InMemoryRoundRepository()
    applications = InMemoryApplicationRepository()
    audit = InMemoryAuditRepository()
    audit_service = AuditService(audit)
    token_issuer = TokenIssuer(secret=QR_SECRET, ttl_seconds=300)
    policy = eligibility or PipelineEligibility()
    recorder = AttendanceRecorder(
        repository=attendance,
        round_repository=rounds,
        directory=InMemoryDirectoryRepository(),
        audit_service=audit_service,
    )
    return Harness(
        attendance=attendance,
        rounds=rounds,
        applications=applications,
        audit=audit,
        token_issuer=token_issuer,
        resolver=RoundStatusResolver(
            round_repository=rounds,
            application_repository=applications,
            attendance_repository=attendance,
            eligibility=policy,
            token_issuer=token_issuer,
        ),
        scanner=ScanProcessor(
            recorder=recorder,
            application_repository=applications,
            eligibility=policy,
            token_issuer=token_issuer,
            audit_service=audit_service,
            allow_legacy_qr=allow_legacy_qr,
        ),
        confirmer=ConfirmationHandler(
            recorder=recorder,
            token_issuer=token_issuer,
            audit_service=audit_service,
        ),
        reports=AttendanceReportService(attendance),
    )


def student(user_id: str = STUDENT_ID, session_id: str = "sess-student") -> Principal:
    return Principal(user_id=user_id, role=Role.STUDENT, session_id=session_id)


def operator(user_id: str = OPERATOR_ID) -> Principal:
    return Principal(user_id=user_id, role=Role.ADMIN, session_id="sess-operator")


def session_header(principal: Principal) -> dict[str, str]:
    token = jwt.encode(
        {
            "sub": principal.user_id,
            "role": principal.role.value,
            "sid": principal.session_id,
            "exp": datetime.now(tz=UTC) + timedelta(hours=1),
        },
        SESSION_SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        qr_token_secret=QR_SECRET,
        session_secret=SESSION_SECRET,
    )


@pytest.fixture
def harness() -> Harness:
    return build_harness()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def container(settings: Settings, harness: Harness, clock: Clock) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        round_status_resolver=harness.resolver,
        scan_processor=harness.scanner,
        confirmation_handler=harness.confirmer,
        report_service=harness.reports,
        audit_service=harness.scanner.audit_service,
        clock=clock,
        close_resources=close_resources,
    )
