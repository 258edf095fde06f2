"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import create_client

from placement_attendance.adapters.supabase_application_repository import (
    SupabaseApplicationRepository,
)
from placement_attendance.adapters.supabase_attendance_repository import (
    SupabaseAttendanceRepository,
)
from placement_attendance.adapters.supabase_audit_repository import (
    SupabaseAuditRepository,
)
from placement_attendance.adapters.supabase_directory_repository import (
    SupabaseDirectoryRepository,
)
from placement_attendance.adapters.supabase_round_repository import (
    SupabaseRoundRepository,
)
from placement_attendance.config import Settings
from placement_attendance.services.attendance import AttendanceRecorder
from placement_attendance.services.audit import AuditService
from placement_attendance.services.confirm import ConfirmationHandler
from placement_attendance.services.eligibility import PipelineEligibility
from placement_attendance.services.reports import AttendanceReportService
from placement_attendance.services.round_status import RoundStatusResolver
from placement_attendance.services.scan import ScanProcessor
from placement_attendance.services.tokens import TokenIssuer


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    round_status_resolver: RoundStatusResolver
    scan_processor: ScanProcessor
    confirmation_handler: ConfirmationHandler
    report_service: AttendanceReportService
    audit_service: AuditService
    clock: Callable[[], datetime]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    attendance_repository = SupabaseAttendanceRepository(supabase_client)
    round_repository = SupabaseRoundRepository(supabase_client)
    application_repository = SupabaseApplicationRepository(supabase_client)
    directory_repository = SupabaseDirectoryRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    token_issuer = TokenIssuer(
        secret=resolved_settings.qr_token_secret,
        ttl_seconds=resolved_settings.qr_token_ttl_seconds,
        clock_skew_seconds=resolved_settings.clock_skew_seconds,
    )
    eligibility = PipelineEligibility()
    recorder = AttendanceRecorder(
        repository=attendance_repository,
        round_repository=round_repository,
        directory=directory_repository,
        audit_service=audit_service,
    )
    round_status_resolver = RoundStatusResolver(
        round_repository=round_repository,
        application_repository=application_repository,
        attendance_repository=attendance_repository,
        eligibility=eligibility,
        token_issuer=token_issuer,
        refresh_after_seconds=resolved_settings.qr_refresh_seconds,
    )
    scan_processor = ScanProcessor(
        recorder=recorder,
        application_repository=application_repository,
        eligibility=eligibility,
        token_issuer=token_issuer,
        audit_service=audit_service,
        allow_legacy_qr=resolved_settings.allow_legacy_qr,
    )
    confirmation_handler = ConfirmationHandler(
        recorder=recorder,
        token_issuer=token_issuer,
        audit_service=audit_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        round_status_resolver=round_status_resolver,
        scan_processor=scan_processor,
        confirmation_handler=confirmation_handler,
        report_service=AttendanceReportService(attendance_repository),
        audit_service=audit_service,
        clock=utc_now,
        close_resources=close_resources,
    )
