"""Attendance endpoints for students and operator devices."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from placement_attendance.api.auth import get_principal
from placement_attendance.api.schemas import (
    ConfirmRequest,
    ScanRequest,
    round_status_response,
    scan_response,
)
from placement_attendance.domain.identity import Principal  # noqa: TC001

if TYPE_CHECKING:
    from placement_attendance.containers import AppContainer

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/rounds")
def round_statuses(
    job_id: str,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return the caller's round statuses with QR tokens for active rounds."""
    container: AppContainer = request.app.state.container
    report = container.round_status_resolver.resolve(
        principal, job_id, container.clock()
    )
    return round_status_response(report)


@router.post("/scan")
def scan(
    body: ScanRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Record attendance for a scanned QR code."""
    container: AppContainer = request.app.state.container
    result = container.scan_processor.scan(
        principal,
        body.qr_data,
        container.clock(),
        job_filter=body.job_id,
        location=body.location,
    )
    return scan_response(result)


@router.post("/confirm")
def confirm(
    body: ConfirmRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Commit attendance for a tuple the operator confirmed."""
    container: AppContainer = request.app.state.container
    result = container.confirmation_handler.confirm(
        principal, body.to_ticket(), container.clock(), location=body.location
    )
    return scan_response(result)
