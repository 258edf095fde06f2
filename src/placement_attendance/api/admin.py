"""Operator-only attendance listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from placement_attendance.api.auth import get_principal
from placement_attendance.domain.identity import Principal  # noqa: TC001

if TYPE_CHECKING:
    from placement_attendance.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/attendance/{job_id}")
def list_attendance(
    job_id: str,
    request: Request,
    round_id: str | None = None,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return attendance records for a job, newest first."""
    container: AppContainer = request.app.state.container
    return {
        "jobId": job_id,
        "attendance": container.report_service.list_for_job(
            principal, job_id, round_id
        ),
    }
