"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from placement_attendance.api.admin import router as admin_router
from placement_attendance.api.attendance import router as attendance_router
from placement_attendance.api.schemas import scan_response
from placement_attendance.app_logging import configure_logging
from placement_attendance.containers import AppContainer
from placement_attendance.domain.errors import (
    AlreadyAttended,
    AttendanceError,
    AttendanceStoreUnavailable,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(attendance_router)
    app.include_router(admin_router)

    @app.exception_handler(AttendanceError)
    async def attendance_error(request: Request, exc: AttendanceError) -> JSONResponse:
        if isinstance(exc, AlreadyAttended):
            return JSONResponse(
                status_code=exc.status_code, content=scan_response(exc.result)
            )
        content: dict[str, object] = {
            "success": False,
            "error": exc.message,
            "code": exc.code,
        }
        if isinstance(exc, AttendanceStoreUnavailable):
            content["retryable"] = True
        else:
            logger.info("%s %s -> %s", request.method, request.url.path, exc.code)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
