"""Translation of Supabase client failures."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from placement_attendance.domain.errors import AttendanceStoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Raise AttendanceStoreUnavailable for transport or PostgREST failures."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        logger.exception("Supabase call failed during %s", operation)
        raise AttendanceStoreUnavailable(
            "Attendance store is unavailable, please retry"
        ) from exc
