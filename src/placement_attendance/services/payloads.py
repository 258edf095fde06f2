"""Decoding of raw QR text read by the operator's camera."""

import json
import re
from dataclasses import dataclass

from placement_attendance.domain.errors import InvalidPayload

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")
_LEGACY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{6,64}$")


@dataclass(frozen=True)
class TokenPayload:
    """Round-scoped signed token."""

    token: str


@dataclass(frozen=True)
class LegacyPayload:
    """Application-level identifier without round context."""

    application_id: str


ScanPayload = TokenPayload | LegacyPayload


def decode_payload(raw: str) -> ScanPayload:
    """Classify decoded QR text as a signed token or a legacy identifier."""
    text = raw.strip() if raw else ""
    if not text:
        raise InvalidPayload("QR data is required")

    if _TOKEN_PATTERN.match(text):
        return TokenPayload(token=text)

    if text.startswith("{"):
        return _decode_json(text)

    if _LEGACY_ID_PATTERN.match(text):
        return LegacyPayload(application_id=text)

    raise InvalidPayload("Unrecognised QR code")


def _decode_json(text: str) -> ScanPayload:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidPayload("Unrecognised QR code") from exc
    if not isinstance(data, dict):
        raise InvalidPayload("Unrecognised QR code")

    token = data.get("token")
    if isinstance(token, str) and _TOKEN_PATTERN.match(token.strip()):
        return TokenPayload(token=token.strip())

    application_id = data.get("applicationId")
    if isinstance(application_id, str) and _LEGACY_ID_PATTERN.match(
        application_id.strip()
    ):
        return LegacyPayload(application_id=application_id.strip())

    raise InvalidPayload("Unrecognised QR code")
