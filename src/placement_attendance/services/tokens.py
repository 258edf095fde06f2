"""Stateless signing and verification of attendance QR tokens."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from placement_attendance.domain.errors import ExpiredOrInvalidToken
from placement_attendance.domain.tokens import IssuedToken, QRTokenClaims

_ALGORITHM = "HS256"
_ATTENDANCE = "attendance"
_CONFIRMATION = "confirmation"
_REQUIRED_CLAIMS = ["sub", "job", "iat", "exp", "typ"]


@dataclass
class TokenIssuer:
    """Signs (student, job, round, session) tuples into QR payloads.

    The issuer performs no authorization. Callers decide whether a token may
    be handed out; the signature and embedded timestamps are the only state
    needed to check it later.
    """

    secret: str
    ttl_seconds: int = 300
    clock_skew_seconds: int = 30

    def issue(  # noqa: PLR0913
        self,
        student_id: str,
        job_id: str,
        round_id: str,
        session_id: str,
        now: datetime,
    ) -> IssuedToken:
        """Return a signed attendance token valid for ``ttl_seconds``."""
        issued_at = _whole_seconds(now)
        expires_at = issued_at + timedelta(seconds=self.ttl_seconds)
        return self._encode(
            _ATTENDANCE, student_id, job_id, round_id, session_id, issued_at, expires_at
        )

    def verify(self, token: str, now: datetime) -> QRTokenClaims:
        """Return the claims of a valid attendance token."""
        return self._decode(token, _ATTENDANCE, now)

    def issue_confirmation(  # noqa: PLR0913
        self,
        student_id: str,
        job_id: str,
        round_id: str | None,
        session_id: str | None,
        now: datetime,
        expires_at: datetime | None = None,
    ) -> IssuedToken:
        """Sign the tuple proposed by a confirmation-required scan.

        The ticket never outlives the QR token it was derived from; legacy
        payloads carry no token, so they get a regular token lifetime.
        """
        issued_at = _whole_seconds(now)
        if expires_at is None:
            expires_at = issued_at + timedelta(seconds=self.ttl_seconds)
        return self._encode(
            _CONFIRMATION,
            student_id,
            job_id,
            round_id,
            session_id,
            issued_at,
            _whole_seconds(expires_at),
        )

    def verify_confirmation(self, token: str, now: datetime) -> QRTokenClaims:
        """Return the claims of a valid confirmation ticket."""
        return self._decode(token, _CONFIRMATION, now)

    def _encode(  # noqa: PLR0913
        self,
        token_type: str,
        student_id: str,
        job_id: str,
        round_id: str | None,
        session_id: str | None,
        issued_at: datetime,
        expires_at: datetime,
    ) -> IssuedToken:
        payload = {
            "typ": token_type,
            "sub": student_id,
            "job": job_id,
            "rnd": round_id,
            "sid": session_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.secret, algorithm=_ALGORITHM)
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def _decode(self, token: str, token_type: str, now: datetime) -> QRTokenClaims:
        try:
            # Expiry is checked against the injected clock below.
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            raise ExpiredOrInvalidToken("Invalid QR code signature") from exc

        if payload.get("typ") != token_type:
            raise ExpiredOrInvalidToken("Unexpected QR token type")
        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ExpiredOrInvalidToken("Malformed QR token timestamps") from exc

        current = _as_utc(now)
        if current > expires_at:
            raise ExpiredOrInvalidToken("QR code expired")
        if issued_at - current > timedelta(seconds=self.clock_skew_seconds):
            raise ExpiredOrInvalidToken("QR code issued in the future")

        return QRTokenClaims(
            student_id=str(payload["sub"]),
            job_id=str(payload["job"]),
            round_id=_optional_str(payload.get("rnd")),
            session_id=_optional_str(payload.get("sid")),
            issued_at=issued_at,
            expires_at=expires_at,
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _whole_seconds(value: datetime) -> datetime:
    return _as_utc(value).replace(microsecond=0)


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)
