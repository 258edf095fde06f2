"""Bearer session authentication for portal users."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jwt
from fastapi import Depends, Header, HTTPException, Request, status

from placement_attendance.domain.identity import Principal, Role

if TYPE_CHECKING:
    from placement_attendance.containers import AppContainer

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


def _get_session_secret(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.session_secret


def decode_session(token: str, secret: str) -> Principal:
    """Return the principal of a portal session token.

    Session tokens are minted by the portal's identity service with the
    shared secret; ``sub`` is the user id, ``role`` the portal role and
    ``sid`` the session id.
    """
    payload = jwt.decode(
        token,
        secret,
        algorithms=[_ALGORITHM],
        options={"require": ["sub", "role", "exp"]},
    )
    role = Role(str(payload["role"]).upper())
    session_id = payload.get("sid") or payload.get("jti") or payload["sub"]
    return Principal(
        user_id=str(payload["sub"]), role=role, session_id=str(session_id)
    )


async def get_principal(
    authorization: str | None = Header(default=None),
    session_secret: str = Depends(_get_session_secret),
) -> Principal:
    """Resolve the authenticated caller from the Authorization header."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_session(token.strip(), session_secret)
    except (jwt.PyJWTError, ValueError) as exc:
        logger.info("Rejected session token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
