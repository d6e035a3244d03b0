"""Bearer token verification utilities.

Access tokens are HS256 JWTs signed with ``settings.jwt_secret`` and carry the
numeric user id in an ``id`` claim (``sub`` is accepted as a fallback). The
same verification backs two entry points:

* ``get_current_user``: FastAPI dependency for HTTP routes, reading the
  ``Authorization: Bearer <token>`` header.
* ``tripmate.realtime.auth``: the socket handshake, which may also present the
  token as a ``token`` query parameter.

Token issuance belongs to the login flow, which lives outside this service;
``create_access_token`` exists for tooling and tests.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional
from jose import jwt, ExpiredSignatureError, JWTError
from fastapi import Depends, Header

from tripmate.core.config import Settings, get_settings
from tripmate.core.errors import AuthenticationError


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, immutable for the lifetime of a request or connection."""
    user_id: int
    claims: dict[str, Any] = field(default_factory=dict, compare=False)


def _user_id_from_claims(claims: dict[str, Any]) -> int:
    raw = claims.get("id", claims.get("sub"))
    if raw is None or isinstance(raw, bool):
        raise AuthenticationError("Token carries no user id")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise AuthenticationError("Token user id is not numeric") from None


def verify_token(token: str | None, settings: Settings | None = None) -> Identity:
    """Decode a signed, non-expired token into an ``Identity``.

    Raises ``AuthenticationError`` for a missing, malformed, forged or expired
    token; the message is safe to log but is not echoed to clients verbatim.
    """
    settings = settings or get_settings()
    if not token:
        raise AuthenticationError("No token provided")
    # Basic structural validation of JWT
    if token.count('.') != 2:
        raise AuthenticationError("Malformed bearer token")
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=settings.jwt_algorithms,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired") from None
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}") from None
    return Identity(user_id=_user_id_from_claims(claims), claims=claims)


def create_access_token(
    user_id: int,
    settings: Settings | None = None,
    *,
    expires_in: int | None = None,
    **extra: Any,
) -> str:
    settings = settings or get_settings()
    now = int(time.time())
    lifetime = settings.jwt_expires_seconds if expires_in is None else expires_in
    claims = {"id": user_id, "iat": now, "exp": now + lifetime, **extra}
    return jwt.encode(claims, settings.jwt_secret.get_secret_value(), algorithm=settings.jwt_algorithms[0])


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of an ``Authorization: Bearer`` header value, if any."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Validate the bearer token of an HTTP request.

    Sender identity for chat writes always comes from here, never from the
    request body.
    """
    return verify_token(bearer_token(authorization), settings)

__all__ = ["Identity", "verify_token", "create_access_token", "bearer_token", "get_current_user"]
