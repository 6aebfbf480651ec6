"""
Signed session tokens for Friendly users.

A session names the acting user (``sub``) and, when known, their user name.
The same lifetime governs the token's ``exp`` claim and the browser cookie's
max-age, so the two always expire together.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from config import settings


SESSION_TOKEN_TYPE = "friendly_session"


@dataclass(frozen=True)
class IssuedSession:
    token: str
    expires_at: int
    max_age: int


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    user_name: Optional[str] = None


def session_lifetime() -> timedelta:
    return timedelta(hours=max(int(settings.JWT_EXPIRATION_HOURS), 1))


def create_session_token(
    user_id: str,
    user_name: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> IssuedSession:
    """Sign a session for ``user_id`` valid for the configured lifetime."""
    issued_at = now or datetime.now(timezone.utc)
    lifetime = session_lifetime()
    expires_at = issued_at + lifetime
    claims = {
        "sub": user_id,
        "type": SESSION_TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    if user_name:
        claims["name"] = user_name

    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return IssuedSession(
        token=token,
        expires_at=int(expires_at.timestamp()),
        max_age=int(lifetime.total_seconds()),
    )


def decode_session_token(token: str) -> SessionClaims:
    """Verify signature, expiry and token type; raises ValueError otherwise."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired session token.") from exc

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type.")

    user_id = str(payload.get("sub") or "").strip()
    if not user_id:
        raise ValueError("Session token missing subject.")

    return SessionClaims(user_id=user_id, user_name=payload.get("name") or None)
