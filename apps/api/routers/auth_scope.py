"""Authentication dependencies for API and page user scoping."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import settings
from services.session_token import decode_session_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    user_name: Optional[str] = None


def _resolve_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return cookie or None


def _context_from_token(token: str) -> AuthContext:
    try:
        claims = decode_session_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return AuthContext(user_id=claims.user_id, user_name=claims.user_name)


async def get_optional_auth_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme),
) -> Optional[AuthContext]:
    """Resolve the session user from a Bearer token or session cookie, if any."""
    token = _resolve_token(request, credentials)
    if not token:
        return None
    return _context_from_token(token)


async def get_auth_context(
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
) -> AuthContext:
    """Resolve authenticated user or reject the request."""
    if auth is None:
        raise HTTPException(status_code=401, detail="User is not logged in.")
    return auth
