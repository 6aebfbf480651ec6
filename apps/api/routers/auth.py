"""
Authentication router: current-user lookup and session cookie handling.

Account provisioning and password checks live outside this service; the
development session endpoint exists so demo users can act in the browser.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from repositories import UserRepository
from routers.auth_scope import AuthContext, get_auth_context
from routers.users import serialize_user
from schemas import UserDto
from services.session_token import create_session_token

router = APIRouter()


class SessionResponse(BaseModel):
    user_id: str
    user_name: Optional[str] = None
    session_token: str
    session_expires_at: int


@router.get("/me", response_model=UserDto)
async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Profile of the signed-in user."""
    user = await UserRepository(db).get_by_id(auth.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize_user(user)


@router.post("/dev-session/{user_id}", response_model=SessionResponse)
async def create_dev_session(
    user_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Issue a session for an existing user without credentials (development only)."""
    if not settings.DEV_SESSION_LOGIN_ENABLED:
        raise HTTPException(status_code=404, detail="Not found")

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    session = create_session_token(user.id, user.user_name)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session.token,
        httponly=True,
        samesite="lax",
        max_age=session.max_age,
    )
    return SessionResponse(
        user_id=user.id,
        user_name=user.user_name,
        session_token=session.token,
        session_expires_at=session.expires_at,
    )


@router.post("/logout")
async def logout(response: Response, _auth: AuthContext = Depends(get_auth_context)):
    """Drop the session cookie."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}
