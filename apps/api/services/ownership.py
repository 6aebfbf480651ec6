"""Ownership policy shared by the JSON API and the page surface."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

from config import settings
from routers.auth_scope import AuthContext


def authorize_owner(auth: Optional[AuthContext], owner_user_id: Optional[str]) -> AuthContext:
    """
    Require a signed-in user who owns the resource.

    Raises 401 when there is no session and 403 when the session user is not
    the owner.
    """
    if auth is None or not auth.user_id:
        raise HTTPException(status_code=401, detail="User is not logged in.")
    if owner_user_id != auth.user_id:
        raise HTTPException(status_code=403, detail="Only the owner can modify this resource.")
    return auth


def authorize_api_mutation(auth: Optional[AuthContext], owner_user_id: Optional[str]) -> None:
    """Apply the ownership policy to JSON API update/delete when it is enabled."""
    if not settings.API_OWNERSHIP_ENFORCED:
        return
    authorize_owner(auth, owner_user_id)
