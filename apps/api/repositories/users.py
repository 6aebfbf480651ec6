"""User repository (read-only; accounts are provisioned elsewhere)."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list(self) -> Optional[List[User]]:
        try:
            result = await self._db.execute(select(User).order_by(User.user_name))
            return list(result.scalars().all())
        except Exception:
            logger.exception("User list query failed")
            return None

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            return await self._db.get(User, user_id)
        except Exception:
            logger.exception("User lookup failed for user_id=%s", user_id)
            return None
