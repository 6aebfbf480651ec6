"""Like repository."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.like import Like
from schemas import LikeCount

logger = logging.getLogger(__name__)


class LikeCreateOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class LikeRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_by_post_and_user(self, post_id: int, user_id: str) -> Optional[Like]:
        try:
            result = await self._db.execute(
                select(Like).where(Like.post_id == post_id, Like.user_id == user_id)
            )
            return result.scalar_one_or_none()
        except Exception:
            logger.exception("Like lookup failed for post_id=%s user_id=%s", post_id, user_id)
            return None

    async def create(self, like: Like) -> LikeCreateOutcome:
        """
        Insert a like and let the (post_id, user_id) unique constraint reject duplicates.

        A constraint violation is only reported as ALREADY_EXISTS when the pair
        is actually present afterwards; foreign-key failures (unknown post or
        user) come back as FAILED.
        """
        post_id, user_id = like.post_id, like.user_id
        try:
            self._db.add(like)
            await self._db.commit()
            return LikeCreateOutcome.CREATED
        except IntegrityError:
            await self._db.rollback()
            existing = await self.get_by_post_and_user(post_id, user_id)
            if existing is not None:
                return LikeCreateOutcome.ALREADY_EXISTS
            logger.warning("Like rejected by integrity constraint for post_id=%s user_id=%s", post_id, user_id)
            return LikeCreateOutcome.FAILED
        except Exception:
            await self._db.rollback()
            logger.exception("Like creation failed for post_id=%s user_id=%s", post_id, user_id)
            return LikeCreateOutcome.FAILED

    async def delete_by_post_and_user(self, post_id: int, user_id: str) -> bool:
        try:
            like = await self.get_by_post_and_user(post_id, user_id)
            if like is None:
                return False
            await self._db.delete(like)
            await self._db.commit()
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Like deletion failed for post_id=%s user_id=%s", post_id, user_id)
            return False

    async def count_by_post(self, post_id: int) -> LikeCount:
        try:
            result = await self._db.execute(
                select(func.count(Like.like_id)).where(Like.post_id == post_id)
            )
            return LikeCount(count=int(result.scalar() or 0))
        except Exception:
            logger.exception("Like count failed for post_id=%s", post_id)
            return LikeCount.unavailable()
