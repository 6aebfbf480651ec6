"""Comment repository."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.comment import Comment

logger = logging.getLogger(__name__)


class CommentRepository:
    """Thin data-access layer around the Comment model."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list(self) -> Optional[List[Comment]]:
        try:
            result = await self._db.execute(select(Comment).order_by(Comment.comment_id))
            return list(result.scalars().all())
        except Exception:
            logger.exception("Comment list query failed")
            return None

    async def list_by_post(self, post_id: int) -> Optional[List[Comment]]:
        try:
            result = await self._db.execute(
                select(Comment).where(Comment.post_id == post_id).order_by(Comment.comment_id)
            )
            return list(result.scalars().all())
        except Exception:
            logger.exception("Comment list by post failed for post_id=%s", post_id)
            return None

    async def get_by_id(self, comment_id: int) -> Optional[Comment]:
        try:
            return await self._db.get(Comment, comment_id)
        except Exception:
            logger.exception("Comment lookup failed for comment_id=%s", comment_id)
            return None

    async def create(self, comment: Comment) -> bool:
        try:
            self._db.add(comment)
            await self._db.commit()
            await self._db.refresh(comment)
            return True
        except Exception:
            await self._db.rollback()
            logger.exception(
                "Comment creation failed for post_id=%s user_id=%s", comment.post_id, comment.user_id
            )
            return False

    async def update(self, comment: Comment) -> bool:
        """Only the comment text is mutable."""
        try:
            existing = await self._db.get(Comment, comment.comment_id)
            if existing is None:
                logger.warning("Comment not found for update comment_id=%s", comment.comment_id)
                return False
            existing.comment_text = comment.comment_text
            await self._db.commit()
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Comment update failed for comment_id=%s", comment.comment_id)
            return False

    async def delete(self, comment_id: int) -> bool:
        try:
            comment = await self._db.get(Comment, comment_id)
            if comment is None:
                logger.warning("Comment not found for deletion comment_id=%s", comment_id)
                return False
            await self._db.delete(comment)
            await self._db.commit()
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Comment deletion failed for comment_id=%s", comment_id)
            return False
