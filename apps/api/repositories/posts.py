"""Post repository."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.comment import Comment
from models.like import Like
from models.post import Post

logger = logging.getLogger(__name__)


class PostRepository:
    """
    Thin data-access layer around the Post model.

    Store errors never escape: reads return None and writes return False,
    leaving the caller to choose the HTTP status.
    """

    def __init__(self, db: AsyncSession, *, cascade_delete: Optional[bool] = None) -> None:
        self._db = db
        self._cascade_delete = settings.CASCADE_POST_DELETE if cascade_delete is None else cascade_delete

    @property
    def cascade_delete(self) -> bool:
        return self._cascade_delete

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def list(self) -> Optional[List[Post]]:
        """All posts, newest first."""
        try:
            result = await self._db.execute(
                select(Post).order_by(Post.post_date.desc(), Post.post_id.desc())
            )
            return list(result.scalars().all())
        except Exception:
            logger.exception("Post list query failed")
            return None

    async def get_by_id(self, post_id: int) -> Optional[Post]:
        try:
            return await self._db.get(Post, post_id)
        except Exception:
            logger.exception("Post lookup failed for post_id=%s", post_id)
            return None

    async def list_by_user(self, user_id: str) -> Optional[List[Post]]:
        try:
            result = await self._db.execute(
                select(Post)
                .where(Post.user_id == user_id)
                .order_by(Post.post_date.desc(), Post.post_id.desc())
            )
            return list(result.scalars().all())
        except Exception:
            logger.exception("Post list by user failed for user_id=%s", user_id)
            return None

    async def has_dependents(self, post_id: int) -> bool:
        """Whether any comment or like still references the post."""
        try:
            comments = await self._db.execute(
                select(func.count(Comment.comment_id)).where(Comment.post_id == post_id)
            )
            likes = await self._db.execute(
                select(func.count(Like.like_id)).where(Like.post_id == post_id)
            )
        except Exception:
            logger.exception("Dependent lookup failed for post_id=%s", post_id)
            return False
        return int(comments.scalar() or 0) + int(likes.scalar() or 0) > 0

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create(self, post: Post) -> bool:
        """Persist a new post; post.post_id is populated on success."""
        try:
            self._db.add(post)
            await self._db.commit()
            await self._db.refresh(post)
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Post creation failed for user_id=%s", post.user_id)
            return False

    async def update(self, post: Post) -> bool:
        """Copy the mutable fields of ``post`` onto the stored row."""
        try:
            existing = await self._db.get(Post, post.post_id)
            if existing is None:
                logger.warning("Post not found for update post_id=%s", post.post_id)
                return False
            existing.caption = post.caption
            await self._db.commit()
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Post update failed for post_id=%s", post.post_id)
            return False

    async def delete(self, post_id: int) -> bool:
        try:
            post = await self._db.get(Post, post_id)
            if post is None:
                logger.warning("Post not found for deletion post_id=%s", post_id)
                return False
            if self._cascade_delete:
                await self._db.execute(delete(Comment).where(Comment.post_id == post_id))
                await self._db.execute(delete(Like).where(Like.post_id == post_id))
            await self._db.delete(post)
            await self._db.commit()
            return True
        except Exception:
            await self._db.rollback()
            logger.exception("Post deletion failed for post_id=%s", post_id)
            return False
