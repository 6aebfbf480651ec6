"""
Like JSON API: per-post counts, like and unlike.
"""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.like import Like
from repositories import LikeCreateOutcome, LikeRepository
from schemas import LikeDto, MessageResponse
from services.validation import like_payload_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/likes/{post_id}", response_model=int)
async def get_likes_count(post_id: int, db: AsyncSession = Depends(get_db)):
    """Number of likes on a post; 503 when the store cannot answer."""
    result = await LikeRepository(db).count_by_post(post_id)
    if not result.available:
        raise HTTPException(status_code=503, detail="Like count is currently unavailable")
    logger.info("Like count retrieved for post_id=%s count=%s", post_id, result.count)
    return result.count


@router.post("/create", response_model=MessageResponse)
async def create_like(like: LikeDto = Body(...), db: AsyncSession = Depends(get_db)):
    error = like_payload_error(like.post_id, like.user_id)
    if error:
        raise HTTPException(status_code=400, detail="Invalid like data")

    outcome = await LikeRepository(db).create(Like(post_id=like.post_id, user_id=like.user_id))
    if outcome is LikeCreateOutcome.ALREADY_EXISTS:
        logger.warning("Like already exists for post_id=%s user_id=%s", like.post_id, like.user_id)
        raise HTTPException(status_code=409, detail="Like already exists")
    if outcome is LikeCreateOutcome.FAILED:
        raise HTTPException(status_code=400, detail="Unable to process Like data")

    logger.info("Like created for post_id=%s user_id=%s", like.post_id, like.user_id)
    return MessageResponse(message="Like created successfully")


@router.delete("/delete", response_model=MessageResponse)
async def delete_like(like: LikeDto = Body(...), db: AsyncSession = Depends(get_db)):
    error = like_payload_error(like.post_id, like.user_id)
    if error:
        raise HTTPException(status_code=400, detail="Invalid unlike data")

    if not await LikeRepository(db).delete_by_post_and_user(like.post_id, like.user_id):
        logger.warning("Like deletion failed for post_id=%s user_id=%s", like.post_id, like.user_id)
        raise HTTPException(status_code=400, detail="Like deletion failed")

    logger.info("Like deleted for post_id=%s user_id=%s", like.post_id, like.user_id)
    return MessageResponse(message="Like deleted successfully")
