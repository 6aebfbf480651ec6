"""
Comment JSON API.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.comment import Comment
from repositories import CommentRepository, PostRepository, UserRepository
from routers.auth_scope import AuthContext, get_optional_auth_context
from schemas import CommentCreateRequest, CommentDto, CommentUpdateRequest
from services.ownership import authorize_api_mutation
from services.validation import comment_text_error

router = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_comment(comment: Comment) -> CommentDto:
    return CommentDto(
        comment_id=comment.comment_id,
        comment_text=comment.comment_text,
        comment_date=comment.comment_date,
        user_id=comment.user_id,
        post_id=comment.post_id,
    )


@router.get("/commentlist", response_model=List[CommentDto])
async def comment_list(db: AsyncSession = Depends(get_db)):
    comments = await CommentRepository(db).list()
    if comments is None:
        logger.error("Comment list not found while executing CommentRepository.list()")
        raise HTTPException(status_code=404, detail="Comment list not found")
    return [_serialize_comment(comment) for comment in comments]


@router.get("/comment/{comment_id}", response_model=CommentDto)
async def get_comment_by_id(comment_id: int, db: AsyncSession = Depends(get_db)):
    comment = await CommentRepository(db).get_by_id(comment_id)
    if comment is None:
        logger.warning("Comment not found for comment_id=%s", comment_id)
        raise HTTPException(status_code=404, detail="Comment not found")
    return _serialize_comment(comment)


@router.post("/create", response_model=CommentDto, status_code=201)
async def create_comment(request: CommentCreateRequest, db: AsyncSession = Depends(get_db)):
    """Create a comment and return the stored row, including its generated id and date."""
    error = comment_text_error(request.comment_text)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if request.post_id <= 0:
        raise HTTPException(status_code=400, detail="postId must be a positive integer.")
    if not request.user_id or not request.user_id.strip():
        raise HTTPException(status_code=400, detail="userId is required.")

    if await PostRepository(db).get_by_id(request.post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found")
    if await UserRepository(db).get_by_id(request.user_id) is None:
        raise HTTPException(status_code=400, detail="Unknown userId.")

    repository = CommentRepository(db)
    comment = Comment(
        comment_text=request.comment_text,
        comment_date=datetime.now(timezone.utc).isoformat(),
        user_id=request.user_id,
        post_id=request.post_id,
    )
    if not await repository.create(comment):
        logger.error("Comment creation failed for post_id=%s", request.post_id)
        raise HTTPException(status_code=500, detail="Comment creation failed.")

    created = await repository.get_by_id(comment.comment_id)
    if created is None:
        logger.error("Created comment not found after creation attempt")
        raise HTTPException(status_code=500, detail="Created comment not found.")
    return _serialize_comment(created)


@router.put("/update/{comment_id}", response_model=CommentDto)
async def update_comment(
    comment_id: int,
    request: CommentUpdateRequest,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    error = comment_text_error(request.comment_text)
    if error:
        raise HTTPException(status_code=400, detail=error)

    repository = CommentRepository(db)
    comment = await repository.get_by_id(comment_id)
    if comment is None:
        logger.warning("Comment not found for update comment_id=%s", comment_id)
        raise HTTPException(status_code=404, detail="Comment not found")

    authorize_api_mutation(auth, comment.user_id)

    if not await repository.update(Comment(comment_id=comment_id, comment_text=request.comment_text)):
        logger.error("Comment update failed for comment_id=%s", comment_id)
        raise HTTPException(status_code=500, detail="Comment update failed")

    await db.refresh(comment)
    return _serialize_comment(comment)


@router.delete("/delete/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    repository = CommentRepository(db)
    comment = await repository.get_by_id(comment_id)
    if comment is None:
        logger.warning("Comment not found for deletion comment_id=%s", comment_id)
        raise HTTPException(status_code=404, detail="Comment not found")

    authorize_api_mutation(auth, comment.user_id)

    if not await repository.delete(comment_id):
        logger.error("Comment deletion failed for comment_id=%s", comment_id)
        raise HTTPException(status_code=500, detail="Comment deletion failed")

    logger.info("Successfully deleted comment_id=%s", comment_id)
    return Response(status_code=204)
