"""
Post JSON API: list, fetch, create (with image upload), update caption, delete.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.post import Post
from repositories import PostRepository, UserRepository
from routers.auth_scope import AuthContext, get_optional_auth_context
from schemas import PostDto, PostUpdateRequest
from services.ownership import authorize_api_mutation
from services.uploads import ImageUploadError, discard_image, save_post_image
from services.validation import caption_error

router = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_post(post: Post) -> PostDto:
    return PostDto(
        post_id=post.post_id,
        post_image_path=post.post_image_path,
        caption=post.caption,
        post_date=post.post_date,
        user_id=post.user_id,
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/postlist", response_model=List[PostDto])
async def post_list(db: AsyncSession = Depends(get_db)):
    """All posts, newest first."""
    posts = await PostRepository(db).list()
    if posts is None:
        logger.error("Post list not found while executing PostRepository.list()")
        raise HTTPException(status_code=404, detail="Post list not found")
    return [_serialize_post(post) for post in posts]


@router.get("/post/{post_id}", response_model=PostDto)
async def get_post_by_id(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await PostRepository(db).get_by_id(post_id)
    if post is None:
        logger.warning("Post not found for post_id=%s", post_id)
        raise HTTPException(status_code=404, detail="Post not found")
    return _serialize_post(post)


@router.post("/create", response_model=PostDto, status_code=201)
async def create_post(
    caption: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    post_image: Optional[UploadFile] = File(None, alias="postImage"),
    db: AsyncSession = Depends(get_db),
):
    """Create a post from a multipart form carrying the caption, owner and image."""
    error = caption_error(caption)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=400, detail="userId is required.")
    if await UserRepository(db).get_by_id(user_id) is None:
        raise HTTPException(status_code=400, detail="Unknown userId.")

    try:
        image = await save_post_image(post_image)
    except ImageUploadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OSError as exc:
        logger.exception("Could not store uploaded post image")
        raise HTTPException(status_code=500, detail="Internal server error.") from exc

    repository = PostRepository(db)
    post = Post(
        caption=caption,
        post_image_path=image.public_path,
        post_date=_now(),
        user_id=user_id,
    )
    if not await repository.create(post):
        discard_image(image)
        logger.error("Post creation failed for user_id=%s", user_id)
        raise HTTPException(status_code=500, detail="Post creation failed.")

    created = await repository.get_by_id(post.post_id)
    if created is None:
        logger.error("Created post not found after creation post_id=%s", post.post_id)
        raise HTTPException(status_code=500, detail="Created post not found.")

    logger.info("Created post_id=%s for user_id=%s", created.post_id, user_id)
    return _serialize_post(created)


@router.put("/update/{post_id}", response_model=PostDto)
async def update_post(
    post_id: int,
    request: PostUpdateRequest,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Change a post's caption; image, date and owner are fixed at creation."""
    error = caption_error(request.caption)
    if error:
        raise HTTPException(status_code=400, detail=error)

    repository = PostRepository(db)
    post = await repository.get_by_id(post_id)
    if post is None:
        logger.warning("Post not found for update post_id=%s", post_id)
        raise HTTPException(status_code=404, detail="Post not found")

    authorize_api_mutation(auth, post.user_id)

    updated = Post(post_id=post.post_id, caption=request.caption)
    if not await repository.update(updated):
        logger.error("Post update failed for post_id=%s", post_id)
        raise HTTPException(status_code=500, detail="Post update failed")

    refreshed = await repository.get_by_id(post_id)
    if refreshed is None:
        raise HTTPException(status_code=404, detail="Post not found")
    await db.refresh(refreshed)
    return _serialize_post(refreshed)


@router.delete("/delete/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    repository = PostRepository(db)
    post = await repository.get_by_id(post_id)
    if post is None:
        logger.warning("Post not found for deletion post_id=%s", post_id)
        raise HTTPException(status_code=404, detail="Post not found")

    authorize_api_mutation(auth, post.user_id)

    if not repository.cascade_delete and await repository.has_dependents(post_id):
        raise HTTPException(status_code=409, detail="Post still has comments or likes.")

    if not await repository.delete(post_id):
        logger.error("Post deletion failed for post_id=%s", post_id)
        raise HTTPException(status_code=500, detail="Post deletion failed")

    logger.info("Successfully deleted post_id=%s", post_id)
    return Response(status_code=204)
