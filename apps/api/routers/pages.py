"""
Browser-facing page surface: server-rendered views and HTML form handlers.

Every mutation here requires a signed-in session and, for update/delete,
that the session user owns the post or comment.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.comment import Comment
from models.like import Like
from models.post import Post
from repositories import (
    CommentRepository,
    LikeCreateOutcome,
    LikeRepository,
    PostRepository,
    UserRepository,
)
from routers.auth_scope import AuthContext, get_optional_auth_context
from services.ownership import authorize_owner
from services.uploads import ImageUploadError, discard_image, save_post_image
from services.validation import caption_error, comment_text_error

router = APIRouter()
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _require_user(auth: Optional[AuthContext]) -> AuthContext:
    if auth is None or not auth.user_id:
        raise HTTPException(status_code=401, detail="You need to be logged in.")
    return auth


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _back(request: Request) -> RedirectResponse:
    referer = request.headers.get("referer")
    return _redirect(referer or "/Post/Table")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _post_list_context(db: AsyncSession) -> Dict[str, object]:
    """Posts with their authors, comments and like counts for the list views."""
    posts = await PostRepository(db).list()
    if not posts:
        logger.error("Post list not found or empty while rendering post views")
        raise HTTPException(status_code=404, detail="Post list not found.")

    users = await UserRepository(db).list() or []
    comments = await CommentRepository(db).list() or []
    comments_by_post: Dict[int, List[Comment]] = defaultdict(list)
    for comment in comments:
        comments_by_post[comment.post_id].append(comment)

    like_repository = LikeRepository(db)
    like_counts = {}
    for post in posts:
        like_counts[post.post_id] = await like_repository.count_by_post(post.post_id)

    return {
        "posts": posts,
        "users_by_id": {user.id: user for user in users},
        "comments_by_post": comments_by_post,
        "like_counts": like_counts,
    }


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------


@router.get("/")
async def home(request: Request, auth: Optional[AuthContext] = Depends(get_optional_auth_context)):
    return templates.TemplateResponse(request, "home.html", {"auth": auth})


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


@router.get("/Post/Table")
async def post_table(
    request: Request,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    context = await _post_list_context(db)
    return templates.TemplateResponse(
        request, "posts.html", {**context, "auth": auth, "current_view_name": "Table"}
    )


@router.get("/Post/Grid")
async def post_grid(
    request: Request,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    context = await _post_list_context(db)
    return templates.TemplateResponse(
        request, "posts.html", {**context, "auth": auth, "current_view_name": "Grid"}
    )


@router.get("/Post/Create")
async def post_create_form(request: Request, auth: Optional[AuthContext] = Depends(get_optional_auth_context)):
    auth = _require_user(auth)
    return templates.TemplateResponse(
        request, "post_form.html", {"auth": auth, "post": None, "caption": "", "errors": []}
    )


@router.post("/Post/Create")
async def post_create(
    request: Request,
    caption: Optional[str] = Form(None, alias="Caption"),
    image_file: Optional[UploadFile] = File(None, alias="imageFile"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a post owned by the session user, then go back to the table view."""
    auth = _require_user(auth)
    logger.info("Page post creation started for user_id=%s", auth.user_id)

    errors: List[str] = []
    error = caption_error(caption)
    if error:
        errors.append(error)

    image = None
    if not errors:
        try:
            image = await save_post_image(image_file)
        except ImageUploadError as exc:
            logger.warning("Rejected post image: %s", exc)
            errors.append(str(exc))
        except OSError:
            logger.exception("Error while saving post image")
            errors.append("An error occurred while saving the image.")

    if not errors and image is not None:
        post = Post(caption=caption, post_image_path=image.public_path, post_date=_now(), user_id=auth.user_id)
        if await PostRepository(db).create(post):
            logger.info("Post created post_id=%s, redirecting to Table", post.post_id)
            return _redirect("/Post/Table")
        discard_image(image)
        errors.append("Post creation failed.")

    logger.warning("Page post creation failed for user_id=%s: %s", auth.user_id, errors)
    return templates.TemplateResponse(
        request,
        "post_form.html",
        {"auth": auth, "post": None, "caption": caption or "", "errors": errors},
        status_code=400,
    )


async def _owned_post(db: AsyncSession, post_id: int, auth: Optional[AuthContext]) -> Post:
    post = await PostRepository(db).get_by_id(post_id)
    if post is None:
        logger.warning("Post not found post_id=%s", post_id)
        raise HTTPException(status_code=404, detail="Post not found.")
    authorize_owner(auth, post.user_id)
    return post


@router.get("/Post/Update/{post_id}")
async def post_update_form(
    request: Request,
    post_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, auth)
    return templates.TemplateResponse(
        request, "post_form.html", {"auth": auth, "post": post, "caption": post.caption, "errors": []}
    )


@router.post("/Post/Update/{post_id}")
async def post_update(
    request: Request,
    post_id: int,
    caption: Optional[str] = Form(None, alias="Caption"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, auth)

    error = caption_error(caption)
    if not error:
        if await PostRepository(db).update(Post(post_id=post_id, caption=caption)):
            return _redirect("/Post/Table")
        logger.error("Post update failed for post_id=%s", post_id)
        error = "Post update failed."

    return templates.TemplateResponse(
        request,
        "post_form.html",
        {"auth": auth, "post": post, "caption": caption or "", "errors": [error]},
        status_code=400,
    )


@router.get("/Post/Delete/{post_id}")
async def post_delete_form(
    request: Request,
    post_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, auth)
    return templates.TemplateResponse(request, "post_delete.html", {"auth": auth, "post": post})


@router.post("/Post/DeleteConfirmed/{post_id}")
async def post_delete_confirmed(
    post_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    await _owned_post(db, post_id, auth)
    repository = PostRepository(db)
    if not repository.cascade_delete and await repository.has_dependents(post_id):
        raise HTTPException(status_code=409, detail="Post still has comments or likes.")
    if not await repository.delete(post_id):
        logger.error("Failed to delete post post_id=%s", post_id)
        raise HTTPException(status_code=404, detail="Post not found.")
    logger.info("Post post_id=%s deleted from page surface", post_id)
    return _redirect("/Post/Table")


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.post("/Comment/Create")
async def comment_create(
    request: Request,
    comment_text: Optional[str] = Form(None, alias="CommentText"),
    post_id: int = Form(0, alias="PostId"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    auth = _require_user(auth)
    error = comment_text_error(comment_text)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if await PostRepository(db).get_by_id(post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found.")

    comment = Comment(comment_text=comment_text, comment_date=_now(), post_id=post_id, user_id=auth.user_id)
    if not await CommentRepository(db).create(comment):
        raise HTTPException(status_code=500, detail="Comment creation failed.")
    return _back(request)


async def _owned_comment(db: AsyncSession, comment_id: int, auth: Optional[AuthContext]) -> Comment:
    comment = await CommentRepository(db).get_by_id(comment_id)
    if comment is None:
        logger.warning("Comment not found comment_id=%s", comment_id)
        raise HTTPException(status_code=404, detail="Comment not found.")
    authorize_owner(auth, comment.user_id)
    return comment


@router.get("/Comment/Update/{comment_id}")
async def comment_update_form(
    request: Request,
    comment_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    comment = await _owned_comment(db, comment_id, auth)
    post = await PostRepository(db).get_by_id(comment.post_id)
    return templates.TemplateResponse(
        request,
        "comment_form.html",
        {"auth": auth, "comment": comment, "post": post, "comment_text": comment.comment_text, "errors": []},
    )


@router.post("/Comment/Update/{comment_id}")
async def comment_update(
    request: Request,
    comment_id: int,
    comment_text: Optional[str] = Form(None, alias="CommentText"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    comment = await _owned_comment(db, comment_id, auth)

    error = comment_text_error(comment_text)
    if not error:
        if await CommentRepository(db).update(Comment(comment_id=comment_id, comment_text=comment_text)):
            return _redirect("/Post/Table")
        logger.error("Comment update failed for comment_id=%s", comment_id)
        error = "Comment update failed."

    post = await PostRepository(db).get_by_id(comment.post_id)
    return templates.TemplateResponse(
        request,
        "comment_form.html",
        {"auth": auth, "comment": comment, "post": post, "comment_text": comment_text or "", "errors": [error]},
        status_code=400,
    )


@router.get("/Comment/Delete/{comment_id}")
async def comment_delete_form(
    request: Request,
    comment_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    comment = await _owned_comment(db, comment_id, auth)
    return templates.TemplateResponse(request, "comment_delete.html", {"auth": auth, "comment": comment})


@router.post("/Comment/DeleteConfirmed/{comment_id}")
async def comment_delete_confirmed(
    request: Request,
    comment_id: int,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    await _owned_comment(db, comment_id, auth)
    if not await CommentRepository(db).delete(comment_id):
        raise HTTPException(status_code=400, detail="Comment deletion failed")
    return _back(request)


# ---------------------------------------------------------------------------
# Likes (the acting user is always the session user)
# ---------------------------------------------------------------------------


@router.post("/Like/Create")
async def like_create(
    request: Request,
    post_id: int = Form(..., alias="postId"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    auth = _require_user(auth)
    if post_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid like data")

    outcome = await LikeRepository(db).create(Like(post_id=post_id, user_id=auth.user_id))
    if outcome is LikeCreateOutcome.ALREADY_EXISTS:
        logger.warning("Like already exists for post_id=%s user_id=%s", post_id, auth.user_id)
        raise HTTPException(status_code=409, detail="Like already exists")
    if outcome is LikeCreateOutcome.FAILED:
        raise HTTPException(status_code=400, detail="Unable to process Like data")
    return _back(request)


@router.post("/Like/DeleteConfirmed")
async def like_delete_confirmed(
    request: Request,
    post_id: int = Form(..., alias="postId"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    auth = _require_user(auth)
    if not await LikeRepository(db).delete_by_post_and_user(post_id, auth.user_id):
        logger.error("Like deletion failed for post_id=%s user_id=%s", post_id, auth.user_id)
        raise HTTPException(status_code=400, detail="Like deletion failed")
    return _back(request)


@router.get("/Like/GetLikesCount", response_model=int)
async def like_count(
    post_id: int = Query(..., alias="postId"),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    _require_user(auth)
    result = await LikeRepository(db).count_by_post(post_id)
    if not result.available:
        raise HTTPException(status_code=503, detail="Like count is currently unavailable")
    return result.count


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/User/Table")
async def user_table(
    request: Request,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    users = await UserRepository(db).list()
    if not users:
        logger.error("No users found in the database")
        raise HTTPException(status_code=404, detail="User list not found.")
    return templates.TemplateResponse(
        request, "users.html", {"auth": auth, "users": users, "current_view_name": "Table"}
    )


@router.get("/User/Details/{user_id}")
async def user_details(
    request: Request,
    user_id: str,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: AsyncSession = Depends(get_db),
):
    if not user_id.strip():
        raise HTTPException(status_code=400, detail="User ID cannot be null or empty.")
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found.")

    posts = await PostRepository(db).list_by_user(user_id)
    if not posts:
        logger.warning("No posts found for user_id=%s, rendering empty list", user_id)
        posts = []
    return templates.TemplateResponse(
        request,
        "user_details.html",
        {"auth": auth, "user": user, "posts": posts, "current_view_name": "User Details"},
    )
