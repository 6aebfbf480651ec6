"""Field rules shared by the JSON API, the page forms and the client forms."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

CAPTION_MAX_LENGTH = 200
COMMENT_MIN_LENGTH = 1
COMMENT_MAX_LENGTH = 200

ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def caption_error(caption: Optional[str]) -> Optional[str]:
    """Return a user-facing message when a caption is invalid, else None."""
    if caption is None or not caption.strip():
        return "Caption is required."
    if len(caption) > CAPTION_MAX_LENGTH:
        return f"Caption cannot exceed {CAPTION_MAX_LENGTH} characters."
    return None


def comment_text_error(text: Optional[str]) -> Optional[str]:
    if text is None or not text.strip():
        return "Comment text is required."
    if len(text) < COMMENT_MIN_LENGTH:
        return f"Comment must be at least {COMMENT_MIN_LENGTH} character long."
    if len(text) > COMMENT_MAX_LENGTH:
        return f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters."
    return None


def like_payload_error(post_id: Optional[int], user_id: Optional[str]) -> Optional[str]:
    if post_id is None or post_id <= 0:
        return "postId must be a positive integer."
    if not user_id or not str(user_id).strip():
        return "userId is required."
    return None


def image_extension_error(filename: Optional[str]) -> Optional[str]:
    suffix = Path(filename or "").suffix.lower()
    if suffix not in ALLOWED_IMAGE_EXTENSIONS:
        return "Only .jpg, .jpeg, and .png image formats are allowed."
    return None
