"""Data-access layer: one repository per entity."""

from .comments import CommentRepository
from .likes import LikeCount, LikeCreateOutcome, LikeRepository
from .posts import PostRepository
from .users import UserRepository

__all__ = [
    "CommentRepository",
    "LikeCount",
    "LikeCreateOutcome",
    "LikeRepository",
    "PostRepository",
    "UserRepository",
]
