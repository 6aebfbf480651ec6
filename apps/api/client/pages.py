"""
Page state for the post list and user details views.

Pages load everything they show on ``load()`` and reload after every
mutation, so what is displayed always reflects the server.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from client.api_client import ApiError, FriendlyApiClient
from client.forms import CommentForm
from client.session import CurrentUser
from schemas import CommentDto, LikeCount, PostDto, UserDto

logger = logging.getLogger(__name__)

VIEW_MODES = ("table", "grid")


@dataclass
class PostListPage:
    api: FriendlyApiClient
    user: Optional[CurrentUser] = None
    view_mode: str = "table"
    posts: List[PostDto] = field(default_factory=list)
    users: Dict[str, UserDto] = field(default_factory=dict)
    comments: Dict[int, List[CommentDto]] = field(default_factory=dict)
    likes: Dict[int, LikeCount] = field(default_factory=dict)
    error: Optional[str] = None

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode

    def toggle_view_mode(self) -> str:
        self.view_mode = "grid" if self.view_mode == "table" else "table"
        return self.view_mode

    async def load(self) -> None:
        """Fetch posts, users and comments together, then one like count per post."""
        try:
            posts, users, comments = await asyncio.gather(
                self.api.list_posts(),
                self.api.list_users(),
                self.api.list_comments(),
            )
        except ApiError as exc:
            logger.error("Failed to load post list: %s", exc)
            self.error = exc.message
            return

        self.error = None
        self.posts = posts
        self.users = {user.id: user for user in users}
        grouped: Dict[int, List[CommentDto]] = defaultdict(list)
        for comment in comments:
            grouped[comment.post_id].append(comment)
        self.comments = dict(grouped)

        counts = await asyncio.gather(
            *(self.api.get_like_count(post.post_id) for post in posts),
            return_exceptions=True,
        )
        likes: Dict[int, LikeCount] = {}
        for post, count in zip(posts, counts):
            if isinstance(count, ApiError):
                logger.warning("Like count unavailable for post_id=%s: %s", post.post_id, count)
                likes[post.post_id] = LikeCount.unavailable()
            elif isinstance(count, BaseException):
                raise count
            else:
                likes[post.post_id] = LikeCount(count=count)
        self.likes = likes

    def comments_for(self, post_id: int) -> List[CommentDto]:
        return self.comments.get(post_id, [])

    def author_of(self, post: PostDto) -> Optional[UserDto]:
        return self.users.get(post.user_id) if post.user_id else None

    def _require_user(self) -> CurrentUser:
        if self.user is None:
            raise ApiError(401, "User is not logged in.")
        return self.user

    async def like(self, post_id: int) -> None:
        user = self._require_user()
        await self.api.like(post_id, user.user_id)
        await self.load()

    async def unlike(self, post_id: int) -> None:
        user = self._require_user()
        await self.api.unlike(post_id, user.user_id)
        await self.load()

    async def submit_comment(self, post_id: int, form: CommentForm) -> Optional[CommentDto]:
        user = self._require_user()
        comment = await form.submit_create(self.api, user, post_id)
        if comment is not None:
            await self.load()
        return comment

    async def delete_comment(self, comment_id: int) -> None:
        self._require_user()
        await self.api.delete_comment(comment_id)
        await self.load()


@dataclass
class UserDetailsPage:
    api: FriendlyApiClient
    user_id: str
    user: Optional[UserDto] = None
    posts: List[PostDto] = field(default_factory=list)
    error: Optional[str] = None

    async def load(self) -> None:
        try:
            user, posts = await asyncio.gather(
                self.api.get_user(self.user_id),
                self.api.list_posts(),
            )
        except ApiError as exc:
            logger.error("Failed to load user details for user_id=%s: %s", self.user_id, exc)
            self.error = exc.message
            return
        self.error = None
        self.user = user
        self.posts = [post for post in posts if post.user_id == self.user_id]
