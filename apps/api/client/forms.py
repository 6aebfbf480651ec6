"""Client-side form state that checks the same field rules as the server before sending."""

from dataclasses import dataclass, field
from typing import List, Optional

from client.api_client import ApiError, FriendlyApiClient
from client.session import CurrentUser
from schemas import CommentDto, PostDto
from services.validation import caption_error, comment_text_error, image_extension_error


@dataclass
class PostForm:
    caption: str = ""
    image_name: Optional[str] = None
    image_bytes: Optional[bytes] = None
    errors: List[str] = field(default_factory=list)

    def validate(self, *, require_image: bool = True) -> bool:
        self.errors = []
        error = caption_error(self.caption)
        if error:
            self.errors.append(error)
        if require_image:
            if not self.image_name or not self.image_bytes:
                self.errors.append("Image file is required.")
            else:
                error = image_extension_error(self.image_name)
                if error:
                    self.errors.append(error)
        return not self.errors

    async def submit_create(self, api: FriendlyApiClient, user: CurrentUser) -> Optional[PostDto]:
        if not self.validate():
            return None
        try:
            return await api.create_post(self.caption, user.user_id, self.image_name, self.image_bytes)
        except ApiError as exc:
            self.errors.append(exc.message)
            return None

    async def submit_update(self, api: FriendlyApiClient, post_id: int) -> Optional[PostDto]:
        if not self.validate(require_image=False):
            return None
        try:
            return await api.update_post(post_id, self.caption)
        except ApiError as exc:
            self.errors.append(exc.message)
            return None


@dataclass
class CommentForm:
    comment_text: str = ""
    errors: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        error = comment_text_error(self.comment_text)
        self.errors = [error] if error else []
        return not self.errors

    async def submit_create(
        self, api: FriendlyApiClient, user: CurrentUser, post_id: int
    ) -> Optional[CommentDto]:
        if not self.validate():
            return None
        try:
            comment = await api.create_comment(self.comment_text, post_id, user.user_id)
        except ApiError as exc:
            self.errors.append(exc.message)
            return None
        self.comment_text = ""
        return comment

    async def submit_update(self, api: FriendlyApiClient, comment_id: int) -> Optional[CommentDto]:
        if not self.validate():
            return None
        try:
            return await api.update_comment(comment_id, self.comment_text)
        except ApiError as exc:
            self.errors.append(exc.message)
            return None
