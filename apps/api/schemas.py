"""
JSON projections (DTOs) exchanged over the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PostDto(CamelModel):
    post_id: int
    post_image_path: Optional[str] = None
    caption: Optional[str] = None
    post_date: Optional[str] = None
    user_id: Optional[str] = None


class PostUpdateRequest(CamelModel):
    caption: Optional[str] = None


class CommentDto(CamelModel):
    comment_id: int
    comment_text: Optional[str] = None
    comment_date: Optional[str] = None
    user_id: Optional[str] = None
    post_id: int


class CommentCreateRequest(CamelModel):
    comment_text: Optional[str] = None
    post_id: int = 0
    user_id: Optional[str] = None


class CommentUpdateRequest(CamelModel):
    comment_text: Optional[str] = None


class LikeDto(CamelModel):
    post_id: int = 0
    user_id: Optional[str] = None


class UserDto(CamelModel):
    id: str
    user_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    email_confirmed: Optional[bool] = None


class MessageResponse(BaseModel):
    message: str


@dataclass(frozen=True)
class LikeCount:
    """Like tally for a post; ``available`` is False when the store could not answer."""

    count: int = 0
    available: bool = True

    @classmethod
    def unavailable(cls) -> "LikeCount":
        return cls(count=0, available=False)
