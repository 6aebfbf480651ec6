"""Python rendition of the Friendly front end: API client, session context and page state."""

from client.api_client import ApiError, FriendlyApiClient
from client.forms import CommentForm, PostForm
from client.pages import PostListPage, UserDetailsPage
from client.session import CurrentUser

__all__ = [
    "ApiError",
    "CommentForm",
    "CurrentUser",
    "FriendlyApiClient",
    "PostForm",
    "PostListPage",
    "UserDetailsPage",
]
