"""
Async HTTP client for the Friendly JSON API.

One method per endpoint. Non-2xx responses raise ``ApiError``; endpoints that
answer 204 return ``None``.
"""

import logging
from typing import Any, List, Optional

import httpx

from client.session import CurrentUser
from schemas import CommentDto, PostDto, UserDto

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if detail:
            return str(detail)
    return str(body)


class FriendlyApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5062",
        *,
        user: Optional[CurrentUser] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.user = user
        headers = user.auth_headers() if user else {}
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "FriendlyApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Request %s %s failed: %s", method, url, exc)
            raise ApiError(0, str(exc)) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("%s %s -> %s %s", method, url, response.status_code, message)
            raise ApiError(response.status_code, message)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Posts

    async def list_posts(self) -> List[PostDto]:
        data = await self._request("GET", "/api/PostAPI/postlist")
        return [PostDto.model_validate(item) for item in data]

    async def get_post(self, post_id: int) -> PostDto:
        return PostDto.model_validate(await self._request("GET", f"/api/PostAPI/post/{post_id}"))

    async def create_post(
        self,
        caption: str,
        user_id: str,
        image_name: str,
        image_bytes: bytes,
        content_type: str = "image/jpeg",
    ) -> PostDto:
        data = await self._request(
            "POST",
            "/api/PostAPI/create",
            data={"caption": caption, "userId": user_id},
            files={"postImage": (image_name, image_bytes, content_type)},
        )
        return PostDto.model_validate(data)

    async def update_post(self, post_id: int, caption: str) -> PostDto:
        data = await self._request("PUT", f"/api/PostAPI/update/{post_id}", json={"caption": caption})
        return PostDto.model_validate(data)

    async def delete_post(self, post_id: int) -> None:
        await self._request("DELETE", f"/api/PostAPI/delete/{post_id}")

    # Comments

    async def list_comments(self) -> List[CommentDto]:
        data = await self._request("GET", "/api/CommentAPI/commentlist")
        return [CommentDto.model_validate(item) for item in data]

    async def get_comment(self, comment_id: int) -> CommentDto:
        return CommentDto.model_validate(await self._request("GET", f"/api/CommentAPI/comment/{comment_id}"))

    async def create_comment(self, comment_text: str, post_id: int, user_id: str) -> CommentDto:
        data = await self._request(
            "POST",
            "/api/CommentAPI/create",
            json={"commentText": comment_text, "postId": post_id, "userId": user_id},
        )
        return CommentDto.model_validate(data)

    async def update_comment(self, comment_id: int, comment_text: str) -> CommentDto:
        data = await self._request(
            "PUT", f"/api/CommentAPI/update/{comment_id}", json={"commentText": comment_text}
        )
        return CommentDto.model_validate(data)

    async def delete_comment(self, comment_id: int) -> None:
        await self._request("DELETE", f"/api/CommentAPI/delete/{comment_id}")

    # Likes

    async def get_like_count(self, post_id: int) -> int:
        return int(await self._request("GET", f"/api/LikeAPI/likes/{post_id}"))

    async def like(self, post_id: int, user_id: str) -> str:
        data = await self._request("POST", "/api/LikeAPI/create", json={"postId": post_id, "userId": user_id})
        return data["message"]

    async def unlike(self, post_id: int, user_id: str) -> str:
        data = await self._request(
            "DELETE", "/api/LikeAPI/delete", json={"postId": post_id, "userId": user_id}
        )
        return data["message"]

    # Users

    async def list_users(self) -> List[UserDto]:
        data = await self._request("GET", "/api/UserAPI/userlist")
        return [UserDto.model_validate(item) for item in data]

    async def get_user(self, user_id: str) -> UserDto:
        return UserDto.model_validate(await self._request("GET", f"/api/UserAPI/user/{user_id}"))
