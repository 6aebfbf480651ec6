import pytest
from sqlalchemy import func, select

from config import settings
from helpers import OTHER_ID, OWNER_ID, add_comment, add_post, auth_header
from models.comment import Comment


async def _comment_count(session_maker) -> int:
    async with session_maker() as session:
        return (await session.execute(select(func.count(Comment.comment_id)))).scalar()


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["x", "x" * 200])
async def test_comment_length_bounds_are_accepted(client, session_maker, text):
    post_id = await add_post(session_maker)
    response = await client.post(
        "/api/CommentAPI/create",
        json={"commentText": text, "postId": post_id, "userId": OTHER_ID},
    )
    assert response.status_code == 201
    payload = response.json()
    assert payload["commentText"] == text
    assert payload["postId"] == post_id
    assert payload["commentId"] > 0
    assert payload["commentDate"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "x" * 201])
async def test_comment_length_violations_are_rejected(client, session_maker, text):
    post_id = await add_post(session_maker)
    response = await client.post(
        "/api/CommentAPI/create",
        json={"commentText": text, "postId": post_id, "userId": OTHER_ID},
    )
    assert response.status_code == 400
    assert await _comment_count(session_maker) == 0


@pytest.mark.asyncio
async def test_comment_on_missing_post_returns_404(client, session_maker):
    response = await client.post(
        "/api/CommentAPI/create",
        json={"commentText": "Hi", "postId": 999, "userId": OTHER_ID},
    )
    assert response.status_code == 404
    assert await _comment_count(session_maker) == 0


@pytest.mark.asyncio
async def test_comment_requires_post_and_user(client, session_maker):
    post_id = await add_post(session_maker)
    no_post = await client.post("/api/CommentAPI/create", json={"commentText": "Hi", "userId": OTHER_ID})
    assert no_post.status_code == 400

    no_user = await client.post("/api/CommentAPI/create", json={"commentText": "Hi", "postId": post_id})
    assert no_user.status_code == 400

    unknown_user = await client.post(
        "/api/CommentAPI/create", json={"commentText": "Hi", "postId": post_id, "userId": "ghost"}
    )
    assert unknown_user.status_code == 400


@pytest.mark.asyncio
async def test_list_and_get_comments(client, session_maker):
    post_id = await add_post(session_maker)
    comment_id = await add_comment(session_maker, post_id, text="First")

    listed = await client.get("/api/CommentAPI/commentlist")
    assert listed.status_code == 200
    assert [item["commentText"] for item in listed.json()] == ["First"]

    fetched = await client.get(f"/api/CommentAPI/comment/{comment_id}")
    assert fetched.status_code == 200
    assert fetched.json()["userId"] == OTHER_ID

    missing = await client.get("/api/CommentAPI/comment/999")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_comment_text(client, session_maker):
    post_id = await add_post(session_maker)
    comment_id = await add_comment(session_maker, post_id, text="Before")

    response = await client.put(f"/api/CommentAPI/update/{comment_id}", json={"commentText": "After"})
    assert response.status_code == 200
    assert response.json()["commentText"] == "After"

    too_long = await client.put(f"/api/CommentAPI/update/{comment_id}", json={"commentText": "x" * 201})
    assert too_long.status_code == 400
    fetched = await client.get(f"/api/CommentAPI/comment/{comment_id}")
    assert fetched.json()["commentText"] == "After"


@pytest.mark.asyncio
async def test_update_missing_comment_returns_404(client, session_maker):
    response = await client.put("/api/CommentAPI/update/999", json={"commentText": "Anything"})
    assert response.status_code == 404
    assert await _comment_count(session_maker) == 0


@pytest.mark.asyncio
async def test_delete_comment(client, session_maker):
    post_id = await add_post(session_maker)
    comment_id = await add_comment(session_maker, post_id)

    response = await client.delete(f"/api/CommentAPI/delete/{comment_id}")
    assert response.status_code == 204
    assert await _comment_count(session_maker) == 0

    again = await client.delete(f"/api/CommentAPI/delete/{comment_id}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_comment_ownership_enforced_when_configured(client, session_maker, monkeypatch):
    monkeypatch.setattr(settings, "API_OWNERSHIP_ENFORCED", True)
    post_id = await add_post(session_maker)
    comment_id = await add_comment(session_maker, post_id, user_id=OTHER_ID)

    stranger = await client.delete(f"/api/CommentAPI/delete/{comment_id}", headers=auth_header(OWNER_ID))
    assert stranger.status_code == 403

    author = await client.delete(f"/api/CommentAPI/delete/{comment_id}", headers=auth_header(OTHER_ID))
    assert author.status_code == 204
