import pytest
from sqlalchemy.exc import OperationalError

from helpers import OTHER_ID, OWNER_ID, add_comment, add_like, add_post
from models.comment import Comment
from models.like import Like
from models.post import Post
from repositories import (
    CommentRepository,
    LikeCount,
    LikeCreateOutcome,
    LikeRepository,
    PostRepository,
    UserRepository,
)


class _BrokenSession:
    """Session stand-in whose every query fails like a lost connection."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    async def get(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    async def rollback(self):
        return None


@pytest.mark.asyncio
async def test_post_repository_round_trip(session_maker):
    async with session_maker() as session:
        repository = PostRepository(session)
        post = Post(caption="Fresh", post_image_path="/uploads/a.jpg", post_date="2026-01-01T00:00:00+00:00", user_id=OWNER_ID)
        assert await repository.create(post) is True
        assert post.post_id is not None

        fetched = await repository.get_by_id(post.post_id)
        assert fetched.caption == "Fresh"

        assert await repository.update(Post(post_id=post.post_id, caption="Edited")) is True
        assert (await repository.get_by_id(post.post_id)).caption == "Edited"

        assert await repository.update(Post(post_id=999, caption="Nope")) is False
        assert await repository.delete(999) is False


@pytest.mark.asyncio
async def test_post_repository_lists_by_user(session_maker):
    await add_post(session_maker, caption="Mine", user_id=OWNER_ID)
    await add_post(session_maker, caption="Theirs", user_id=OTHER_ID)

    async with session_maker() as session:
        posts = await PostRepository(session).list_by_user(OWNER_ID)
    assert [post.caption for post in posts] == ["Mine"]


@pytest.mark.asyncio
async def test_post_delete_without_cascade_fails_on_dependents(session_maker):
    post_id = await add_post(session_maker)
    await add_comment(session_maker, post_id)

    async with session_maker() as session:
        repository = PostRepository(session, cascade_delete=False)
        assert await repository.has_dependents(post_id) is True
        assert await repository.delete(post_id) is False

    async with session_maker() as session:
        assert await session.get(Post, post_id) is not None


@pytest.mark.asyncio
async def test_comment_repository_by_post(session_maker):
    first = await add_post(session_maker)
    second = await add_post(session_maker, minutes=1)
    await add_comment(session_maker, first, text="on first")
    await add_comment(session_maker, second, text="on second")

    async with session_maker() as session:
        repository = CommentRepository(session)
        comments = await repository.list_by_post(first)
        assert [comment.comment_text for comment in comments] == ["on first"]
        assert len(await repository.list()) == 2
        assert await repository.update(Comment(comment_id=999, comment_text="x")) is False
        assert await repository.delete(999) is False


@pytest.mark.asyncio
async def test_like_repository_outcomes(session_maker):
    post_id = await add_post(session_maker)

    async with session_maker() as session:
        repository = LikeRepository(session)
        assert await repository.create(Like(post_id=post_id, user_id=OTHER_ID)) is LikeCreateOutcome.CREATED
        assert await repository.create(Like(post_id=post_id, user_id=OTHER_ID)) is LikeCreateOutcome.ALREADY_EXISTS
        assert await repository.create(Like(post_id=999, user_id=OTHER_ID)) is LikeCreateOutcome.FAILED
        assert await repository.count_by_post(post_id) == LikeCount(count=1)

        assert await repository.delete_by_post_and_user(post_id, OTHER_ID) is True
        assert await repository.delete_by_post_and_user(post_id, OTHER_ID) is False
        assert await repository.count_by_post(post_id) == LikeCount(count=0)


@pytest.mark.asyncio
async def test_unavailable_like_count_differs_from_zero():
    result = await LikeRepository(_BrokenSession()).count_by_post(1)
    assert result.available is False
    assert result != LikeCount(count=0)


@pytest.mark.asyncio
async def test_repositories_return_sentinels_when_store_fails():
    broken = _BrokenSession()
    assert await PostRepository(broken).list() is None
    assert await PostRepository(broken).get_by_id(1) is None
    assert await PostRepository(broken).has_dependents(1) is False
    assert await CommentRepository(broken).list() is None
    assert await UserRepository(broken).list() is None


@pytest.mark.asyncio
async def test_like_count_endpoint_reports_503_when_unavailable(client, monkeypatch):
    async def unavailable(self, post_id):
        return LikeCount.unavailable()

    monkeypatch.setattr(LikeRepository, "count_by_post", unavailable)
    response = await client.get("/api/LikeAPI/likes/1")
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_user_repository(session_maker):
    async with session_maker() as session:
        repository = UserRepository(session)
        assert [user.user_name for user in await repository.list()] == ["other", "owner"]
        assert (await repository.get_by_id(OWNER_ID)).email == "owner@example.com"
        assert await repository.get_by_id("nobody") is None
