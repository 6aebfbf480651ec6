import subprocess
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport

from client import ApiError, CommentForm, CurrentUser, FriendlyApiClient, PostForm, PostListPage, UserDetailsPage
from helpers import JPEG_BYTES, OTHER_ID, OWNER_ID, add_comment, add_like, add_post
from main import app
from schemas import LikeCount


def _api(user=None) -> FriendlyApiClient:
    return FriendlyApiClient("http://test", user=user, transport=ASGITransport(app=app))


@pytest.mark.asyncio
async def test_post_list_page_aggregates_posts_users_comments_and_likes(client, session_maker):
    first = await add_post(session_maker, caption="First", minutes=0)
    second = await add_post(session_maker, caption="Second", minutes=1)
    await add_comment(session_maker, first, text="nice one")
    await add_like(session_maker, first, user_id=OTHER_ID)
    await add_like(session_maker, first, user_id=OWNER_ID)

    async with _api() as api:
        page = PostListPage(api)
        await page.load()

    assert page.error is None
    assert [post.caption for post in page.posts] == ["Second", "First"]
    assert page.likes[first] == LikeCount(count=2)
    assert page.likes[second] == LikeCount(count=0)
    assert [comment.comment_text for comment in page.comments_for(first)] == ["nice one"]
    assert page.comments_for(second) == []
    assert page.author_of(page.posts[0]).user_name == "owner"


@pytest.mark.asyncio
async def test_failed_like_count_marks_only_that_post_unavailable(client, session_maker, monkeypatch):
    broken = await add_post(session_maker, caption="Broken", minutes=0)
    healthy = await add_post(session_maker, caption="Healthy", minutes=1)

    original = FriendlyApiClient.get_like_count

    async def flaky(self, post_id):
        if post_id == broken:
            raise ApiError(503, "Like count is currently unavailable")
        return await original(self, post_id)

    monkeypatch.setattr(FriendlyApiClient, "get_like_count", flaky)

    async with _api() as api:
        page = PostListPage(api)
        await page.load()

    assert page.likes[broken].available is False
    assert page.likes[healthy] == LikeCount(count=0)
    assert len(page.posts) == 2


@pytest.mark.asyncio
async def test_mutations_reload_the_page(client, session_maker):
    post_id = await add_post(session_maker)
    user = CurrentUser(user_id=OTHER_ID, user_name="other")

    async with _api(user) as api:
        page = PostListPage(api, user=user)
        await page.load()
        assert page.likes[post_id].count == 0

        await page.like(post_id)
        assert page.likes[post_id].count == 1

        form = CommentForm(comment_text="Great shot")
        comment = await page.submit_comment(post_id, form)
        assert comment is not None
        assert form.comment_text == ""
        assert [c.comment_text for c in page.comments_for(post_id)] == ["Great shot"]

        await page.delete_comment(comment.comment_id)
        assert page.comments_for(post_id) == []

        await page.unlike(post_id)
        assert page.likes[post_id].count == 0


@pytest.mark.asyncio
async def test_mutations_require_a_current_user(client, session_maker):
    post_id = await add_post(session_maker)
    async with _api() as api:
        page = PostListPage(api)
        with pytest.raises(ApiError) as excinfo:
            await page.like(post_id)
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_like_surfaces_as_api_error(client, session_maker):
    post_id = await add_post(session_maker)
    await add_like(session_maker, post_id, user_id=OTHER_ID)

    async with _api() as api:
        with pytest.raises(ApiError) as excinfo:
            await api.like(post_id, OTHER_ID)
    assert excinfo.value.status_code == 409


@pytest.mark.asyncio
async def test_view_mode_toggle(client):
    async with _api() as api:
        page = PostListPage(api)
        assert page.view_mode == "table"
        assert page.toggle_view_mode() == "grid"
        page.set_view_mode("table")
        with pytest.raises(ValueError):
            page.set_view_mode("carousel")


@pytest.mark.asyncio
async def test_user_details_page_filters_posts_by_owner(client, session_maker):
    await add_post(session_maker, caption="Owner post", user_id=OWNER_ID)
    await add_post(session_maker, caption="Other post", user_id=OTHER_ID)

    async with _api() as api:
        page = UserDetailsPage(api, user_id=OWNER_ID)
        await page.load()

    assert page.user.user_name == "owner"
    assert [post.caption for post in page.posts] == ["Owner post"]


@pytest.mark.asyncio
async def test_post_form_validates_before_sending(client):
    user = CurrentUser(user_id=OWNER_ID)
    async with _api(user) as api:
        form = PostForm(caption="", image_name="pic.gif", image_bytes=JPEG_BYTES)
        assert await form.submit_create(api, user) is None
        assert "Caption is required." in form.errors
        assert any("image formats" in error for error in form.errors)

        form = PostForm(caption="Holiday", image_name="pic.jpg", image_bytes=JPEG_BYTES)
        created = await form.submit_create(api, user)
    assert created is not None
    assert created.user_id == OWNER_ID
    assert created.post_image_path.startswith("/uploads/")


@pytest.mark.asyncio
async def test_comment_form_rejects_overlong_text():
    form = CommentForm(comment_text="x" * 201)
    assert form.validate() is False
    assert form.errors == ["Comment cannot exceed 200 characters."]


@pytest.mark.asyncio
async def test_comment_form_rejects_blank_text():
    form = CommentForm(comment_text="   ")
    assert form.validate() is False
    assert form.errors == ["Comment text is required."]


def test_client_package_does_not_load_server_modules():
    app_root = Path(__file__).resolve().parents[1]
    script = (
        "import sys, client\n"
        "loaded = [name for name in ('sqlalchemy', 'config', 'database', 'repositories') if name in sys.modules]\n"
        "assert not loaded, loaded\n"
    )
    result = subprocess.run([sys.executable, "-c", script], cwd=app_root, capture_output=True, text=True)
    assert result.returncode == 0, result.stderr
