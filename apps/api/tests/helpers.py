from datetime import datetime, timedelta, timezone

from models.comment import Comment
from models.like import Like
from models.post import Post
from services.session_token import create_session_token

OWNER_ID = "owner-user"
OTHER_ID = "other-user"

# Smallest possible JPEG-ish payload; content is never decoded.
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32 + b"\xff\xd9"

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def auth_header(user_id: str, user_name: str = None) -> dict:
    token = create_session_token(user_id, user_name).token
    return {"Authorization": f"Bearer {token}"}


async def add_post(session_maker, caption="A post", user_id=OWNER_ID, minutes=0) -> int:
    async with session_maker() as session:
        post = Post(
            caption=caption,
            post_image_path="/uploads/seed.jpg",
            post_date=(BASE_TIME + timedelta(minutes=minutes)).isoformat(),
            user_id=user_id,
        )
        session.add(post)
        await session.commit()
        return post.post_id


async def add_comment(session_maker, post_id: int, text="Nice", user_id=OTHER_ID) -> int:
    async with session_maker() as session:
        comment = Comment(
            comment_text=text,
            comment_date=BASE_TIME.isoformat(),
            post_id=post_id,
            user_id=user_id,
        )
        session.add(comment)
        await session.commit()
        return comment.comment_id


async def add_like(session_maker, post_id: int, user_id=OTHER_ID) -> None:
    async with session_maker() as session:
        session.add(Like(post_id=post_id, user_id=user_id))
        await session.commit()
