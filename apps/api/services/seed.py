"""Demo data bootstrap for first run."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.comment import Comment
from models.post import Post
from models.user import User

logger = logging.getLogger(__name__)

DEMO_USERS: List[Dict[str, str]] = [
    {
        "user_name": "axelsormen",
        "first_name": "Axel",
        "last_name": "Ørmen",
        "email": "axelsormen@gmail.com",
        "profile_image_url": "/uploads/profile-images/profileimage1.jpg",
        "phone_number": "+47 12345678",
    },
    {
        "user_name": "kvammy",
        "first_name": "Kristoffer",
        "last_name": "Kvam",
        "email": "kvamsy@gmail.com",
        "profile_image_url": "/uploads/profile-images/profileimage2.jpg",
        "phone_number": "+47 18811881",
    },
    {
        "user_name": "sthams",
        "first_name": "Simen",
        "last_name": "Thams",
        "email": "simenthams@hotmail.com",
        "profile_image_url": "/uploads/profile-images/profileimage3.jpg",
    },
    {
        "user_name": "adinah",
        "first_name": "Adina",
        "last_name": "Heia",
        "email": "aheia@hotmail.com",
        "profile_image_url": "/uploads/profile-images/profileimage4.jpg",
    },
    {
        "user_name": "baifanz",
        "first_name": "Baifan",
        "last_name": "Zhou",
        "email": "baifan.zhou@oslomet.no",
        "profile_image_url": "/uploads/profile-images/profileimage5.jpg",
    },
]

# (image path, caption, owner user_name)
DEMO_POSTS = [
    ("/uploads/mountains.jpg", "Enjoying the mountains", "axelsormen"),
    ("/uploads/fall.jpg", "Autumn is beautiful", "kvammy"),
    ("/uploads/beach.jpg", "Loving the beach!", "axelsormen"),
]

# (comment text, index into DEMO_POSTS, author user_name)
DEMO_COMMENTS = [
    ("Awesome!", 1, "axelsormen"),
    ("Beautiful, wow!", 0, "kvammy"),
    ("You are such a great photographer", 1, "adinah"),
]


async def _count(db: AsyncSession, column) -> int:
    result = await db.execute(select(func.count(column)))
    return int(result.scalar() or 0)


async def seed_demo_data(db: AsyncSession) -> Dict[str, int]:
    """
    Populate users, posts and comments when their tables are empty.

    Each table is seeded independently, so re-running against a populated
    database is a no-op. Returns how many rows of each kind were inserted.
    """
    inserted = {"users": 0, "posts": 0, "comments": 0}

    if await _count(db, User.id) == 0:
        for entry in DEMO_USERS:
            db.add(User(id=str(uuid.uuid4()), email_confirmed=False, **entry))
        await db.flush()
        inserted["users"] = len(DEMO_USERS)

    users_result = await db.execute(select(User))
    users_by_name = {user.user_name: user for user in users_result.scalars().all()}
    missing = [entry["user_name"] for entry in DEMO_USERS if entry["user_name"] not in users_by_name]
    if missing:
        logger.warning("Skipping post/comment seed; demo users missing: %s", ", ".join(missing))
        await db.commit()
        return inserted

    if await _count(db, Post.post_id) == 0:
        base_time = datetime.now(timezone.utc)
        for offset, (image_path, caption, owner) in enumerate(DEMO_POSTS):
            db.add(
                Post(
                    post_image_path=image_path,
                    caption=caption,
                    post_date=(base_time + timedelta(seconds=offset)).isoformat(),
                    user_id=users_by_name[owner].id,
                )
            )
        await db.flush()
        inserted["posts"] = len(DEMO_POSTS)

    if await _count(db, Comment.comment_id) == 0:
        posts_result = await db.execute(select(Post).order_by(Post.post_id))
        posts = list(posts_result.scalars().all())
        now = datetime.now(timezone.utc).isoformat()
        for text, post_index, author in DEMO_COMMENTS:
            if post_index >= len(posts):
                continue
            db.add(
                Comment(
                    comment_text=text,
                    comment_date=now,
                    post_id=posts[post_index].post_id,
                    user_id=users_by_name[author].id,
                )
            )
            inserted["comments"] += 1

    await db.commit()
    if any(inserted.values()):
        logger.info(
            "Seeded demo data users=%s posts=%s comments=%s",
            inserted["users"],
            inserted["posts"],
            inserted["comments"],
        )
    return inserted


async def _main() -> None:
    from database import Base, async_session_maker, engine
    from logging_config import configure_logging

    configure_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_maker() as session:
        await seed_demo_data(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_main())
