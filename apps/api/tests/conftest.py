import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import settings
from database import Base, enable_sqlite_foreign_keys, get_db
from helpers import OTHER_ID, OWNER_ID
from main import app
from models.user import User


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep policy flags at their defaults and write uploads under tmp_path."""
    monkeypatch.setattr(settings, "API_OWNERSHIP_ENFORCED", False)
    monkeypatch.setattr(settings, "CASCADE_POST_DELETE", True)
    monkeypatch.setattr(settings, "DEV_SESSION_LOGIN_ENABLED", False)
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "UPLOAD_URL_PREFIX", "/uploads")
    yield


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "friendly_test.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    enable_sqlite_foreign_keys(engine)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with maker() as session:
        session.add(User(id=OWNER_ID, user_name="owner", email="owner@example.com"))
        session.add(User(id=OTHER_ID, user_name="other", email="other@example.com"))
        await session.commit()

    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http

    app.dependency_overrides.pop(get_db, None)
