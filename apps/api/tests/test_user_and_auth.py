import pytest

from config import settings
from helpers import OTHER_ID, OWNER_ID, auth_header


@pytest.mark.asyncio
async def test_user_list_and_detail(client):
    listed = await client.get("/api/UserAPI/userlist")
    assert listed.status_code == 200
    assert [user["userName"] for user in listed.json()] == ["other", "owner"]
    assert all("passwordHash" not in user for user in listed.json())

    fetched = await client.get(f"/api/UserAPI/user/{OWNER_ID}")
    assert fetched.status_code == 200
    assert fetched.json()["email"] == "owner@example.com"

    missing = await client.get("/api/UserAPI/user/nobody")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_me_requires_a_session(client):
    anonymous = await client.get("/auth/me")
    assert anonymous.status_code == 401

    response = await client.get("/auth/me", headers=auth_header(OWNER_ID, "owner"))
    assert response.status_code == 200
    assert response.json()["id"] == OWNER_ID


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_dev_session_is_hidden_unless_enabled(client):
    response = await client.post(f"/auth/dev-session/{OWNER_ID}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_dev_session_sets_cookie_usable_for_me(client, monkeypatch):
    monkeypatch.setattr(settings, "DEV_SESSION_LOGIN_ENABLED", True)

    response = await client.post(f"/auth/dev-session/{OTHER_ID}")
    assert response.status_code == 200
    assert response.json()["user_id"] == OTHER_ID
    assert response.headers["set-cookie"].startswith(f"{settings.SESSION_COOKIE_NAME}=")

    token = response.json()["session_token"]
    me = await client.get("/auth/me", headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={token}"})
    assert me.status_code == 200
    assert me.json()["userName"] == "other"

    unknown = await client.post("/auth/dev-session/ghost")
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_health_endpoints(client):
    live = await client.get("/health/live")
    assert live.json() == {"alive": True}

    ready = await client.get("/health/ready")
    assert ready.json() == {"ready": True}
