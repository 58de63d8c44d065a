from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, update

from linktrend.core.config import settings
from linktrend.modules.auth.models import Session, User


async def test_google_login_creates_user_and_session(login):
    client, user = await login("new.viewer@example.com", "New Viewer")

    assert user["email"] == "new.viewer@example.com"
    assert user["name"] == "New Viewer"
    assert user["unlocked_videos"] == []
    assert user["is_admin"] is False
    assert client.cookies.get(settings.SESSION_COOKIE_NAME)

    response = await client.get("/api/auth/verify")
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]


async def test_repeat_login_reuses_the_account(login):
    _, first = await login("same@example.com", "Same Person")
    _, second = await login("same@example.com", "Renamed At Google")

    assert first["id"] == second["id"]
    assert second["name"] == "Same Person"


async def test_verify_without_session_returns_null(client):
    response = await client.get("/api/auth/verify")
    assert response.status_code == 200
    assert response.json() is None


async def test_bad_google_credential(client):
    response = await client.post("/api/auth/login", json={"credential": "forged"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Failed to verify Google credentials"


async def test_login_requires_a_method(client):
    response = await client.post("/api/auth/login", json={})
    assert response.status_code == 400
    assert "Google credential is required" in str(response.json()["detail"])


async def test_admin_login_requires_both_fields(client):
    response = await client.post("/api/auth/login", json={"username": "admin"})
    assert response.status_code == 400
    assert "Username and password are required" in str(response.json()["detail"])


async def test_admin_login(client, admin_credentials):
    response = await client.post("/api/auth/login", json=admin_credentials)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == settings.ADMIN_EMAIL
    assert body["is_admin"] is True


async def test_admin_login_wrong_password(client, admin_credentials):
    response = await client.post(
        "/api/auth/login",
        json={"username": admin_credentials["username"], "password": "guess"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"
    assert client.cookies.get(settings.SESSION_COOKIE_NAME) is None


async def test_admin_login_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)

    response = await client.post("/api/auth/login", json={"username": "admin", "password": "x"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Admin login not configured"


async def test_logout_ends_the_session(login):
    client, _ = await login()

    response = await client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await client.get("/api/auth/verify")
    assert response.json() is None


async def test_logout_without_session(client):
    response = await client.post("/api/auth/logout")
    assert response.status_code == 200


async def test_update_profile(login):
    client, _ = await login()

    response = await client.put("/api/auth/me", json={"name": "Display Name", "avatar_url": "https://img.test/a.png"})
    assert response.status_code == 200
    assert response.json()["name"] == "Display Name"
    assert response.json()["avatar_url"] == "https://img.test/a.png"


async def test_update_profile_requires_session(client):
    response = await client.put("/api/auth/me", json={"name": "x"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


async def test_expired_session_is_discarded(login, database):
    client, _ = await login()
    token = client.cookies.get(settings.SESSION_COOKIE_NAME)

    async with database.session() as db:
        await db.execute(
            update(Session)
            .where(Session.token == token)
            .values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        )
        await db.commit()

    response = await client.get("/api/auth/verify")
    assert response.json() is None

    async with database.session() as db:
        assert await db.get(Session, token) is None


async def test_session_for_deleted_user(login, database):
    client, user = await login()

    async with database.session() as db:
        await db.execute(delete(User).where(User.email == user["email"]))
        await db.commit()

    response = await client.get("/api/transactions/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"
