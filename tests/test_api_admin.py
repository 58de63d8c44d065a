import uuid

from linktrend.core.config import settings


async def test_list_users_newest_first(login, admin_client):
    _, first = await login("first@example.com", "First")
    _, second = await login("second@example.com", "Second")

    response = await admin_client.get("/api/users")
    assert response.status_code == 200
    emails = [u["email"] for u in response.json()]
    assert emails.index("second@example.com") < emails.index("first@example.com")
    assert settings.ADMIN_EMAIL in emails


async def test_user_admin_requires_admin(client, login):
    response = await client.get("/api/users")
    assert response.status_code == 401

    viewer, user = await login()
    response = await viewer.get("/api/users")
    assert response.status_code == 403
    response = await viewer.delete(f"/api/users/{user['id']}")
    assert response.status_code == 403


async def test_delete_user_ends_their_sessions(login, admin_client):
    viewer, user = await login()

    response = await admin_client.delete(f"/api/users/{user['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await viewer.get("/api/auth/verify")
    assert response.json() is None

    response = await admin_client.get("/api/users")
    assert user["email"] not in [u["email"] for u in response.json()]

    response = await admin_client.get("/api/admin/audit-logs")
    entry = response.json()[0]
    assert entry["action"] == "user.delete"
    assert entry["target_id"] == user["id"]


async def test_delete_unknown_user(admin_client):
    response = await admin_client.delete(f"/api/users/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"

    response = await admin_client.delete("/api/users/not-a-uuid")
    assert response.status_code == 404


async def test_admin_endpoints_require_admin(client, login):
    viewer, _ = await login()
    for path in ("/api/admin/stats", "/api/admin/audit-logs"):
        assert (await client.get(path)).status_code == 401
        assert (await viewer.get(path)).status_code == 403


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}


async def test_login_is_rate_limited(build_app, make_client, monkeypatch):
    monkeypatch.setattr(settings, "LOGIN_RATE_LIMIT_PER_MINUTE", 2)
    client = make_client(build_app())

    statuses = []
    for _ in range(3):
        response = await client.post("/api/auth/login", json={"credential": "forged"})
        statuses.append(response.status_code)

    assert statuses == [401, 401, 429]
    assert (await client.get("/health")).status_code == 200
