"""Tests for registration, login and the two session principals."""
from storefront.config import settings
from storefront.models.activity import UserActivity
from sqlalchemy import select
from conftest import TEST_PASSWORD, login_as, admin_login


async def test_register_logs_user_in(client, test_db):
    response = await client.post(
        "/api/auth/register",
        json={"username": "newuser", "password": "Secret123", "email": "new@example.com"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "newuser"
    assert data["role"] == "user"
    assert "password_hash" not in data
    assert settings.SESSION_COOKIE_NAME in response.cookies

    me = await client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == "newuser"


async def test_register_duplicate_username(client, user):
    response = await client.post(
        "/api/auth/register",
        json={"username": user.username, "password": "Secret123"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Username already exists"


async def test_register_weak_password_is_invalid_request(client):
    response = await client.post(
        "/api/auth/register",
        json={"username": "weakling", "password": "password"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request data"
    assert response.json()["errors"]


async def test_login_sets_cookie_and_records_activity(client, test_db, user):
    response = await client.post(
        "/api/auth/login",
        json={"username": user.username, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["uuid"] == user.uuid
    assert settings.SESSION_COOKIE_NAME in response.cookies

    await test_db.refresh(user)
    assert user.last_login is not None

    result = await test_db.execute(select(UserActivity).where(UserActivity.user_id == user.uuid))
    assert [a.action for a in result.scalars().all()] == ["login"]


async def test_login_wrong_password(client, user):
    response = await client.post(
        "/api/auth/login",
        json={"username": user.username, "password": "WrongPass123"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


async def test_logout_ends_session(client, user):
    await client.post("/api/auth/login", json={"username": user.username, "password": TEST_PASSWORD})
    assert (await client.get("/api/auth/me")).status_code == 200

    response = await client.post("/api/auth/logout")
    assert response.status_code == 200

    assert (await client.get("/api/auth/me")).status_code == 401


async def test_me_requires_session(client):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


async def test_tampered_cookie_is_rejected(client):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-valid-token")

    response = await client.get("/api/auth/me")

    assert response.status_code == 401


async def test_admin_session_is_not_a_user_session(client):
    admin_login(client)

    assert (await client.get("/api/admin/check")).status_code == 200
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/orders")).status_code == 401


async def test_user_session_is_not_an_admin_session(client, staff_user):
    # Even an admin-role catalog user has no admin panel session
    login_as(client, staff_user)

    assert (await client.get("/api/auth/me")).status_code == 200
    assert (await client.get("/api/admin/check")).status_code == 401
    assert (await client.get("/api/admin/orders")).status_code == 401


async def test_admin_token_in_user_cookie_is_rejected(client):
    from storefront.auth.security import create_session_token, ADMIN_SCOPE
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token("admin", ADMIN_SCOPE))

    assert (await client.get("/api/auth/me")).status_code == 401


async def test_admin_login_and_logout(client):
    bad = await client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
    assert bad.status_code == 401

    response = await client.post(
        "/api/admin/login",
        json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert (await client.get("/api/admin/check")).json() == {"authenticated": True}

    await client.post("/api/admin/logout")
    assert (await client.get("/api/admin/check")).status_code == 401


async def test_inactive_user_session_is_rejected(client, test_db, user):
    login_as(client, user)
    user.is_active = False
    await test_db.commit()

    assert (await client.get("/api/auth/me")).status_code == 401
