import asyncio

import pytest
from sqlalchemy import func, select

from halolight.auth.service import INVALID_CREDENTIALS
from halolight.database.models import RefreshToken


@pytest.mark.asyncio
async def test_register_refresh_and_reuse(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "username": "alice", "password": "password123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True

    data = body["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["username"] == "alice"
    assert "password" not in data["user"]
    assert data["token"] and data["refreshToken"]
    assert data["token"] != data["refreshToken"]
    assert data["expiresIn"] == 900

    original = data["refreshToken"]
    response = await client.post("/api/auth/refresh", json={"refreshToken": original})
    assert response.status_code == 200
    rotated = response.json()["data"]
    assert rotated["refreshToken"] != original
    assert rotated["token"]

    response = await client.post("/api/auth/refresh", json={"refreshToken": original})
    assert response.status_code == 401
    error = response.json()["error"]
    assert response.json()["success"] is False
    assert error["code"] == "REFRESH_FAILED"

    # The rotated token is still good
    response = await client.post("/api/auth/refresh", json={"refreshToken": rotated["refreshToken"]})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_register_defaults_name_to_username(register_user):
    data = await register_user()
    assert data["user"]["name"] == "alice"
    assert data["user"]["status"] == "ACTIVE"
    assert data["user"]["roles"] == []
    assert data["user"]["permissions"] == []


@pytest.mark.asyncio
async def test_register_duplicate_email_is_rejected(client, register_user):
    await register_user()
    response = await client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "username": "alice2", "password": "password123"},
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "REGISTRATION_FAILED"
    assert error["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_duplicate_username_is_rejected(client, register_user):
    await register_user()
    response = await client.post(
        "/api/auth/register",
        json={"email": "other@example.com", "username": "alice", "password": "password123"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Username already taken"


@pytest.mark.asyncio
async def test_register_validates_input(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "username": "al", "password": "short"},
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    paths = {item["path"] for item in error["details"]["errors"]}
    assert {"email", "username", "password"} <= paths


@pytest.mark.asyncio
async def test_register_assigns_default_role_when_present(grant_role, register_user):
    first = await register_user()
    await grant_role(first["user"]["id"], "user", permissions=["documents:read"])

    data = await register_user(email="bob@example.com", username="bob")
    assert data["user"]["roles"] == ["user"]
    assert data["user"]["permissions"] == ["documents:read"]


@pytest.mark.asyncio
async def test_login_success_updates_last_login(client, register_user):
    await register_user()
    response = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "password123"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["lastLoginAt"] is not None
    assert data["token"] != data["refreshToken"]


@pytest.mark.asyncio
async def test_login_does_not_reveal_which_accounts_exist(client, register_user):
    await register_user()

    unknown = await client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "password123"}
    )
    wrong = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"}
    )

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert wrong.json()["error"] == {"code": "LOGIN_FAILED", "message": INVALID_CREDENTIALS}


@pytest.mark.asyncio
async def test_login_rejects_suspended_account(client, register_user, admin):
    data = await register_user()
    response = await client.put(
        f"/api/users/{data['user']['id']}", json={"status": "SUSPENDED"}, headers=admin["headers"]
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "password123"}
    )
    assert response.status_code == 401

    # Refresh is refused as well
    response = await client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client, register_user):
    data = await register_user()
    response = await client.post("/api/auth/refresh", json={"refreshToken": data["token"]})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "REFRESH_FAILED"


@pytest.mark.asyncio
async def test_refresh_token_cannot_be_used_as_bearer(client, register_user, bearer):
    data = await register_user()
    response = await client.get("/api/auth/me", headers=bearer(data["refreshToken"]))
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_logout_revokes_token_and_is_idempotent(client, register_user):
    data = await register_user()

    for _ in range(2):
        response = await client.post("/api/auth/logout", json={"refreshToken": data["refreshToken"]})
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Successfully logged out"

    response = await client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_with_unknown_token_succeeds(client):
    response = await client.post("/api/auth/logout", json={"refreshToken": "never-issued"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_all_only_affects_caller(client, register_user, bearer, session_factory):
    alice = await register_user()
    second_login = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "password123"}
    )
    alice_second = second_login.json()["data"]["refreshToken"]
    bob = await register_user(email="bob@example.com", username="bob")

    response = await client.post("/api/auth/logout-all", headers=bearer(alice["token"]))
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Successfully logged out from all devices"

    for token in (alice["refreshToken"], alice_second):
        response = await client.post("/api/auth/refresh", json={"refreshToken": token})
        assert response.status_code == 401

    response = await client.post("/api/auth/refresh", json={"refreshToken": bob["refreshToken"]})
    assert response.status_code == 200

    async with session_factory() as session:
        remaining = await session.scalar(
            select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == alice["user"]["id"])
        )
    assert remaining == 0


@pytest.mark.asyncio
async def test_logout_all_requires_authentication(client):
    response = await client.post("/api/auth/logout-all")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_roles_and_permissions(client, register_user, grant_role, bearer):
    data = await register_user()
    await grant_role(data["user"]["id"], "editor", permissions=["documents:*", "users:read"])

    response = await client.get("/api/auth/me", headers=bearer(data["token"]))
    assert response.status_code == 200
    me = response.json()["data"]
    assert me["id"] == data["user"]["id"]
    assert me["roles"] == ["editor"]
    assert me["permissions"] == ["documents:*", "users:read"]
    assert "password" not in me


@pytest.mark.asyncio
async def test_me_for_deleted_user_is_not_found(client, register_user, admin, bearer):
    data = await register_user()
    response = await client.delete(f"/api/users/{data['user']['id']}", headers=admin["headers"])
    assert response.status_code == 200

    response = await client.get("/api/auth/me", headers=bearer(data["token"]))
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    # Refresh tokens went with the user
    response = await client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_concurrent_refresh_consumes_token_once(file_client):
    response = await file_client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "username": "alice", "password": "password123"},
    )
    assert response.status_code == 201
    current = response.json()["data"]["refreshToken"]

    for _ in range(5):
        first, second = await asyncio.gather(
            file_client.post("/api/auth/refresh", json={"refreshToken": current}),
            file_client.post("/api/auth/refresh", json={"refreshToken": current}),
        )
        assert sorted([first.status_code, second.status_code]) == [200, 401]
        winner = first if first.status_code == 200 else second

        response = await file_client.post("/api/auth/refresh", json={"refreshToken": current})
        assert response.status_code == 401

        current = winner.json()["data"]["refreshToken"]

    response = await file_client.post("/api/auth/refresh", json={"refreshToken": current})
    assert response.status_code == 200
