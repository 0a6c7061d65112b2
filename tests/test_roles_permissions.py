import pytest


async def _create_permission(client, headers, resource, action):
    response = await client.post(
        "/api/permissions", json={"resource": resource, "action": action}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_permission_catalogue(client, admin):
    read = await _create_permission(client, admin["headers"], "documents", "read")
    await _create_permission(client, admin["headers"], "documents", "*")
    await _create_permission(client, admin["headers"], "users", "read")

    response = await client.get(f"/api/permissions/{read['id']}", headers=admin["headers"])
    assert response.json()["data"]["resource"] == "documents"

    response = await client.get("/api/permissions/grouped", headers=admin["headers"])
    grouped = response.json()["data"]
    assert sorted(grouped) == ["documents", "users"]
    assert len(grouped["documents"]) == 2


@pytest.mark.asyncio
async def test_duplicate_permission_conflicts(client, admin):
    await _create_permission(client, admin["headers"], "teams", "update")
    response = await client.post(
        "/api/permissions", json={"resource": "teams", "action": "update"}, headers=admin["headers"]
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_permission_segments_cannot_contain_separator(client, admin):
    response = await client.post(
        "/api/permissions", json={"resource": "teams:x", "action": "update"}, headers=admin["headers"]
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_role_lifecycle(client, admin):
    permission = await _create_permission(client, admin["headers"], "documents", "read")

    response = await client.post(
        "/api/roles", json={"name": "viewer", "label": "Viewer"}, headers=admin["headers"]
    )
    assert response.status_code == 201
    role = response.json()["data"]
    assert role["userCount"] == 0
    assert role["permissions"] == []

    response = await client.post(
        f"/api/roles/{role['id']}/permissions",
        json={"permissionIds": [permission["id"]]},
        headers=admin["headers"],
    )
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]["permissions"]] == [permission["id"]]

    response = await client.patch(
        f"/api/roles/{role['id']}", json={"label": "Read only"}, headers=admin["headers"]
    )
    assert response.json()["data"]["label"] == "Read only"
    assert response.json()["data"]["name"] == "viewer"

    response = await client.delete(f"/api/roles/{role['id']}", headers=admin["headers"])
    assert response.status_code == 200

    response = await client.get(f"/api/roles/{role['id']}", headers=admin["headers"])
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_role_name_conflicts(client, admin):
    # The admin fixture already created "admin"
    response = await client.post("/api/roles", json={"name": "admin"}, headers=admin["headers"])
    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Role name already exists"


@pytest.mark.asyncio
async def test_role_with_users_cannot_be_deleted(client, admin):
    response = await client.get("/api/roles", headers=admin["headers"])
    admin_role = next(role for role in response.json()["data"] if role["name"] == "admin")
    assert admin_role["userCount"] == 1

    response = await client.delete(f"/api/roles/{admin_role['id']}", headers=admin["headers"])
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ROLE_IN_USE"


@pytest.mark.asyncio
async def test_unknown_permission_ids_are_rejected(client, admin):
    response = await client.post("/api/roles", json={"name": "editor"}, headers=admin["headers"])
    role_id = response.json()["data"]["id"]

    response = await client.post(
        f"/api/roles/{role_id}/permissions", json={"permissionIds": ["nope"]}, headers=admin["headers"]
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"permissionIds": ["nope"]}


@pytest.mark.asyncio
async def test_role_changes_require_admin(client, register_user, bearer):
    alice = await register_user()
    headers = bearer(alice["token"])

    assert (await client.get("/api/roles", headers=headers)).status_code == 200
    assert (await client.post("/api/roles", json={"name": "x"}, headers=headers)).status_code == 403
    assert (
        await client.post("/api/permissions", json={"resource": "a", "action": "b"}, headers=headers)
    ).status_code == 403


@pytest.mark.asyncio
async def test_deleting_permission_removes_it_from_roles(client, admin, register_user, grant_role, bearer):
    alice = await register_user()
    await grant_role(alice["user"]["id"], "exporter", permissions=["reports:export"])

    response = await client.get("/api/permissions", headers=admin["headers"])
    permission = next(p for p in response.json()["data"] if p["resource"] == "reports")

    response = await client.delete(f"/api/permissions/{permission['id']}", headers=admin["headers"])
    assert response.status_code == 200

    response = await client.get("/api/auth/me", headers=bearer(alice["token"]))
    assert response.json()["data"]["permissions"] == []
