import pytest

from halolight.database.models import Notification


async def _seed(session_factory, user_id, count, read=False):
    async with session_factory() as session:
        for i in range(count):
            session.add(Notification(user_id=user_id, title=f"Notice {i}", content="", read=read))
        await session.commit()


@pytest.mark.asyncio
async def test_list_and_unread_count(client, register_user, bearer, session_factory):
    alice = await register_user()
    await _seed(session_factory, alice["user"]["id"], 3)
    await _seed(session_factory, alice["user"]["id"], 2, read=True)
    headers = bearer(alice["token"])

    response = await client.get("/api/notifications?pageSize=2", headers=headers)
    body = response.json()
    assert len(body["data"]) == 2
    assert body["meta"] == {"page": 1, "pageSize": 2, "total": 5, "totalPages": 3, "unreadCount": 3}

    response = await client.get("/api/notifications?unreadOnly=true", headers=headers)
    assert response.json()["meta"]["total"] == 3
    assert all(n["read"] is False for n in response.json()["data"])

    response = await client.get("/api/notifications/unread-count", headers=headers)
    assert response.json()["data"] == {"unreadCount": 3}


@pytest.mark.asyncio
async def test_mark_read_and_read_all(client, register_user, bearer, session_factory):
    alice = await register_user()
    await _seed(session_factory, alice["user"]["id"], 3)
    headers = bearer(alice["token"])

    notifications = (await client.get("/api/notifications", headers=headers)).json()["data"]
    response = await client.put(f"/api/notifications/{notifications[0]['id']}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["read"] is True
    assert response.json()["data"]["readAt"] is not None

    response = await client.put("/api/notifications/read-all", headers=headers)
    assert response.json()["data"] == {"count": 2}

    response = await client.get("/api/notifications/unread-count", headers=headers)
    assert response.json()["data"]["unreadCount"] == 0


@pytest.mark.asyncio
async def test_other_users_notifications_are_forbidden(client, register_user, bearer, session_factory):
    alice = await register_user()
    bob = await register_user(email="bob@example.com", username="bob")
    await _seed(session_factory, alice["user"]["id"], 1)

    notification = (await client.get("/api/notifications", headers=bearer(alice["token"]))).json()["data"][0]

    response = await client.put(f"/api/notifications/{notification['id']}/read", headers=bearer(bob["token"]))
    assert response.status_code == 403
    response = await client.delete(f"/api/notifications/{notification['id']}", headers=bearer(bob["token"]))
    assert response.status_code == 403

    response = await client.delete("/api/notifications/missing", headers=bearer(bob["token"]))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_notification(client, register_user, bearer, session_factory):
    alice = await register_user()
    await _seed(session_factory, alice["user"]["id"], 1)
    headers = bearer(alice["token"])

    notification = (await client.get("/api/notifications", headers=headers)).json()["data"][0]
    response = await client.delete(f"/api/notifications/{notification['id']}", headers=headers)
    assert response.status_code == 200
    assert (await client.get("/api/notifications", headers=headers)).json()["meta"]["total"] == 0


@pytest.mark.asyncio
async def test_admin_sends_notification(client, register_user, admin, bearer):
    alice = await register_user()

    response = await client.post(
        "/api/notifications",
        json={"userId": alice["user"]["id"], "title": "Welcome", "payload": {"source": "onboarding"}},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    assert response.json()["data"]["payload"] == {"source": "onboarding"}

    response = await client.get("/api/notifications", headers=bearer(alice["token"]))
    assert [n["title"] for n in response.json()["data"]] == ["Welcome"]

    response = await client.post(
        "/api/notifications", json={"userId": alice["user"]["id"], "title": "Hi"}, headers=bearer(alice["token"])
    )
    assert response.status_code == 403
