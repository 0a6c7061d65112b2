import pytest


@pytest.mark.asyncio
async def test_stats_reflect_database(client, register_user, bearer):
    alice = await register_user()
    await register_user(email="bob@example.com", username="bob")
    headers = bearer(alice["token"])
    await client.post("/api/documents", json={"title": "Doc"}, headers=headers)
    await client.post("/api/teams", json={"name": "Team"}, headers=headers)

    response = await client.get("/api/dashboard/stats", headers=headers)
    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["users"] == {"total": 2, "active": 2, "newThisMonth": 2}
    assert stats["documents"] == {"total": 1, "createdThisWeek": 1}
    assert stats["teams"] == {"total": 1}
    assert stats["files"] == {"total": 0, "totalSize": 0}
    assert stats["notifications"] == {"unread": 0}


@pytest.mark.asyncio
async def test_trend_shapes(client, register_user, bearer):
    alice = await register_user()
    headers = bearer(alice["token"])

    visits = (await client.get("/api/dashboard/visits", headers=headers)).json()["data"]
    assert len(visits) == 7
    assert all(500 <= v["visits"] <= 1499 for v in visits)

    sales = (await client.get("/api/dashboard/sales", headers=headers)).json()["data"]
    assert len(sales) == 6
    assert all(10000 <= s["sales"] <= 59999 for s in sales)

    tasks = (await client.get("/api/dashboard/tasks", headers=headers)).json()["data"]
    assert len(tasks) == 15

    pie = (await client.get("/api/dashboard/pie", headers=headers)).json()["data"]
    assert pie and all({"name", "value", "color"} <= set(slice_) for slice_ in pie)


@pytest.mark.asyncio
async def test_recent_activities(client, register_user, bearer):
    alice = await register_user()
    headers = bearer(alice["token"])
    await client.post("/api/teams", json={"name": "Team"}, headers=headers)

    response = await client.get("/api/dashboard/activities?limit=1", headers=headers)
    activities = response.json()["data"]
    assert len(activities) == 1
    assert activities[0]["action"] == "create"
    assert activities[0]["targetType"] == "team"
    assert activities[0]["actor"] == {"id": alice["user"]["id"], "name": "alice"}


@pytest.mark.asyncio
async def test_overview(client, register_user, bearer):
    alice = await register_user()
    response = await client.get("/api/dashboard/overview", headers=bearer(alice["token"]))
    data = response.json()["data"]
    assert data["stats"]["users"]["total"] == 1
    assert data["system"]["uptime"] >= 0
    assert data["system"]["pythonVersion"]


@pytest.mark.asyncio
async def test_dashboard_requires_authentication(client):
    response = await client.get("/api/dashboard/visits")
    assert response.status_code == 401
