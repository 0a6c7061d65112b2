import pytest


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": {"code": "NOT_FOUND", "message": "Route not found"}}


@pytest.mark.asyncio
async def test_wrong_method_uses_error_envelope(client):
    response = await client.get("/api/auth/login")
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_malformed_json_is_validation_error(client):
    response = await client.post(
        "/api/auth/login", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_missing_field_reports_path(client):
    response = await client.post("/api/auth/login", json={"email": "alice@example.com"})
    assert response.status_code == 400
    errors = response.json()["error"]["details"]["errors"]
    assert [item["path"] for item in errors] == ["password"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["x-request-id"] == "req-123"
    assert "x-process-time" in response.headers


@pytest.mark.asyncio
async def test_unexpected_failure_is_hidden(app, client):
    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    response = await client.get("/api/boom")
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"},
    }
    assert "hunter2" not in response.text
