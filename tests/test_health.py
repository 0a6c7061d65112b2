import pytest

from halolight.config import get_settings
from halolight.dependencies import get_config


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert data["uptime"] >= 0


@pytest.mark.asyncio
async def test_detailed_health(client):
    response = await client.get("/api/health/detailed")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "healthy"
    assert data["environment"] == "testing"
    assert data["services"] == {"database": "healthy", "broker": "not_configured"}


@pytest.mark.asyncio
async def test_detailed_health_reports_unreachable_broker(app, client):
    settings = get_settings().model_copy(update={"CELERY_BROKER_URL": "redis://127.0.0.1:1/0"})
    app.dependency_overrides[get_config] = lambda: settings

    response = await client.get("/api/health/detailed")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["services"] == {"database": "healthy", "broker": "unhealthy"}
    assert data["status"] == "healthy"
