"""
Health endpoint tests using pytest-asyncio and httpx.AsyncClient.
"""

import pytest
from dependency_injector import providers

from timesheet_api.deps.di_container import Container, get_container
from timesheet_api.services.health_service import HealthService


@pytest.mark.asyncio
async def test_health_endpoint(test_client, test_session_maker):
    """Test the health check endpoint returns expected structure."""
    container = get_container()
    with container.health_service.override(providers.Object(HealthService(lambda: test_session_maker))):
        response = await test_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "ok"
    assert data["checks"] == {"database": "ok"}
    assert data["uptime"].startswith("PT")


def test_container_holds_health_providers_only():
    assert set(Container.providers) == {"health_service", "health_controller"}
