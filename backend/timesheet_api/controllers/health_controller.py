"""
Health controller.
"""

from typing import Optional

from timesheet_api.controllers.base_controller import BaseController
from timesheet_api.schemas.health import HealthResponse
from timesheet_api.services.health_service import HealthService


class HealthController(BaseController):
    """Controller for health check operations."""

    def __init__(self, health_service: Optional[HealthService] = None):
        self.health_service = health_service or HealthService()

    async def get_health(self) -> HealthResponse:
        return await self.health_service.get_health()
