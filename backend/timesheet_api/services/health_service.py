"""
Health service.
Reports uptime and database reachability.
"""

import time
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timesheet_api.db.repositories.health_repository import HealthRepository
from timesheet_api.db.session import get_session_maker
from timesheet_api.schemas.health import HealthResponse
from timesheet_api.services.base_service import BaseService


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self, session_maker_factory: Optional[Callable[[], async_sessionmaker[AsyncSession]]] = None):
        self.start_time = time.time()
        self.session_maker_factory = session_maker_factory or get_session_maker

    async def get_health(self) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, uptime (ISO 8601 duration) and checks
        """
        uptime_seconds = int(time.time() - self.start_time)

        checks = {}
        session_maker = self.session_maker_factory()
        async with session_maker() as session:
            db_ok = await HealthRepository(session).check_database()
        checks["database"] = "ok" if db_ok else "error"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"
        return HealthResponse(status=status, uptime=f"PT{uptime_seconds}S", checks=checks)
