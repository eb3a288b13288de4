"""
API v1 router that aggregates all endpoint routers.
All routes require an authenticated user except health.
"""

from fastapi import APIRouter, Depends

from timesheet_api.api.v1.endpoints import daily_logs, health, manager, weekly_logs
from timesheet_api.api.v1.middleware import require_authentication, require_manager

api_router = APIRouter()

# Public routes
api_router.include_router(health.router, tags=["health"])

# Protected routes, authentication enforced at router level
api_router.include_router(
    weekly_logs.router,
    prefix="/weekly-logs",
    tags=["weekly-logs"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    daily_logs.router,
    prefix="/weekly-logs/{weekly_log_id}/daily-logs",
    tags=["daily-logs"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    manager.router,
    prefix="/manager",
    tags=["manager"],
    dependencies=[Depends(require_manager)],
)
