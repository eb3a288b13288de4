"""
Daily log API endpoints, nested under their weekly log.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.api.v1.middleware import ensure_success, require_authentication
from timesheet_api.controllers.daily_log_controller import DailyLogController
from timesheet_api.db.session import get_db
from timesheet_api.models.user import User
from timesheet_api.schemas.common import ServiceResult
from timesheet_api.schemas.daily_log import DailyLogRequest, DailyLogResponse, UpdateDailyLogsRequest

router = APIRouter()


@router.get("", response_model=ServiceResult[List[DailyLogResponse]])
async def list_daily_logs(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """List the daily logs of a weekly log, ordered by date."""
    controller = DailyLogController(db)
    return ensure_success(await controller.list_daily_logs(weekly_log_id, current_user.id))


@router.get("/{daily_log_id}", response_model=ServiceResult[DailyLogResponse])
async def get_daily_log(
    weekly_log_id: int,
    daily_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    controller = DailyLogController(db)
    return ensure_success(await controller.get_daily_log(daily_log_id, weekly_log_id, current_user.id))


@router.post("", response_model=ServiceResult[DailyLogResponse], status_code=status.HTTP_201_CREATED)
async def create_daily_log(
    weekly_log_id: int,
    request: DailyLogRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Create a daily log in a Draft weekly log."""
    controller = DailyLogController(db)
    return ensure_success(await controller.create_daily_log(weekly_log_id, request, current_user.id))


@router.post(
    "/batch",
    response_model=ServiceResult[List[DailyLogResponse]],
    status_code=status.HTTP_201_CREATED,
)
async def create_daily_logs_batch(
    weekly_log_id: int,
    requests: List[DailyLogRequest],
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Create several daily logs at once; either all are created or none."""
    controller = DailyLogController(db)
    return ensure_success(await controller.create_daily_logs_batch(weekly_log_id, requests, current_user.id))


@router.put("", response_model=ServiceResult[List[DailyLogResponse]])
async def replace_daily_logs(
    weekly_log_id: int,
    request: UpdateDailyLogsRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """
    Replace the daily logs of a weekly log.
    Items with an id are updated, items without are created and the rest are removed.
    """
    controller = DailyLogController(db)
    return ensure_success(await controller.replace_daily_logs(weekly_log_id, request, current_user.id))


@router.put("/{daily_log_id}", response_model=ServiceResult[DailyLogResponse])
async def update_daily_log(
    weekly_log_id: int,
    daily_log_id: int,
    request: DailyLogRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    controller = DailyLogController(db)
    return ensure_success(
        await controller.update_daily_log(daily_log_id, weekly_log_id, request, current_user.id)
    )


@router.delete("/{daily_log_id}", response_model=ServiceResult[None])
async def delete_daily_log(
    weekly_log_id: int,
    daily_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    controller = DailyLogController(db)
    return ensure_success(await controller.delete_daily_log(daily_log_id, weekly_log_id, current_user.id))
