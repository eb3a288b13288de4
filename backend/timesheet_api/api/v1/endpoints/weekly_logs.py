"""
Weekly log API endpoints.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.api.v1.middleware import ensure_success, require_authentication
from timesheet_api.controllers.weekly_log_controller import WeeklyLogController
from timesheet_api.core.config import settings
from timesheet_api.db.session import get_db
from timesheet_api.models.user import User
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.weekly_log import (
    TimesheetStatusHistoryResponse,
    WeeklyLogDetailResponse,
    WeeklyLogRequest,
    WeeklyLogResponse,
)

router = APIRouter()


def _check_date_filter(start_date: Optional[date], end_date: Optional[date]) -> None:
    errors = []
    if start_date and end_date:
        if start_date > end_date:
            errors.append("Start date must be before or equal to end date.")
        elif (end_date - start_date).days > settings.MAX_QUERY_RANGE_DAYS:
            errors.append("Date range cannot exceed 1 year.")
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "message": "Validation failed", "errors": errors},
        )


@router.get("", response_model=ServiceResult[PagedResult[WeeklyLogResponse]])
async def list_weekly_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """List the current user's weekly logs, newest first."""
    _check_date_filter(start_date, end_date)
    controller = WeeklyLogController(db)
    result = await controller.list_weekly_logs(
        current_user.id, page=page, page_size=page_size, start_date=start_date, end_date=end_date
    )
    return ensure_success(result)


@router.get("/{weekly_log_id}", response_model=ServiceResult[WeeklyLogDetailResponse])
async def get_weekly_log(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Get a weekly log with its daily logs."""
    controller = WeeklyLogController(db)
    return ensure_success(await controller.get_weekly_log(weekly_log_id, current_user.id))


@router.post("", response_model=ServiceResult[WeeklyLogResponse], status_code=status.HTTP_201_CREATED)
async def create_weekly_log(
    request: WeeklyLogRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Create a Draft weekly log covering seven days."""
    controller = WeeklyLogController(db)
    return ensure_success(await controller.create_weekly_log(current_user.id, request))


@router.put("/{weekly_log_id}", response_model=ServiceResult[WeeklyLogResponse])
async def update_weekly_log(
    weekly_log_id: int,
    request: WeeklyLogRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Change the date range of a Draft weekly log."""
    controller = WeeklyLogController(db)
    return ensure_success(await controller.update_weekly_log(weekly_log_id, current_user.id, request))


@router.delete("/{weekly_log_id}", response_model=ServiceResult[None])
async def delete_weekly_log(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Soft-delete a Draft weekly log and its daily logs."""
    controller = WeeklyLogController(db)
    return ensure_success(await controller.delete_weekly_log(weekly_log_id, current_user.id))


@router.post("/{weekly_log_id}/submit", response_model=ServiceResult[WeeklyLogResponse])
async def submit_weekly_log(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    """Submit a Draft weekly log for approval."""
    controller = WeeklyLogController(db)
    return ensure_success(await controller.submit_weekly_log(weekly_log_id, current_user.id))


@router.get("/{weekly_log_id}/history", response_model=ServiceResult[List[TimesheetStatusHistoryResponse]])
async def get_status_history(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_authentication),
):
    controller = WeeklyLogController(db)
    return ensure_success(await controller.get_status_history(weekly_log_id, current_user.id))
