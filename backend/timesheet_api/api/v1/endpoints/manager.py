"""
Manager API endpoints: team timesheets and approvals.
All routes require the Manager or Admin role.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.api.v1.middleware import ensure_success, require_manager
from timesheet_api.controllers.manager_controller import ManagerController
from timesheet_api.core.config import settings
from timesheet_api.db.session import get_db
from timesheet_api.models.user import User
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.manager import (
    ApproveTimesheetRequest,
    DenyTimesheetRequest,
    TeamTimesheetDetailResponse,
    TeamTimesheetResponse,
)

router = APIRouter()


@router.get("/timesheets", response_model=ServiceResult[PagedResult[TeamTimesheetResponse]])
async def list_team_timesheets(
    status: Optional[str] = Query(None, description="Draft, Pending, Approved, Denied or All"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """List the weekly logs of the current manager's direct reports."""
    controller = ManagerController(db)
    result = await controller.list_team_timesheets(current_user.id, status=status, page=page, page_size=page_size)
    return ensure_success(result)


@router.get("/timesheets/pending", response_model=ServiceResult[List[TeamTimesheetResponse]])
async def list_pending_timesheets(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """Pending weekly logs awaiting the current manager, oldest first."""
    controller = ManagerController(db)
    return ensure_success(await controller.list_pending_timesheets(current_user.id))


@router.get("/timesheets/{weekly_log_id}", response_model=ServiceResult[TeamTimesheetDetailResponse])
async def get_timesheet_detail(
    weekly_log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    controller = ManagerController(db)
    return ensure_success(await controller.get_timesheet_detail(weekly_log_id, current_user.id))


@router.post("/timesheets/{weekly_log_id}/approve", response_model=ServiceResult[TeamTimesheetResponse])
async def approve_timesheet(
    weekly_log_id: int,
    request: Optional[ApproveTimesheetRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """Approve a Pending weekly log."""
    controller = ManagerController(db)
    comment = request.comment if request else None
    return ensure_success(await controller.approve_timesheet(weekly_log_id, current_user.id, comment))


@router.post("/timesheets/{weekly_log_id}/deny", response_model=ServiceResult[TeamTimesheetResponse])
async def deny_timesheet(
    weekly_log_id: int,
    request: DenyTimesheetRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """Deny a Pending weekly log; a reason is required."""
    controller = ManagerController(db)
    return ensure_success(await controller.deny_timesheet(weekly_log_id, current_user.id, request.reason))
