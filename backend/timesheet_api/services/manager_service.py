"""
Manager service: team timesheet views and the approve/deny actions.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.exceptions import NotFoundOrForbiddenError, TimesheetError
from timesheet_api.db.repositories.daily_log_repository import DailyLogRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.user import User
from timesheet_api.models.weekly_log import TimesheetStatus, WeeklyLog
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.daily_log import DailyLogResponse
from timesheet_api.schemas.manager import TeamTimesheetDetailResponse, TeamTimesheetResponse
from timesheet_api.services.approval_service import NOT_FOUND_DETAIL, ApprovalStateMachine
from timesheet_api.services.base_service import BaseService

logger = logging.getLogger(__name__)

ALL_STATUSES = "All"


def parse_status_filter(value: Optional[str]) -> Optional[TimesheetStatus]:
    """
    Map a status query value to a filter. ``None``, "All" and unknown values
    mean no filter; matching is case-insensitive.
    """
    if not value or value.lower() == ALL_STATUSES.lower():
        return None
    for status in TimesheetStatus:
        if status.value.lower() == value.lower():
            return status
    logger.debug("Ignoring unknown status filter", extra={"status": value})
    return None


def to_team_response(weekly_log: WeeklyLog, user: User) -> TeamTimesheetResponse:
    return TeamTimesheetResponse(
        id=weekly_log.id,
        user_id=weekly_log.user_id,
        user_full_name=user.full_name,
        user_email=user.email,
        date_from=weekly_log.date_from,
        date_to=weekly_log.date_to,
        total_hours=weekly_log.total_hours,
        total_charges=weekly_log.total_charges,
        status=weekly_log.status,
        manager_comment=weekly_log.manager_comment,
        submitted_at=weekly_log.created_at,
        updated_at=weekly_log.updated_at,
    )


class ManagerService(BaseService):
    """Service for manager operations on direct reports' timesheets."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.weekly_log_repo = WeeklyLogRepository(session)
        self.daily_log_repo = DailyLogRepository(session)
        self.state_machine = ApprovalStateMachine(session)

    async def list_team_timesheets(
        self,
        manager_id: int,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> ServiceResult[PagedResult[TeamTimesheetResponse]]:
        """List the direct reports' weekly logs, most recently updated first."""
        rows, total = await self.weekly_log_repo.list_for_manager(
            manager_id,
            status=parse_status_filter(status),
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        paged = PagedResult[TeamTimesheetResponse].build(
            [to_team_response(weekly_log, user) for weekly_log, user in rows],
            total_count=total,
            page=page,
            page_size=page_size,
        )
        return ServiceResult.ok(paged, "Team timesheets retrieved successfully!")

    async def list_pending_timesheets(self, manager_id: int) -> ServiceResult[List[TeamTimesheetResponse]]:
        """Pending weekly logs waiting on this manager, oldest first."""
        rows = await self.weekly_log_repo.list_pending_for_manager(manager_id)
        return ServiceResult.ok(
            [to_team_response(weekly_log, user) for weekly_log, user in rows],
            f"{len(rows)} pending timesheet(s) retrieved successfully!",
        )

    async def get_timesheet_detail(
        self,
        weekly_log_id: int,
        manager_id: int,
    ) -> ServiceResult[TeamTimesheetDetailResponse]:
        row = await self.weekly_log_repo.get_for_manager(weekly_log_id, manager_id)
        if row is None:
            return ServiceResult.fail(NotFoundOrForbiddenError(NOT_FOUND_DETAIL))
        weekly_log, user = row
        daily_logs = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
        detail = TeamTimesheetDetailResponse(
            **to_team_response(weekly_log, user).model_dump(),
            daily_logs=[DailyLogResponse.model_validate(d) for d in daily_logs],
        )
        return ServiceResult.ok(detail, "Timesheet retrieved successfully!")

    async def approve_timesheet(
        self,
        weekly_log_id: int,
        manager_id: int,
        comment: Optional[str] = None,
    ) -> ServiceResult[TeamTimesheetResponse]:
        try:
            await self.state_machine.approve(weekly_log_id, manager_id, comment)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        return await self._result_for(weekly_log_id, manager_id, "Timesheet approved successfully!")

    async def deny_timesheet(
        self,
        weekly_log_id: int,
        manager_id: int,
        reason: Optional[str],
    ) -> ServiceResult[TeamTimesheetResponse]:
        try:
            await self.state_machine.deny(weekly_log_id, manager_id, reason)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        return await self._result_for(weekly_log_id, manager_id, "Timesheet denied successfully!")

    async def _result_for(
        self,
        weekly_log_id: int,
        manager_id: int,
        message: str,
    ) -> ServiceResult[TeamTimesheetResponse]:
        weekly_log, user = await self.weekly_log_repo.get_for_manager(weekly_log_id, manager_id)
        return ServiceResult.ok(to_team_response(weekly_log, user), message)
