"""
Manager controller - coordinates service calls.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.controllers.base_controller import BaseController
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.manager import TeamTimesheetDetailResponse, TeamTimesheetResponse
from timesheet_api.services.manager_service import ManagerService


class ManagerController(BaseController):
    """Controller for manager operations."""

    def __init__(self, session: AsyncSession):
        self.manager_service = ManagerService(session)

    async def list_team_timesheets(
        self,
        manager_id: int,
        status: Optional[str],
        page: int,
        page_size: int,
    ) -> ServiceResult[PagedResult[TeamTimesheetResponse]]:
        return await self.manager_service.list_team_timesheets(
            manager_id, status=status, page=page, page_size=page_size
        )

    async def list_pending_timesheets(self, manager_id: int) -> ServiceResult[List[TeamTimesheetResponse]]:
        return await self.manager_service.list_pending_timesheets(manager_id)

    async def get_timesheet_detail(
        self,
        weekly_log_id: int,
        manager_id: int,
    ) -> ServiceResult[TeamTimesheetDetailResponse]:
        return await self.manager_service.get_timesheet_detail(weekly_log_id, manager_id)

    async def approve_timesheet(
        self,
        weekly_log_id: int,
        manager_id: int,
        comment: Optional[str],
    ) -> ServiceResult[TeamTimesheetResponse]:
        return await self.manager_service.approve_timesheet(weekly_log_id, manager_id, comment)

    async def deny_timesheet(
        self,
        weekly_log_id: int,
        manager_id: int,
        reason: Optional[str],
    ) -> ServiceResult[TeamTimesheetResponse]:
        return await self.manager_service.deny_timesheet(weekly_log_id, manager_id, reason)
