"""
Weekly log controller - coordinates service calls.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.controllers.base_controller import BaseController
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.weekly_log import (
    TimesheetStatusHistoryResponse,
    WeeklyLogDetailResponse,
    WeeklyLogRequest,
    WeeklyLogResponse,
)
from timesheet_api.services.weekly_log_service import WeeklyLogService


class WeeklyLogController(BaseController):
    """Controller for weekly log operations."""

    def __init__(self, session: AsyncSession):
        self.weekly_log_service = WeeklyLogService(session)

    async def list_weekly_logs(
        self,
        user_id: int,
        page: int,
        page_size: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ServiceResult[PagedResult[WeeklyLogResponse]]:
        return await self.weekly_log_service.list_weekly_logs(
            user_id, page=page, page_size=page_size, start_date=start_date, end_date=end_date
        )

    async def get_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[WeeklyLogDetailResponse]:
        return await self.weekly_log_service.get_weekly_log(weekly_log_id, user_id)

    async def create_weekly_log(self, user_id: int, request: WeeklyLogRequest) -> ServiceResult[WeeklyLogResponse]:
        return await self.weekly_log_service.create_weekly_log(user_id, request)

    async def update_weekly_log(
        self,
        weekly_log_id: int,
        user_id: int,
        request: WeeklyLogRequest,
    ) -> ServiceResult[WeeklyLogResponse]:
        return await self.weekly_log_service.update_weekly_log(weekly_log_id, user_id, request)

    async def delete_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[None]:
        return await self.weekly_log_service.delete_weekly_log(weekly_log_id, user_id)

    async def submit_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[WeeklyLogResponse]:
        return await self.weekly_log_service.submit_weekly_log(weekly_log_id, user_id)

    async def get_status_history(
        self,
        weekly_log_id: int,
        user_id: int,
    ) -> ServiceResult[List[TimesheetStatusHistoryResponse]]:
        return await self.weekly_log_service.get_status_history(weekly_log_id, user_id)
