"""
Daily log controller - coordinates service calls.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.controllers.base_controller import BaseController
from timesheet_api.schemas.common import ServiceResult
from timesheet_api.schemas.daily_log import DailyLogRequest, DailyLogResponse, UpdateDailyLogsRequest
from timesheet_api.services.daily_log_service import DailyLogService


class DailyLogController(BaseController):
    """Controller for daily log operations."""

    def __init__(self, session: AsyncSession):
        self.daily_log_service = DailyLogService(session)

    async def list_daily_logs(self, weekly_log_id: int, user_id: int) -> ServiceResult[List[DailyLogResponse]]:
        return await self.daily_log_service.list_daily_logs(weekly_log_id, user_id)

    async def get_daily_log(
        self,
        daily_log_id: int,
        weekly_log_id: int,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        return await self.daily_log_service.get_daily_log(daily_log_id, weekly_log_id, user_id)

    async def create_daily_log(
        self,
        weekly_log_id: int,
        request: DailyLogRequest,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        return await self.daily_log_service.create_daily_log(weekly_log_id, request, user_id)

    async def create_daily_logs_batch(
        self,
        weekly_log_id: int,
        requests: List[DailyLogRequest],
        user_id: int,
    ) -> ServiceResult[List[DailyLogResponse]]:
        return await self.daily_log_service.create_daily_logs_batch(weekly_log_id, requests, user_id)

    async def update_daily_log(
        self,
        daily_log_id: int,
        weekly_log_id: int,
        request: DailyLogRequest,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        return await self.daily_log_service.update_daily_log(daily_log_id, weekly_log_id, request, user_id)

    async def delete_daily_log(self, daily_log_id: int, weekly_log_id: int, user_id: int) -> ServiceResult[None]:
        return await self.daily_log_service.delete_daily_log(daily_log_id, weekly_log_id, user_id)

    async def replace_daily_logs(
        self,
        weekly_log_id: int,
        request: UpdateDailyLogsRequest,
        user_id: int,
    ) -> ServiceResult[List[DailyLogResponse]]:
        return await self.daily_log_service.replace_daily_logs(weekly_log_id, request, user_id)
