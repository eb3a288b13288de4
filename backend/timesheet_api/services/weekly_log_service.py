"""
Weekly log service with business logic.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.exceptions import (
    NotFoundOrForbiddenError,
    OutOfRangeError,
    PeriodLockedError,
    TimesheetError,
)
from timesheet_api.db.repositories.daily_log_repository import DailyLogRepository
from timesheet_api.db.repositories.timesheet_status_history_repository import TimesheetStatusHistoryRepository
from timesheet_api.db.repositories.user_repository import UserRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.weekly_log import DailyLog, TimesheetStatus, WeeklyLog
from timesheet_api.schemas.common import PagedResult, ServiceResult
from timesheet_api.schemas.daily_log import DailyLogResponse
from timesheet_api.schemas.weekly_log import (
    TimesheetStatusHistoryResponse,
    WeeklyLogDetailResponse,
    WeeklyLogRequest,
    WeeklyLogResponse,
)
from timesheet_api.services.approval_service import ApprovalStateMachine
from timesheet_api.services.base_service import BaseService
from timesheet_api.utils.clock import utcnow
from timesheet_api.validators import validate_new_period, validate_updated_period

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "The requested weeklylog does not exist or you don't have permission to access it"


def ensure_draft(weekly_log: WeeklyLog) -> None:
    """Weekly logs and their daily logs are only editable while Draft."""
    if weekly_log.status != TimesheetStatus.DRAFT:
        raise PeriodLockedError(
            f"Only timesheets with Draft status can be edited. Current status: {weekly_log.status.value}"
        )


def to_detail_response(weekly_log: WeeklyLog, daily_logs: List[DailyLog]) -> WeeklyLogDetailResponse:
    """Build the detail view without touching lazy relationships."""
    return WeeklyLogDetailResponse(
        **WeeklyLogResponse.model_validate(weekly_log).model_dump(),
        daily_logs=[DailyLogResponse.model_validate(d) for d in daily_logs],
    )


class WeeklyLogService(BaseService):
    """Service for weekly log operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.weekly_log_repo = WeeklyLogRepository(session)
        self.daily_log_repo = DailyLogRepository(session)
        self.user_repo = UserRepository(session)
        self.status_history_repo = TimesheetStatusHistoryRepository(session)
        self.state_machine = ApprovalStateMachine(session)

    async def _get_owned(self, weekly_log_id: int, user_id: int, for_update: bool = False) -> WeeklyLog:
        if for_update:
            weekly_log = await self.weekly_log_repo.get_owned_for_update(weekly_log_id, user_id)
        else:
            weekly_log = await self.weekly_log_repo.get_owned(weekly_log_id, user_id)
        if weekly_log is None:
            raise NotFoundOrForbiddenError(NOT_FOUND_DETAIL, message="Weeklylog not found")
        return weekly_log

    async def list_weekly_logs(
        self,
        user_id: int,
        page: int = 1,
        page_size: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ServiceResult[PagedResult[WeeklyLogResponse]]:
        """List the user's weekly logs, newest first."""
        logger.info(
            "Retrieving weeklylogs",
            extra={"user_id": user_id, "page": page, "page_size": page_size},
        )
        weekly_logs, total = await self.weekly_log_repo.list_by_user(
            user_id,
            start_date=start_date,
            end_date=end_date,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        paged = PagedResult[WeeklyLogResponse].build(
            [WeeklyLogResponse.model_validate(w) for w in weekly_logs],
            total_count=total,
            page=page,
            page_size=page_size,
        )
        return ServiceResult.ok(paged, "WeeklyLogs retrieved successfully!")

    async def get_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[WeeklyLogDetailResponse]:
        """Get one of the user's weekly logs with its daily logs."""
        try:
            weekly_log = await self._get_owned(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        daily_logs = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
        return ServiceResult.ok(
            to_detail_response(weekly_log, daily_logs),
            "Weeklylog retrieved successfully!",
        )

    async def create_weekly_log(
        self,
        user_id: int,
        request: WeeklyLogRequest,
    ) -> ServiceResult[WeeklyLogResponse]:
        """Create a Draft weekly log after range and overlap checks."""
        await self.user_repo.lock(user_id)
        existing = await self.weekly_log_repo.list_overlapping(user_id, request.date_from, request.date_to)
        try:
            validate_new_period(user_id, request.date_from, request.date_to, existing)
        except TimesheetError as e:
            logger.info(
                "Weeklylog rejected",
                extra={"user_id": user_id, "error_code": e.code, "detail": e.detail},
            )
            return ServiceResult.fail(e)

        now = utcnow()
        weekly_log = await self.weekly_log_repo.create(
            user_id=user_id,
            date_from=request.date_from,
            date_to=request.date_to,
            status=TimesheetStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )
        await self.status_history_repo.create(
            weekly_log_id=weekly_log.id,
            from_status=None,
            to_status=TimesheetStatus.DRAFT,
            changed_by_user_id=user_id,
        )
        logger.info("Weeklylog created", extra={"weekly_log_id": weekly_log.id, "user_id": user_id})
        return ServiceResult.ok(WeeklyLogResponse.model_validate(weekly_log), "Weeklylog created successfully!")

    async def update_weekly_log(
        self,
        weekly_log_id: int,
        user_id: int,
        request: WeeklyLogRequest,
    ) -> ServiceResult[WeeklyLogResponse]:
        """Move a Draft weekly log to a new seven-day range."""
        try:
            weekly_log = await self._get_owned(weekly_log_id, user_id, for_update=True)
            ensure_draft(weekly_log)
            await self.user_repo.lock(user_id)
            existing = await self.weekly_log_repo.list_overlapping(
                user_id, request.date_from, request.date_to, exclude_id=weekly_log.id
            )
            validate_updated_period(weekly_log.id, user_id, request.date_from, request.date_to, existing)
            for daily_log in await self.daily_log_repo.list_by_weekly_log(weekly_log.id):
                if not request.date_from <= daily_log.date <= request.date_to:
                    raise OutOfRangeError(
                        f"Daily log for {daily_log.date} would fall outside "
                        f"{request.date_from} to {request.date_to}"
                    )
        except TimesheetError as e:
            return ServiceResult.fail(e)

        weekly_log.date_from = request.date_from
        weekly_log.date_to = request.date_to
        weekly_log.updated_at = utcnow()
        await self.weekly_log_repo.save(weekly_log)
        logger.info("Weeklylog updated", extra={"weekly_log_id": weekly_log.id, "user_id": user_id})
        return ServiceResult.ok(WeeklyLogResponse.model_validate(weekly_log), "Weeklylog updated successfully!")

    async def delete_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[None]:
        """
        Soft-delete a Draft weekly log and then all of its daily logs.
        Both steps run in the request transaction.
        """
        try:
            weekly_log = await self._get_owned(weekly_log_id, user_id, for_update=True)
            ensure_draft(weekly_log)
        except TimesheetError as e:
            return ServiceResult.fail(e)

        now = utcnow()
        weekly_log.is_deleted = True
        weekly_log.updated_at = now
        await self.weekly_log_repo.save(weekly_log)
        removed = await self.daily_log_repo.soft_delete_by_weekly_log(weekly_log.id)

        logger.info(
            "Weeklylog deleted",
            extra={"weekly_log_id": weekly_log.id, "user_id": user_id, "daily_logs_removed": removed},
        )
        return ServiceResult.ok(message="Weeklylog deleted successfully!")

    async def submit_weekly_log(self, weekly_log_id: int, user_id: int) -> ServiceResult[WeeklyLogResponse]:
        """Owner submits a Draft weekly log for approval."""
        try:
            weekly_log = await self.state_machine.submit(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        return ServiceResult.ok(WeeklyLogResponse.model_validate(weekly_log), "Weeklylog submitted successfully!")

    async def get_status_history(
        self,
        weekly_log_id: int,
        user_id: int,
    ) -> ServiceResult[List[TimesheetStatusHistoryResponse]]:
        try:
            weekly_log = await self._get_owned(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        history = await self.status_history_repo.list_by_weekly_log(weekly_log.id)
        return ServiceResult.ok(
            [TimesheetStatusHistoryResponse.model_validate(h) for h in history],
            "Status history retrieved successfully!",
        )
