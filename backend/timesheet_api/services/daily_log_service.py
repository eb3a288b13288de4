"""
Daily log service with business logic.

Every mutation follows the same order: load the owner's weekly log, check it
is still Draft, validate, write, then call the aggregation service for that
weekly log. Multi-item operations validate every item before writing any.
"""

import logging
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.exceptions import (
    NotFoundOrForbiddenError,
    TimesheetError,
)
from timesheet_api.db.repositories.daily_log_repository import DailyLogRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.weekly_log import DailyLog, WeeklyLog
from timesheet_api.schemas.common import ServiceResult
from timesheet_api.schemas.daily_log import (
    DailyLogRequest,
    DailyLogResponse,
    UpdateDailyLogsRequest,
)
from timesheet_api.services.aggregation_service import AggregationService, RecalculationResult
from timesheet_api.services.base_service import BaseService
from timesheet_api.services.weekly_log_service import NOT_FOUND_DETAIL, ensure_draft
from timesheet_api.utils.clock import utcnow
from timesheet_api.validators import (
    validate_batch_dates,
    validate_batch_ids,
    validate_entry,
    validate_entry_fields,
)

logger = logging.getLogger(__name__)

DAILY_LOG_NOT_FOUND_DETAIL = "The requested dailylog does not exist or you don't have permission to access it"


def _validate_fields(request: DailyLogRequest) -> None:
    validate_entry_fields(
        hours=request.hours,
        mileage=request.mileage,
        toll_charge=request.toll_charge,
        parking_fee=request.parking_fee,
        other_charges=request.other_charges,
        comment=request.comment,
    )


def _field_values(request: DailyLogRequest) -> Dict:
    return {
        "date": request.date,
        "hours": request.hours,
        "mileage": request.mileage,
        "toll_charge": request.toll_charge,
        "parking_fee": request.parking_fee,
        "other_charges": request.other_charges,
        "comment": request.comment or "",
    }


class DailyLogService(BaseService):
    """Service for daily log operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.weekly_log_repo = WeeklyLogRepository(session)
        self.daily_log_repo = DailyLogRepository(session)
        self.aggregation_service = AggregationService(session)

    async def _get_weekly_log(self, weekly_log_id: int, user_id: int, for_update: bool = False) -> WeeklyLog:
        if for_update:
            weekly_log = await self.weekly_log_repo.get_owned_for_update(weekly_log_id, user_id)
        else:
            weekly_log = await self.weekly_log_repo.get_owned(weekly_log_id, user_id)
        if weekly_log is None:
            raise NotFoundOrForbiddenError(NOT_FOUND_DETAIL, message="Weeklylog not found")
        return weekly_log

    async def _get_editable_weekly_log(self, weekly_log_id: int, user_id: int) -> WeeklyLog:
        # Entry checks and writes run under the weekly log row lock
        weekly_log = await self._get_weekly_log(weekly_log_id, user_id, for_update=True)
        ensure_draft(weekly_log)
        return weekly_log

    async def _get_daily_log(self, daily_log_id: int, weekly_log_id: int, user_id: int) -> DailyLog:
        daily_log = await self.daily_log_repo.get_in_weekly_log(daily_log_id, weekly_log_id, user_id)
        if daily_log is None:
            raise NotFoundOrForbiddenError(DAILY_LOG_NOT_FOUND_DETAIL, message="Dailylog not found")
        return daily_log

    async def _recalculate(self, weekly_log_id: int) -> RecalculationResult:
        result = await self.aggregation_service.recalculate(weekly_log_id)
        if not result.found:
            # The daily log change stands; the inconsistency is surfaced in logs only.
            logger.error(
                "Daily log saved but weekly totals are stale",
                extra={"weekly_log_id": weekly_log_id, "error_code": result.error.code},
            )
        return result

    async def list_daily_logs(self, weekly_log_id: int, user_id: int) -> ServiceResult[List[DailyLogResponse]]:
        """List the daily logs of one of the user's weekly logs."""
        try:
            weekly_log = await self._get_weekly_log(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        daily_logs = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
        return ServiceResult.ok(
            [DailyLogResponse.model_validate(d) for d in daily_logs],
            "Dailylogs retrieved successfully!",
        )

    async def get_daily_log(
        self,
        daily_log_id: int,
        weekly_log_id: int,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        try:
            daily_log = await self._get_daily_log(daily_log_id, weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)
        return ServiceResult.ok(DailyLogResponse.model_validate(daily_log), "Dailylog retrieved successfully!")

    async def create_daily_log(
        self,
        weekly_log_id: int,
        request: DailyLogRequest,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        """Create one daily log and refresh the weekly totals."""
        logger.info("Creating dailylog", extra={"weekly_log_id": weekly_log_id, "user_id": user_id})
        try:
            weekly_log = await self._get_editable_weekly_log(weekly_log_id, user_id)
            _validate_fields(request)
            existing = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
            validate_entry(weekly_log.date_from, weekly_log.date_to, request.date, existing)
        except TimesheetError as e:
            return ServiceResult.fail(e)

        now = utcnow()
        daily_log = await self.daily_log_repo.create(
            user_id=user_id,
            weekly_log_id=weekly_log.id,
            created_at=now,
            updated_at=now,
            **_field_values(request),
        )
        await self._recalculate(weekly_log.id)
        return ServiceResult.ok(DailyLogResponse.model_validate(daily_log), "Dailylog created successfully!")

    async def create_daily_logs_batch(
        self,
        weekly_log_id: int,
        requests: List[DailyLogRequest],
        user_id: int,
    ) -> ServiceResult[List[DailyLogResponse]]:
        """Create several daily logs; nothing is written unless every item is valid."""
        try:
            weekly_log = await self._get_editable_weekly_log(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)

        existing = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
        errors: List[TimesheetError] = []
        try:
            validate_batch_dates(r.date for r in requests)
        except TimesheetError as e:
            errors.append(e)
        for request in requests:
            try:
                _validate_fields(request)
                validate_entry(weekly_log.date_from, weekly_log.date_to, request.date, existing)
            except TimesheetError as e:
                errors.append(e)
        if errors:
            return ServiceResult.fail_many(errors, "Some daily logs could not be created")

        now = utcnow()
        created = []
        for request in requests:
            created.append(
                await self.daily_log_repo.create(
                    user_id=user_id,
                    weekly_log_id=weekly_log.id,
                    created_at=now,
                    updated_at=now,
                    **_field_values(request),
                )
            )
        await self._recalculate(weekly_log.id)
        return ServiceResult.ok(
            [DailyLogResponse.model_validate(d) for d in created],
            f"{len(created)} daily log(s) created successfully!",
        )

    async def update_daily_log(
        self,
        daily_log_id: int,
        weekly_log_id: int,
        request: DailyLogRequest,
        user_id: int,
    ) -> ServiceResult[DailyLogResponse]:
        """Update one daily log and refresh the weekly totals."""
        try:
            weekly_log = await self._get_weekly_log(weekly_log_id, user_id, for_update=True)
            daily_log = await self._get_daily_log(daily_log_id, weekly_log_id, user_id)
            ensure_draft(weekly_log)
            _validate_fields(request)
            existing = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
            validate_entry(
                weekly_log.date_from,
                weekly_log.date_to,
                request.date,
                existing,
                exclude_entry_id=daily_log.id,
            )
        except TimesheetError as e:
            return ServiceResult.fail(e)

        for field, value in _field_values(request).items():
            setattr(daily_log, field, value)
        daily_log.updated_at = utcnow()
        daily_log = await self.daily_log_repo.save(daily_log)
        await self._recalculate(weekly_log.id)
        return ServiceResult.ok(DailyLogResponse.model_validate(daily_log), "Dailylog updated successfully!")

    async def delete_daily_log(
        self,
        daily_log_id: int,
        weekly_log_id: int,
        user_id: int,
    ) -> ServiceResult[None]:
        """Soft-delete one daily log and refresh the weekly totals."""
        try:
            weekly_log = await self._get_weekly_log(weekly_log_id, user_id, for_update=True)
            daily_log = await self._get_daily_log(daily_log_id, weekly_log_id, user_id)
            ensure_draft(weekly_log)
        except TimesheetError as e:
            return ServiceResult.fail(e)

        daily_log.is_deleted = True
        daily_log.updated_at = utcnow()
        await self.daily_log_repo.save(daily_log)
        await self._recalculate(weekly_log_id)
        return ServiceResult.ok(message="Dailylog deleted successfully!")

    async def replace_daily_logs(
        self,
        weekly_log_id: int,
        request: UpdateDailyLogsRequest,
        user_id: int,
    ) -> ServiceResult[List[DailyLogResponse]]:
        """
        Make the weekly log's daily logs match ``request``.

        Items with an id update that daily log, items without one are created,
        and existing daily logs not named in the request are soft-deleted.
        """
        try:
            weekly_log = await self._get_editable_weekly_log(weekly_log_id, user_id)
        except TimesheetError as e:
            return ServiceResult.fail(e)

        existing = await self.daily_log_repo.list_by_weekly_log(weekly_log.id)
        existing_by_id = {d.id: d for d in existing}
        items = request.daily_logs

        errors: List[TimesheetError] = []
        try:
            validate_batch_ids(item.id for item in items if item.id)
        except TimesheetError as e:
            errors.append(e)
        try:
            validate_batch_dates(item.date for item in items)
        except TimesheetError as e:
            errors.append(e)

        # After the replace the weekly log holds exactly the request items, so
        # date uniqueness is checked within the request only.
        kept_ids = {item.id for item in items if item.id}
        for item in items:
            try:
                _validate_fields(item)
                if item.id and item.id not in existing_by_id:
                    raise NotFoundOrForbiddenError(f"DailyLog with ID {item.id} not found")
                validate_entry(weekly_log.date_from, weekly_log.date_to, item.date, [])
            except TimesheetError as e:
                errors.append(e)
        if errors:
            return ServiceResult.fail_many(errors, "Some daily logs could not be updated")

        now = utcnow()
        responses = []
        removed = 0
        for daily_log in existing:
            if daily_log.id not in kept_ids:
                daily_log.is_deleted = True
                daily_log.updated_at = now
                removed += 1
        # Kept rows moving to another date step out of the live set first so
        # swapped dates never hold two live rows at once.
        moving = {
            item.id for item in items
            if item.id and existing_by_id[item.id].date != item.date
        }
        for daily_log_id in moving:
            existing_by_id[daily_log_id].is_deleted = True
        await self.session.flush()

        for item in items:
            if item.id:
                daily_log = existing_by_id[item.id]
                for field, value in _field_values(item).items():
                    setattr(daily_log, field, value)
                daily_log.is_deleted = False
                daily_log.updated_at = now
                daily_log = await self.daily_log_repo.save(daily_log)
            else:
                daily_log = await self.daily_log_repo.create(
                    user_id=user_id,
                    weekly_log_id=weekly_log.id,
                    created_at=now,
                    updated_at=now,
                    **_field_values(item),
                )
            responses.append(DailyLogResponse.model_validate(daily_log))

        await self._recalculate(weekly_log.id)
        logger.info(
            "Daily logs replaced",
            extra={"weekly_log_id": weekly_log.id, "active": len(responses), "removed": removed},
        )
        return ServiceResult.ok(
            responses,
            f"Daily logs updated successfully! {len(responses)} active, {removed} removed.",
        )
