"""
Weekly total recalculation.

Totals on a weekly log are never written by callers directly: every daily
log create, update or soft-delete is followed by an explicit
``AggregationService.recalculate`` call for the affected weekly log.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.exceptions import AggregationInconsistencyError
from timesheet_api.db.repositories.daily_log_repository import DailyLogRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.weekly_log import DailyLog
from timesheet_api.services.base_service import BaseService
from timesheet_api.utils.clock import utcnow

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class RecalculationResult:
    """Outcome of one recalculation; ``error`` is set when the weekly log was missing."""
    weekly_log_id: int
    total_hours: Decimal = ZERO
    total_charges: Decimal = ZERO
    error: Optional[AggregationInconsistencyError] = None

    @property
    def found(self) -> bool:
        return self.error is None


def _amount(value) -> Decimal:
    return Decimal(str(value)) if value is not None else ZERO


def compute_totals(entries: Iterable[DailyLog]) -> Tuple[Decimal, Decimal]:
    """Sum hours and toll + parking + other charges over non-deleted entries."""
    total_hours = ZERO
    total_charges = ZERO
    for entry in entries:
        if entry.is_deleted:
            continue
        total_hours += _amount(entry.hours)
        total_charges += (
            _amount(entry.toll_charge)
            + _amount(entry.parking_fee)
            + _amount(entry.other_charges)
        )
    return total_hours, total_charges


class AggregationService(BaseService):
    """Recomputes a weekly log's totals from its daily logs."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.weekly_log_repo = WeeklyLogRepository(session)
        self.daily_log_repo = DailyLogRepository(session)

    async def recalculate(self, weekly_log_id: int) -> RecalculationResult:
        """
        Recompute and persist totals for a weekly log.

        The weekly log row is locked for the rest of the transaction and its
        version counter is bumped, so concurrent recalculations serialize.
        A missing weekly log is reported in the result, not raised: the daily
        log change that triggered the call has already succeeded.
        """
        weekly_log = await self.weekly_log_repo.get_for_update(weekly_log_id)
        if weekly_log is None:
            error = AggregationInconsistencyError(
                f"Weekly log {weekly_log_id} not found while recalculating totals"
            )
            logger.warning(
                "Aggregation inconsistency: %s",
                error.detail,
                extra={"weekly_log_id": weekly_log_id, "error_code": error.code},
            )
            return RecalculationResult(weekly_log_id=weekly_log_id, error=error)

        entries = await self.daily_log_repo.list_by_weekly_log(weekly_log_id)
        total_hours, total_charges = compute_totals(entries)

        weekly_log.total_hours = total_hours
        weekly_log.total_charges = total_charges
        weekly_log.updated_at = utcnow()
        await self.weekly_log_repo.save(weekly_log)

        logger.debug(
            "Recalculated weekly totals",
            extra={
                "weekly_log_id": weekly_log_id,
                "total_hours": str(total_hours),
                "total_charges": str(total_charges),
            },
        )
        return RecalculationResult(
            weekly_log_id=weekly_log_id,
            total_hours=total_hours,
            total_charges=total_charges,
        )
