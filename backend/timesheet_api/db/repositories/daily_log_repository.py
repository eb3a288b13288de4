"""
Daily log repository for database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from timesheet_api.db.repositories.base_repository import BaseRepository
from timesheet_api.models.weekly_log import DailyLog
from timesheet_api.utils.clock import utcnow


class DailyLogRepository(BaseRepository[DailyLog]):
    """Repository for daily log operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(DailyLog, session)

    async def get_in_weekly_log(self, id: int, weekly_log_id: int, user_id: int) -> Optional[DailyLog]:
        """Get a non-deleted daily log scoped to its weekly log and owner."""
        result = await self.session.execute(
            select(DailyLog).where(
                DailyLog.id == id,
                DailyLog.weekly_log_id == weekly_log_id,
                DailyLog.user_id == user_id,
                DailyLog.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_weekly_log(self, weekly_log_id: int) -> List[DailyLog]:
        """List non-deleted daily logs for a weekly log, ordered by date."""
        result = await self.session.execute(
            select(DailyLog)
            .where(DailyLog.weekly_log_id == weekly_log_id, DailyLog.is_deleted.is_(False))
            .order_by(DailyLog.date)
        )
        return list(result.scalars().all())

    async def soft_delete_by_weekly_log(self, weekly_log_id: int) -> int:
        """Mark every daily log of a weekly log deleted. Returns the row count."""
        result = await self.session.execute(
            update(DailyLog)
            .where(DailyLog.weekly_log_id == weekly_log_id, DailyLog.is_deleted.is_(False))
            .values(is_deleted=True, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount
