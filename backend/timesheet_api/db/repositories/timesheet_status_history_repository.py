"""
Timesheet status history repository for database operations.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from timesheet_api.db.repositories.base_repository import BaseRepository
from timesheet_api.models.weekly_log import TimesheetStatusHistory


class TimesheetStatusHistoryRepository(BaseRepository[TimesheetStatusHistory]):
    """Repository for timesheet status history operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(TimesheetStatusHistory, session)

    async def list_by_weekly_log(self, weekly_log_id: int) -> List[TimesheetStatusHistory]:
        """List status history for a weekly log, oldest first."""
        result = await self.session.execute(
            select(TimesheetStatusHistory)
            .where(TimesheetStatusHistory.weekly_log_id == weekly_log_id)
            .order_by(TimesheetStatusHistory.changed_at, TimesheetStatusHistory.id)
        )
        return list(result.scalars().all())
