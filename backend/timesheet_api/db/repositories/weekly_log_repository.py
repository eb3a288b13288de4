"""
Weekly log repository for database operations.
All queries exclude soft-deleted rows unless stated otherwise.
"""

from typing import Optional, List, Tuple
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from timesheet_api.db.repositories.base_repository import BaseRepository
from timesheet_api.models.user import User
from timesheet_api.models.weekly_log import WeeklyLog, TimesheetStatus


class WeeklyLogRepository(BaseRepository[WeeklyLog]):
    """Repository for weekly log operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(WeeklyLog, session)

    async def get(self, id: int, include_deleted: bool = False) -> Optional[WeeklyLog]:
        """Get weekly log by ID."""
        query = select(WeeklyLog).where(WeeklyLog.id == id)
        if not include_deleted:
            query = query.where(WeeklyLog.is_deleted.is_(False))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, id: int) -> Optional[WeeklyLog]:
        """Get weekly log by ID holding a row lock until the transaction ends."""
        result = await self.session.execute(
            select(WeeklyLog)
            .where(WeeklyLog.id == id, WeeklyLog.is_deleted.is_(False))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_owned_for_update(self, id: int, user_id: int) -> Optional[WeeklyLog]:
        """
        Get the user's weekly log holding a row lock until the transaction ends.
        Daily log changes and status changes on one weekly log serialize on this lock.
        """
        result = await self.session.execute(
            select(WeeklyLog)
            .where(
                WeeklyLog.id == id,
                WeeklyLog.user_id == user_id,
                WeeklyLog.is_deleted.is_(False),
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_owned(self, id: int, user_id: int) -> Optional[WeeklyLog]:
        """Get weekly log by ID only if it belongs to ``user_id``."""
        result = await self.session.execute(
            select(WeeklyLog).where(
                WeeklyLog.id == id,
                WeeklyLog.user_id == user_id,
                WeeklyLog.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def get_for_manager(self, id: int, manager_id: int) -> Optional[Tuple[WeeklyLog, User]]:
        """Get weekly log and its owner when the owner reports to ``manager_id``."""
        result = await self.session.execute(
            select(WeeklyLog, User)
            .join(User, WeeklyLog.user_id == User.id)
            .where(
                WeeklyLog.id == id,
                User.manager_id == manager_id,
                WeeklyLog.is_deleted.is_(False),
            )
        )
        row = result.first()
        return (row[0], row[1]) if row else None

    async def list_by_user(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[WeeklyLog], int]:
        """List a user's weekly logs, newest first, with total count."""
        conditions = [WeeklyLog.user_id == user_id, WeeklyLog.is_deleted.is_(False)]
        if start_date is not None:
            conditions.append(WeeklyLog.date_from >= start_date)
        if end_date is not None:
            conditions.append(WeeklyLog.date_to <= end_date)

        total = await self.session.execute(
            select(func.count()).select_from(WeeklyLog).where(*conditions)
        )
        result = await self.session.execute(
            select(WeeklyLog)
            .where(*conditions)
            .order_by(WeeklyLog.date_from.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), int(total.scalar_one())

    async def list_overlapping(
        self,
        user_id: int,
        date_from: date,
        date_to: date,
        exclude_id: Optional[int] = None,
    ) -> List[WeeklyLog]:
        """List the user's weekly logs whose range intersects ``[date_from, date_to]``."""
        query = select(WeeklyLog).where(
            WeeklyLog.user_id == user_id,
            WeeklyLog.is_deleted.is_(False),
            WeeklyLog.date_from <= date_to,
            WeeklyLog.date_to >= date_from,
        )
        if exclude_id is not None:
            query = query.where(WeeklyLog.id != exclude_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_for_manager(
        self,
        manager_id: int,
        status: Optional[TimesheetStatus] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Tuple[WeeklyLog, User]], int]:
        """List weekly logs of the manager's direct reports, most recently updated first."""
        conditions = [User.manager_id == manager_id, WeeklyLog.is_deleted.is_(False)]
        if status is not None:
            conditions.append(WeeklyLog.status == status)

        total = await self.session.execute(
            select(func.count())
            .select_from(WeeklyLog)
            .join(User, WeeklyLog.user_id == User.id)
            .where(*conditions)
        )
        result = await self.session.execute(
            select(WeeklyLog, User)
            .join(User, WeeklyLog.user_id == User.id)
            .where(*conditions)
            .order_by(WeeklyLog.updated_at.desc(), WeeklyLog.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [(row[0], row[1]) for row in result.all()], int(total.scalar_one())

    async def list_pending_for_manager(self, manager_id: int) -> List[Tuple[WeeklyLog, User]]:
        """List Pending weekly logs of the manager's direct reports, oldest update first."""
        result = await self.session.execute(
            select(WeeklyLog, User)
            .join(User, WeeklyLog.user_id == User.id)
            .where(
                User.manager_id == manager_id,
                WeeklyLog.status == TimesheetStatus.PENDING,
                WeeklyLog.is_deleted.is_(False),
            )
            .order_by(WeeklyLog.updated_at.asc(), WeeklyLog.id.asc())
        )
        return [(row[0], row[1]) for row in result.all()]
