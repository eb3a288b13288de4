"""
User repository for identity and manager-graph lookups.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from timesheet_api.db.repositories.base_repository import BaseRepository
from timesheet_api.models.user import User


class UserRepository(BaseRepository[User]):
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_active(self, id: int) -> Optional[User]:
        """Get user by ID if the account is active."""
        result = await self.session.execute(
            select(User).where(User.id == id, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def is_manager_of(self, manager_id: int, owner_id: int) -> bool:
        """True when ``manager_id`` is the currently assigned manager of ``owner_id``."""
        result = await self.session.execute(
            select(User.id).where(User.id == owner_id, User.manager_id == manager_id)
        )
        return result.scalar_one_or_none() is not None

    async def lock(self, id: int) -> None:
        """
        Take a row lock on the user for the rest of the transaction.
        Serializes weekly log creation per owner so two concurrent requests
        cannot both pass the overlap check.
        """
        await self.session.execute(
            select(User.id).where(User.id == id).with_for_update()
        )
