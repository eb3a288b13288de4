"""
Health repository.
Runs a trivial query to confirm the database answers.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class HealthRepository:
    """Repository for health check operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_database(self) -> bool:
        """True if ``SELECT 1`` succeeds."""
        try:
            result = await self.session.execute(text("SELECT 1"))
            return result.scalar() == 1
        except SQLAlchemyError as e:
            logger.warning("Database health check failed", extra={"error": str(e)})
            return False
