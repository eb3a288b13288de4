"""
Approval workflow for weekly logs.

Draft -> Pending by the owner, Pending -> Approved / Denied by the owner's
current manager. Approved and Denied are terminal. The legal transitions
live in ``timesheet_api.models.weekly_log.TRANSITIONS``.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.exceptions import (
    InvalidTransitionError,
    NotFoundOrForbiddenError,
    ValidationError,
)
from timesheet_api.db.repositories.timesheet_status_history_repository import TimesheetStatusHistoryRepository
from timesheet_api.db.repositories.user_repository import UserRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.weekly_log import TimesheetStatus, WeeklyLog, can_transition
from timesheet_api.services.base_service import BaseService
from timesheet_api.utils.clock import utcnow

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 500

NOT_FOUND_DETAIL = "The requested timesheet does not exist or does not belong to your team"

_VERBS = {
    TimesheetStatus.PENDING: ("submit", "submitted", TimesheetStatus.DRAFT),
    TimesheetStatus.APPROVED: ("approve", "approved", TimesheetStatus.PENDING),
    TimesheetStatus.DENIED: ("deny", "denied", TimesheetStatus.PENDING),
}


class ApprovalStateMachine(BaseService):
    """
    Applies status transitions to weekly logs.

    Methods raise ``TimesheetError`` subclasses; the calling services turn
    them into result envelopes. A weekly log the actor may not act on is
    reported exactly like one that does not exist.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.weekly_log_repo = WeeklyLogRepository(session)
        self.user_repo = UserRepository(session)
        self.status_history_repo = TimesheetStatusHistoryRepository(session)

    async def submit(self, weekly_log_id: int, owner_id: int) -> WeeklyLog:
        """Owner moves a Draft weekly log to Pending."""
        weekly_log = await self.weekly_log_repo.get_for_update(weekly_log_id)
        if weekly_log is None or weekly_log.user_id != owner_id:
            raise NotFoundOrForbiddenError(
                "The requested weeklylog does not exist or you don't have permission to access it"
            )
        return await self._transition(weekly_log, TimesheetStatus.PENDING, owner_id)

    async def approve(
        self,
        weekly_log_id: int,
        manager_id: int,
        comment: Optional[str] = None,
    ) -> WeeklyLog:
        """Manager approves a Pending weekly log; ``comment`` is optional."""
        if comment is not None and len(comment) > MAX_COMMENT_LENGTH:
            raise ValidationError("Comment cannot exceed 500 characters.")
        weekly_log = await self._get_for_manager(weekly_log_id, manager_id)
        return await self._transition(weekly_log, TimesheetStatus.APPROVED, manager_id, comment)

    async def deny(self, weekly_log_id: int, manager_id: int, reason: Optional[str]) -> WeeklyLog:
        """Manager denies a Pending weekly log; ``reason`` is mandatory."""
        if reason is None or not reason.strip():
            raise ValidationError("A reason is required when denying a timesheet.")
        if len(reason) > MAX_COMMENT_LENGTH:
            raise ValidationError("Reason cannot exceed 500 characters.")
        weekly_log = await self._get_for_manager(weekly_log_id, manager_id)
        return await self._transition(weekly_log, TimesheetStatus.DENIED, manager_id, reason)

    async def _get_for_manager(self, weekly_log_id: int, manager_id: int) -> WeeklyLog:
        # Manager graph is read live; reassignment takes effect immediately.
        weekly_log = await self.weekly_log_repo.get_for_update(weekly_log_id)
        if weekly_log is None or not await self.user_repo.is_manager_of(manager_id, weekly_log.user_id):
            logger.warning(
                "Timesheet not found for manager",
                extra={"weekly_log_id": weekly_log_id, "manager_id": manager_id},
            )
            raise NotFoundOrForbiddenError(NOT_FOUND_DETAIL)
        return weekly_log

    async def _transition(
        self,
        weekly_log: WeeklyLog,
        target: TimesheetStatus,
        actor_id: int,
        manager_comment: Optional[str] = None,
    ) -> WeeklyLog:
        verb, past, required = _VERBS[target]
        current = weekly_log.status
        if not can_transition(current, target):
            raise InvalidTransitionError(
                f"Only {required.value} timesheets can be {past}. Current status: {current.value}",
                message=f"Cannot {verb} timesheet",
            )

        weekly_log.status = target
        if target in (TimesheetStatus.APPROVED, TimesheetStatus.DENIED):
            weekly_log.manager_comment = manager_comment
        weekly_log.updated_at = utcnow()
        await self.weekly_log_repo.save(weekly_log)

        await self.status_history_repo.create(
            weekly_log_id=weekly_log.id,
            from_status=current,
            to_status=target,
            changed_by_user_id=actor_id,
            comment=manager_comment,
        )
        logger.info(
            f"Timesheet {past}",
            extra={
                "weekly_log_id": weekly_log.id,
                "from_status": current.value,
                "to_status": target.value,
                "actor_id": actor_id,
            },
        )
        return weekly_log
