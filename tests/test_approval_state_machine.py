"""
Approval workflow transitions and authorization.
"""

from datetime import date

import pytest

from timesheet_api.core.exceptions import (
    InvalidTransitionError,
    NotFoundOrForbiddenError,
    ValidationError,
)
from timesheet_api.models.weekly_log import TimesheetStatus, WeeklyLog, can_transition
from timesheet_api.db.repositories.timesheet_status_history_repository import TimesheetStatusHistoryRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.services.approval_service import ApprovalStateMachine


@pytest.fixture
async def draft_log(test_db_session, users):
    weekly_log = WeeklyLog(
        user_id=users.owner.id,
        date_from=date(2024, 1, 1),
        date_to=date(2024, 1, 7),
        status=TimesheetStatus.DRAFT,
    )
    test_db_session.add(weekly_log)
    await test_db_session.flush()
    return weekly_log


@pytest.fixture
def state_machine(test_db_session):
    return ApprovalStateMachine(test_db_session)


def test_transition_table():
    assert can_transition(TimesheetStatus.DRAFT, TimesheetStatus.PENDING)
    assert can_transition(TimesheetStatus.PENDING, TimesheetStatus.APPROVED)
    assert can_transition(TimesheetStatus.PENDING, TimesheetStatus.DENIED)
    assert not can_transition(TimesheetStatus.DRAFT, TimesheetStatus.APPROVED)
    for terminal in (TimesheetStatus.APPROVED, TimesheetStatus.DENIED):
        assert not any(can_transition(terminal, target) for target in TimesheetStatus)


async def test_approval_flow(state_machine, draft_log, users, test_db_session):
    with pytest.raises(InvalidTransitionError):
        await state_machine.approve(draft_log.id, users.manager.id)

    await state_machine.submit(draft_log.id, users.owner.id)
    assert draft_log.status == TimesheetStatus.PENDING

    await state_machine.approve(draft_log.id, users.manager.id, comment="ok")
    assert draft_log.status == TimesheetStatus.APPROVED
    assert draft_log.manager_comment == "ok"

    # The owner moves to another manager; the approved log stays terminal.
    users.owner.manager_id = users.other_manager.id
    await test_db_session.flush()
    with pytest.raises(InvalidTransitionError) as exc_info:
        await state_machine.approve(draft_log.id, users.other_manager.id)
    assert exc_info.value.message == "Cannot approve timesheet"

    history = await TimesheetStatusHistoryRepository(test_db_session).list_by_weekly_log(draft_log.id)
    assert [h.to_status for h in history] == [TimesheetStatus.PENDING, TimesheetStatus.APPROVED]


async def test_submit_only_from_draft(state_machine, draft_log, users):
    await state_machine.submit(draft_log.id, users.owner.id)
    with pytest.raises(InvalidTransitionError):
        await state_machine.submit(draft_log.id, users.owner.id)


async def test_submit_by_someone_else_looks_like_not_found(state_machine, draft_log, users):
    with pytest.raises(NotFoundOrForbiddenError) as foreign:
        await state_machine.submit(draft_log.id, users.teammate.id)
    with pytest.raises(NotFoundOrForbiddenError) as missing:
        await state_machine.submit(99999, users.teammate.id)
    assert foreign.value.detail == missing.value.detail


async def test_manager_of_another_team_gets_not_found(state_machine, draft_log, users):
    await state_machine.submit(draft_log.id, users.owner.id)
    with pytest.raises(NotFoundOrForbiddenError) as foreign:
        await state_machine.approve(draft_log.id, users.other_manager.id)
    with pytest.raises(NotFoundOrForbiddenError) as missing:
        await state_machine.approve(99999, users.other_manager.id)
    assert foreign.value.detail == missing.value.detail
    assert draft_log.status == TimesheetStatus.PENDING


@pytest.mark.parametrize("reason", [None, "", "   "])
async def test_deny_requires_reason(state_machine, draft_log, users, reason):
    await state_machine.submit(draft_log.id, users.owner.id)
    with pytest.raises(ValidationError):
        await state_machine.deny(draft_log.id, users.manager.id, reason)
    assert draft_log.status == TimesheetStatus.PENDING


async def test_deny_sets_reason_as_comment(state_machine, draft_log, users):
    await state_machine.submit(draft_log.id, users.owner.id)
    await state_machine.deny(draft_log.id, users.manager.id, "Missing Friday")
    assert draft_log.status == TimesheetStatus.DENIED
    assert draft_log.manager_comment == "Missing Friday"

    with pytest.raises(InvalidTransitionError):
        await state_machine.approve(draft_log.id, users.manager.id)


async def test_overlong_comment_is_rejected(state_machine, draft_log, users):
    await state_machine.submit(draft_log.id, users.owner.id)
    with pytest.raises(ValidationError):
        await state_machine.approve(draft_log.id, users.manager.id, comment="x" * 501)


async def test_transitions_lock_the_weekly_log(state_machine, draft_log, users, monkeypatch):
    locked = []
    original = WeeklyLogRepository.get_for_update

    async def recording(self, id):
        locked.append(id)
        return await original(self, id)

    monkeypatch.setattr(WeeklyLogRepository, "get_for_update", recording)

    await state_machine.submit(draft_log.id, users.owner.id)
    await state_machine.approve(draft_log.id, users.manager.id)

    assert locked == [draft_log.id, draft_log.id]
