"""
Manager views of direct reports' timesheets.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from timesheet_api.core.exceptions import ErrorKind
from timesheet_api.models.weekly_log import TimesheetStatus
from timesheet_api.schemas.daily_log import DailyLogRequest
from timesheet_api.schemas.weekly_log import WeeklyLogRequest
from timesheet_api.services.daily_log_service import DailyLogService
from timesheet_api.services.manager_service import ManagerService, parse_status_filter
from timesheet_api.services.weekly_log_service import WeeklyLogService


@pytest.fixture
def service(test_db_session):
    return ManagerService(test_db_session)


async def _weekly_log(session, user, start=date(2024, 1, 1), submit=False):
    weekly_logs = WeeklyLogService(session)
    created = await weekly_logs.create_weekly_log(
        user.id, WeeklyLogRequest(date_from=start, date_to=start + timedelta(days=6))
    )
    if submit:
        await weekly_logs.submit_weekly_log(created.data.id, user.id)
    return created.data.id


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("All", None),
        ("pending", TimesheetStatus.PENDING),
        ("Approved", TimesheetStatus.APPROVED),
        ("Archived", None),
    ],
)
def test_parse_status_filter(value, expected):
    assert parse_status_filter(value) == expected


async def test_team_list_only_shows_direct_reports(service, users, test_db_session):
    await _weekly_log(test_db_session, users.owner)
    await _weekly_log(test_db_session, users.teammate, submit=True)
    await _weekly_log(test_db_session, users.other_manager)

    everything = await service.list_team_timesheets(users.manager.id, status="All")
    pending = await service.list_team_timesheets(users.manager.id, status="Pending")
    nobody = await service.list_team_timesheets(users.other_manager.id)

    assert everything.data.total_count == 2
    assert {t.user_email for t in everything.data.data} == {"owner@example.com", "teammate@example.com"}
    assert [t.user_full_name for t in pending.data.data] == ["Tariq Lane"]
    assert nobody.data.total_count == 0


async def test_pending_list_is_oldest_first(service, users, test_db_session):
    first = await _weekly_log(test_db_session, users.owner, start=date(2024, 1, 8), submit=True)
    second = await _weekly_log(test_db_session, users.teammate, start=date(2024, 1, 1), submit=True)
    await _weekly_log(test_db_session, users.owner, start=date(2024, 1, 15))

    result = await service.list_pending_timesheets(users.manager.id)

    assert [t.id for t in result.data] == [first, second]


async def test_detail_includes_daily_logs(service, users, test_db_session):
    weekly_log_id = await _weekly_log(test_db_session, users.owner)
    await DailyLogService(test_db_session).create_daily_log(
        weekly_log_id, DailyLogRequest(date=date(2024, 1, 2), hours=Decimal("7")), users.owner.id
    )

    detail = await service.get_timesheet_detail(weekly_log_id, users.manager.id)
    foreign = await service.get_timesheet_detail(weekly_log_id, users.other_manager.id)

    assert detail.data.total_hours == Decimal("7")
    assert [d.date for d in detail.data.daily_logs] == [date(2024, 1, 2)]
    assert foreign.error_kind == ErrorKind.NOT_FOUND_OR_FORBIDDEN


async def test_approve_and_deny(service, users, test_db_session):
    approved_id = await _weekly_log(test_db_session, users.owner, submit=True)
    denied_id = await _weekly_log(test_db_session, users.teammate, submit=True)

    approved = await service.approve_timesheet(approved_id, users.manager.id, "ok")
    denied = await service.deny_timesheet(denied_id, users.manager.id, "Hours missing on Tuesday")
    again = await service.approve_timesheet(approved_id, users.manager.id)

    assert approved.data.status == TimesheetStatus.APPROVED
    assert approved.data.manager_comment == "ok"
    assert denied.data.status == TimesheetStatus.DENIED
    assert denied.data.manager_comment == "Hours missing on Tuesday"
    assert again.error_kind == ErrorKind.INVALID_TRANSITION
    assert again.errors == ["Only Pending timesheets can be approved. Current status: Approved"]


async def test_deny_without_reason(service, users, test_db_session):
    weekly_log_id = await _weekly_log(test_db_session, users.owner, submit=True)

    result = await service.deny_timesheet(weekly_log_id, users.manager.id, None)

    assert result.error_kind == ErrorKind.VALIDATION
    assert result.errors == ["A reason is required when denying a timesheet."]
