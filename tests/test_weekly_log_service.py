"""
Weekly log service: creation, editing, deletion and listing.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from timesheet_api.core.exceptions import ErrorKind
from timesheet_api.db.repositories.daily_log_repository import DailyLogRepository
from timesheet_api.db.repositories.weekly_log_repository import WeeklyLogRepository
from timesheet_api.models.weekly_log import DailyLog, TimesheetStatus
from timesheet_api.schemas.weekly_log import WeeklyLogRequest
from timesheet_api.services.weekly_log_service import WeeklyLogService


def _week(start: date) -> WeeklyLogRequest:
    return WeeklyLogRequest(date_from=start, date_to=start + timedelta(days=6))


@pytest.fixture
def service(test_db_session):
    return WeeklyLogService(test_db_session)


async def test_create_weekly_log(service, users):
    result = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))

    assert result.success
    assert result.message == "Weeklylog created successfully!"
    assert result.data.status == TimesheetStatus.DRAFT
    assert result.data.total_hours == Decimal("0")


async def test_overlapping_weekly_log_is_rejected(service, users):
    await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))

    result = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 5)))

    assert not result.success
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.error_code == "OverlappingPeriod"


async def test_other_users_may_use_the_same_week(service, users):
    await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    result = await service.create_weekly_log(users.teammate.id, _week(date(2024, 1, 1)))
    assert result.success


async def test_wrong_length_is_rejected(service, users):
    result = await service.create_weekly_log(
        users.owner.id, WeeklyLogRequest(date_from=date(2024, 1, 1), date_to=date(2024, 1, 5))
    )
    assert result.error_code == "InvalidDuration"


async def test_get_weekly_log_of_another_user_is_not_found(service, users):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))

    foreign = await service.get_weekly_log(created.data.id, users.teammate.id)
    missing = await service.get_weekly_log(99999, users.teammate.id)

    assert foreign.error_kind == ErrorKind.NOT_FOUND_OR_FORBIDDEN
    assert foreign.errors == missing.errors


async def test_update_moves_the_range(service, users):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))

    result = await service.update_weekly_log(created.data.id, users.owner.id, _week(date(2024, 1, 8)))

    assert result.success
    assert result.data.date_from == date(2024, 1, 8)
    assert result.data.date_to == date(2024, 1, 14)


async def test_update_cannot_strand_daily_logs(service, users, test_db_session):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    await DailyLogRepository(test_db_session).create(
        user_id=users.owner.id, weekly_log_id=created.data.id, date=date(2024, 1, 2), hours=Decimal("8")
    )

    result = await service.update_weekly_log(created.data.id, users.owner.id, _week(date(2024, 1, 3)))

    assert result.error_code == "OutOfRange"


async def test_submitted_weekly_log_is_locked(service, users):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    submitted = await service.submit_weekly_log(created.data.id, users.owner.id)
    assert submitted.data.status == TimesheetStatus.PENDING

    updated = await service.update_weekly_log(created.data.id, users.owner.id, _week(date(2024, 1, 8)))
    deleted = await service.delete_weekly_log(created.data.id, users.owner.id)

    assert updated.error_code == "PeriodLocked"
    assert deleted.error_code == "PeriodLocked"


async def test_delete_cascades_to_daily_logs(service, users, test_db_session):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    daily_log_repo = DailyLogRepository(test_db_session)
    for day in (date(2024, 1, 1), date(2024, 1, 2)):
        await daily_log_repo.create(
            user_id=users.owner.id, weekly_log_id=created.data.id, date=day, hours=Decimal("8")
        )

    result = await service.delete_weekly_log(created.data.id, users.owner.id)

    assert result.success
    assert await WeeklyLogRepository(test_db_session).get(created.data.id) is None
    deleted = await WeeklyLogRepository(test_db_session).get(created.data.id, include_deleted=True)
    assert deleted.is_deleted
    assert await daily_log_repo.list_by_weekly_log(created.data.id) == []
    result = await test_db_session.execute(
        select(DailyLog)
        .where(DailyLog.weekly_log_id == created.data.id)
        .execution_options(populate_existing=True)
    )
    entries = result.scalars().all()
    assert len(entries) == 2
    assert all(isinstance(e, DailyLog) and e.is_deleted for e in entries)


async def test_deleted_week_can_be_recreated(service, users):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    await service.delete_weekly_log(created.data.id, users.owner.id)

    result = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))

    assert result.success


async def test_list_is_paged_newest_first(service, users):
    for offset in range(3):
        await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1) + timedelta(weeks=offset)))

    first = await service.list_weekly_logs(users.owner.id, page=1, page_size=2)
    second = await service.list_weekly_logs(users.owner.id, page=2, page_size=2)

    assert [w.date_from for w in first.data.data] == [date(2024, 1, 15), date(2024, 1, 8)]
    assert first.data.total_count == 3
    assert first.data.total_pages == 2
    assert first.data.has_next_page
    assert [w.date_from for w in second.data.data] == [date(2024, 1, 1)]
    assert second.data.has_previous_page


async def test_list_filters_by_date(service, users):
    for offset in range(3):
        await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1) + timedelta(weeks=offset)))

    result = await service.list_weekly_logs(
        users.owner.id, start_date=date(2024, 1, 8), end_date=date(2024, 1, 14)
    )

    assert [w.date_from for w in result.data.data] == [date(2024, 1, 8)]


async def test_status_history_records_each_change(service, users):
    created = await service.create_weekly_log(users.owner.id, _week(date(2024, 1, 1)))
    await service.submit_weekly_log(created.data.id, users.owner.id)

    result = await service.get_status_history(created.data.id, users.owner.id)

    assert [(h.from_status, h.to_status) for h in result.data] == [
        (None, TimesheetStatus.DRAFT),
        (TimesheetStatus.DRAFT, TimesheetStatus.PENDING),
    ]
