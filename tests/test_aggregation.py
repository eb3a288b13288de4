"""
Weekly total recalculation.
"""

from datetime import date
from decimal import Decimal

from timesheet_api.models.weekly_log import DailyLog, TimesheetStatus, WeeklyLog
from timesheet_api.services.aggregation_service import AggregationService, compute_totals


def _entry(hours, toll="0", parking="0", other="0", mileage="0", is_deleted=False):
    return DailyLog(
        date=date(2024, 1, 1),
        hours=Decimal(hours),
        mileage=Decimal(mileage),
        toll_charge=Decimal(toll),
        parking_fee=Decimal(parking),
        other_charges=Decimal(other),
        is_deleted=is_deleted,
    )


def test_totals_skip_deleted_entries_and_mileage():
    hours, charges = compute_totals([
        _entry("8", toll="2.50", parking="5", mileage="40"),
        _entry("7.5", other="1.25"),
        _entry("6", toll="100", is_deleted=True),
    ])
    assert hours == Decimal("15.5")
    assert charges == Decimal("8.75")


def test_totals_of_no_entries_are_zero():
    assert compute_totals([]) == (Decimal("0"), Decimal("0"))


async def test_recalculate_persists_totals(test_db_session, users):
    weekly_log = WeeklyLog(
        user_id=users.owner.id,
        date_from=date(2024, 1, 1),
        date_to=date(2024, 1, 7),
        status=TimesheetStatus.DRAFT,
        total_hours=Decimal("99"),
    )
    test_db_session.add(weekly_log)
    await test_db_session.flush()
    test_db_session.add_all([
        DailyLog(user_id=users.owner.id, weekly_log_id=weekly_log.id, date=date(2024, 1, 1),
                 hours=Decimal("8"), parking_fee=Decimal("3")),
        DailyLog(user_id=users.owner.id, weekly_log_id=weekly_log.id, date=date(2024, 1, 2),
                 hours=Decimal("4"), is_deleted=True),
    ])
    await test_db_session.flush()
    version_before = weekly_log.version

    result = await AggregationService(test_db_session).recalculate(weekly_log.id)

    assert result.found
    assert result.total_hours == Decimal("8")
    assert result.total_charges == Decimal("3")
    assert weekly_log.total_hours == Decimal("8")
    assert weekly_log.version == version_before + 1


async def test_recalculate_missing_weekly_log_reports_inconsistency(test_db_session, users):
    result = await AggregationService(test_db_session).recalculate(12345)

    assert not result.found
    assert result.error.code == "AggregationInconsistency"
