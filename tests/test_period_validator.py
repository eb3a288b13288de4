"""
Weekly log date-range rules.
"""

from datetime import date

import pytest

from timesheet_api.core.exceptions import (
    InvalidDurationError,
    InvalidRangeError,
    OverlappingPeriodError,
)
from timesheet_api.models.weekly_log import WeeklyLog
from timesheet_api.validators import validate_new_period, validate_updated_period


def _period(id, user_id, date_from, date_to, is_deleted=False):
    return WeeklyLog(id=id, user_id=user_id, date_from=date_from, date_to=date_to, is_deleted=is_deleted)


def test_seven_day_period_is_accepted():
    validate_new_period(1, date(2024, 1, 1), date(2024, 1, 7), [])


def test_end_before_start_is_rejected():
    with pytest.raises(InvalidRangeError):
        validate_new_period(1, date(2024, 1, 7), date(2024, 1, 1), [])


@pytest.mark.parametrize("date_to", [date(2024, 1, 1), date(2024, 1, 6), date(2024, 1, 8)])
def test_period_must_span_exactly_seven_days(date_to):
    with pytest.raises(InvalidDurationError) as exc_info:
        validate_new_period(1, date(2024, 1, 1), date_to, [])
    assert exc_info.value.code == "InvalidDuration"


def test_overlapping_period_of_same_owner_is_rejected():
    existing = [_period(1, 1, date(2024, 1, 1), date(2024, 1, 7))]
    with pytest.raises(OverlappingPeriodError):
        validate_new_period(1, date(2024, 1, 5), date(2024, 1, 11), existing)


def test_adjacent_period_is_accepted():
    existing = [_period(1, 1, date(2024, 1, 1), date(2024, 1, 7))]
    validate_new_period(1, date(2024, 1, 8), date(2024, 1, 14), existing)


def test_deleted_and_foreign_periods_are_ignored():
    existing = [
        _period(1, 1, date(2024, 1, 1), date(2024, 1, 7), is_deleted=True),
        _period(2, 2, date(2024, 1, 1), date(2024, 1, 7)),
    ]
    validate_new_period(1, date(2024, 1, 1), date(2024, 1, 7), existing)


def test_updated_period_does_not_overlap_itself():
    existing = [_period(1, 1, date(2024, 1, 1), date(2024, 1, 7))]
    validate_updated_period(1, 1, date(2024, 1, 2), date(2024, 1, 8), existing)


def test_updated_period_still_checks_other_periods():
    existing = [
        _period(1, 1, date(2024, 1, 1), date(2024, 1, 7)),
        _period(2, 1, date(2024, 1, 8), date(2024, 1, 14)),
    ]
    with pytest.raises(OverlappingPeriodError):
        validate_updated_period(1, 1, date(2024, 1, 3), date(2024, 1, 9), existing)
