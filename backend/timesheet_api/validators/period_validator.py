"""
Weekly log date-range rules: a period spans exactly seven days and never
overlaps another live period of the same owner.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from timesheet_api.core.exceptions import (
    InvalidDurationError,
    InvalidRangeError,
    OverlappingPeriodError,
)
from timesheet_api.models.weekly_log import WeeklyLog

PERIOD_LENGTH_DAYS = 7


def validate_period_range(date_from: date, date_to: date) -> None:
    """Check ordering and the seven-day length of an inclusive range."""
    if date_to < date_from:
        raise InvalidRangeError("End date must be after or equal to start date.")
    if (date_to - date_from) + timedelta(days=1) != timedelta(days=PERIOD_LENGTH_DAYS):
        raise InvalidDurationError("Timesheet must cover exactly 7 days (one week).")


def _overlaps(existing: WeeklyLog, date_from: date, date_to: date) -> bool:
    return existing.date_from <= date_to and existing.date_to >= date_from


def _check_overlap(
    owner_id: int,
    date_from: date,
    date_to: date,
    existing_periods: Iterable[WeeklyLog],
    exclude_id: Optional[int],
) -> None:
    for existing in existing_periods:
        if existing.is_deleted or existing.user_id != owner_id:
            continue
        if exclude_id is not None and existing.id == exclude_id:
            continue
        if _overlaps(existing, date_from, date_to):
            raise OverlappingPeriodError(
                f"A timesheet already exists that overlaps {date_from} to {date_to} "
                f"({existing.date_from} to {existing.date_to})"
            )


def validate_new_period(
    owner_id: int,
    date_from: date,
    date_to: date,
    existing_periods: Iterable[WeeklyLog],
) -> None:
    """
    Validate a weekly log about to be created.

    Args:
        owner_id: User who will own the period
        date_from: First day, inclusive
        date_to: Last day, inclusive
        existing_periods: Candidate periods to check for overlap; rows owned by
            other users or soft-deleted are ignored

    Raises:
        InvalidRangeError, InvalidDurationError, OverlappingPeriodError
    """
    validate_period_range(date_from, date_to)
    _check_overlap(owner_id, date_from, date_to, existing_periods, exclude_id=None)


def validate_updated_period(
    period_id: int,
    owner_id: int,
    date_from: date,
    date_to: date,
    existing_periods: Iterable[WeeklyLog],
) -> None:
    """Same as ``validate_new_period`` but the period never overlaps itself."""
    validate_period_range(date_from, date_to)
    _check_overlap(owner_id, date_from, date_to, existing_periods, exclude_id=period_id)
