"""
Daily log rules: the date lies inside the parent weekly log, one live entry
per date, and every amount stays inside its bounds.
"""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from timesheet_api.core.exceptions import (
    DuplicateDateError,
    DuplicateEntryError,
    FieldValidationError,
    OutOfRangeError,
)
from timesheet_api.models.weekly_log import DailyLog

MAX_HOURS = Decimal("24")
MAX_COMMENT_LENGTH = 500

_MONEY_FIELDS = {
    "mileage": "Mileage",
    "toll_charge": "Toll charge",
    "parking_fee": "Parking fee",
    "other_charges": "Other charges",
}


def validate_entry_fields(
    hours: Decimal,
    mileage: Decimal = Decimal("0"),
    toll_charge: Decimal = Decimal("0"),
    parking_fee: Decimal = Decimal("0"),
    other_charges: Decimal = Decimal("0"),
    comment: Optional[str] = None,
) -> None:
    """Raise ``FieldValidationError`` naming the first field out of bounds."""
    if hours is None or hours < 0 or hours > MAX_HOURS:
        raise FieldValidationError("hours", "Hours must be between 0 and 24.")
    values = {
        "mileage": mileage,
        "toll_charge": toll_charge,
        "parking_fee": parking_fee,
        "other_charges": other_charges,
    }
    for field, value in values.items():
        if value is None or value < 0:
            raise FieldValidationError(field, f"{_MONEY_FIELDS[field]} must be a positive number.")
    if comment is not None and len(comment) > MAX_COMMENT_LENGTH:
        raise FieldValidationError("comment", "Comment cannot exceed 500 characters.")


def validate_entry(
    period_date_from: date,
    period_date_to: date,
    entry_date: date,
    existing_entries: Iterable[DailyLog],
    exclude_entry_id: Optional[int] = None,
) -> None:
    """
    Validate where a daily log may live.

    Args:
        period_date_from: Parent weekly log start, inclusive
        period_date_to: Parent weekly log end, inclusive
        entry_date: Date of the entry being created or moved
        existing_entries: Entries already in the same weekly log
        exclude_entry_id: Entry being updated, ignored in the duplicate scan

    Raises:
        OutOfRangeError, DuplicateDateError
    """
    if entry_date < period_date_from or entry_date > period_date_to:
        raise OutOfRangeError(
            f"Date {entry_date} is outside the weeklylog date range "
            f"({period_date_from} to {period_date_to})"
        )
    for existing in existing_entries:
        if existing.is_deleted:
            continue
        if exclude_entry_id is not None and existing.id == exclude_entry_id:
            continue
        if existing.date == entry_date:
            raise DuplicateDateError(
                f"A daily log already exists for date {entry_date} in this weeklylog"
            )


def validate_batch_dates(dates: Iterable[date]) -> None:
    """Reject a batch that names the same date more than once."""
    repeated = sorted(d for d, count in Counter(dates).items() if count > 1)
    if repeated:
        raise DuplicateDateError(f"Duplicate date {repeated[0]} in request")


def validate_batch_ids(ids: Iterable[int]) -> None:
    """Reject a batch that names the same daily log more than once."""
    repeated = sorted(i for i, count in Counter(ids).items() if count > 1)
    if repeated:
        raise DuplicateEntryError(f"DailyLog with ID {repeated[0]} appears more than once in request")
