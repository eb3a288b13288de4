"""
Pure validation rules for weekly and daily logs.
They raise ``TimesheetError`` subclasses and never touch the database.
"""

from timesheet_api.validators.entry_validator import (
    validate_batch_dates,
    validate_batch_ids,
    validate_entry,
    validate_entry_fields,
)
from timesheet_api.validators.period_validator import (
    validate_new_period,
    validate_period_range,
    validate_updated_period,
)

__all__ = [
    "validate_batch_dates",
    "validate_batch_ids",
    "validate_entry",
    "validate_entry_fields",
    "validate_new_period",
    "validate_period_range",
    "validate_updated_period",
]
