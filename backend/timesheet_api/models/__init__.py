"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from timesheet_api.models.user import User, UserRole
from timesheet_api.models.weekly_log import (
    DailyLog,
    TimesheetStatus,
    TimesheetStatusHistory,
    WeeklyLog,
    can_transition,
)

__all__ = [
    "User",
    "UserRole",
    "WeeklyLog",
    "DailyLog",
    "TimesheetStatus",
    "TimesheetStatusHistory",
    "can_transition",
]
