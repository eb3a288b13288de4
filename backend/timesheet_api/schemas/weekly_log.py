"""
Weekly log Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from timesheet_api.models.weekly_log import TimesheetStatus
from timesheet_api.schemas.daily_log import DailyLogResponse


class WeeklyLogRequest(BaseModel):
    """Create or update schema for a weekly log."""
    date_from: date
    date_to: date


class WeeklyLogResponse(BaseModel):
    """Response schema for weekly log."""
    id: int
    user_id: int
    date_from: date
    date_to: date
    total_hours: Decimal
    total_charges: Decimal
    status: TimesheetStatus
    manager_comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WeeklyLogDetailResponse(WeeklyLogResponse):
    """Weekly log with its daily logs."""
    daily_logs: List[DailyLogResponse] = []


class TimesheetStatusHistoryResponse(BaseModel):
    """Response schema for status history entry."""
    id: int
    weekly_log_id: int
    from_status: Optional[TimesheetStatus] = None
    to_status: TimesheetStatus
    changed_by_user_id: Optional[int] = None
    comment: Optional[str] = None
    changed_at: datetime

    class Config:
        from_attributes = True
