"""
Manager-facing Pydantic schemas.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from timesheet_api.models.weekly_log import TimesheetStatus
from timesheet_api.schemas.daily_log import DailyLogResponse


class TeamTimesheetResponse(BaseModel):
    """A direct report's weekly log as seen by their manager."""
    id: int
    user_id: int
    user_full_name: str = ""
    user_email: str = ""
    date_from: date
    date_to: date
    total_hours: Decimal
    total_charges: Decimal
    status: TimesheetStatus
    manager_comment: Optional[str] = None
    submitted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TeamTimesheetDetailResponse(TeamTimesheetResponse):
    daily_logs: List[DailyLogResponse] = []


class ApproveTimesheetRequest(BaseModel):
    comment: Optional[str] = None


class DenyTimesheetRequest(BaseModel):
    # Required by the approval workflow; checked there so a missing reason is
    # reported like any other validation failure.
    reason: Optional[str] = None
