"""
Daily log Pydantic schemas for request/response validation.
Numeric bounds are enforced by the entry validator so violations come back
as field-level results naming the offending field.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt
from decimal import Decimal


class DailyLogRequest(BaseModel):
    """Create or update schema for a single daily log."""
    date: dt.date
    hours: Decimal
    mileage: Decimal = Decimal("0")
    toll_charge: Decimal = Decimal("0")
    parking_fee: Decimal = Decimal("0")
    other_charges: Decimal = Decimal("0")
    comment: Optional[str] = None


class DailyLogUpdateItem(DailyLogRequest):
    """Bulk update item (id present = update, absent or 0 = create)."""
    id: Optional[int] = None


class UpdateDailyLogsRequest(BaseModel):
    """Replace the daily logs of a weekly log."""
    daily_logs: List[DailyLogUpdateItem] = Field(..., max_length=7)


class DailyLogResponse(BaseModel):
    """Response schema for daily log."""
    id: int
    weekly_log_id: int
    date: dt.date
    hours: Decimal
    mileage: Decimal
    toll_charge: Decimal
    parking_fee: Decimal
    other_charges: Decimal
    comment: str = ""
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
