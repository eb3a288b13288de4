"""
Weekly log (timesheet period) and daily log models, plus the status
transition table that governs the approval workflow.
"""

from decimal import Decimal
from typing import Dict, FrozenSet

from sqlalchemy import Column, String, Date, ForeignKey, Numeric, Integer, Boolean, DateTime, Index, text, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from timesheet_api.db.base import Base
from timesheet_api.utils.clock import utcnow


class TimesheetStatus(str, enum.Enum):
    """Timesheet status enumeration."""
    DRAFT = "Draft"
    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


# Approved and Denied are terminal: there is no re-submission path.
TRANSITIONS: Dict[TimesheetStatus, FrozenSet[TimesheetStatus]] = {
    TimesheetStatus.DRAFT: frozenset({TimesheetStatus.PENDING}),
    TimesheetStatus.PENDING: frozenset({TimesheetStatus.APPROVED, TimesheetStatus.DENIED}),
    TimesheetStatus.APPROVED: frozenset(),
    TimesheetStatus.DENIED: frozenset(),
}


def can_transition(current: TimesheetStatus, target: TimesheetStatus) -> bool:
    """Return True if ``current -> target`` is a legal status change."""
    return target in TRANSITIONS[current]


class WeeklyLog(Base):
    """Weekly log model - one 7-day period per owner, totals derived from daily logs."""
    
    __tablename__ = "weekly_logs"
    __table_args__ = (
        Index("ix_weekly_logs_user_range", "user_id", "date_from", "date_to"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    total_hours = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    total_charges = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    status = Column(SQLEnum(TimesheetStatus), nullable=False, default=TimesheetStatus.DRAFT, index=True)
    manager_comment = Column(String(500), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    
    # Optimistic concurrency: concurrent total updates raise StaleDataError
    __mapper_args__ = {"version_id_col": version}
    
    # Relationships
    user = relationship("User", back_populates="weekly_logs")
    daily_logs = relationship("DailyLog", back_populates="weekly_log", order_by="DailyLog.date")


class DailyLog(Base):
    """One calendar day of hours and expenses inside a weekly log."""
    
    __tablename__ = "daily_logs"
    __table_args__ = (
        # At most one live daily log per date in a weekly log
        Index(
            "uq_daily_logs_weekly_log_date_live",
            "weekly_log_id",
            "date",
            unique=True,
            postgresql_where=text("is_deleted = false"),
            sqlite_where=text("is_deleted = 0"),
        ),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    weekly_log_id = Column(Integer, ForeignKey("weekly_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    hours = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    mileage = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    toll_charge = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    parking_fee = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    other_charges = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    comment = Column(String(500), nullable=False, default="")
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    
    # Relationships
    weekly_log = relationship("WeeklyLog", back_populates="daily_logs")


class TimesheetStatusHistory(Base):
    """Audit trail for weekly log status changes."""
    
    __tablename__ = "timesheet_status_history"
    
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    weekly_log_id = Column(Integer, ForeignKey("weekly_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(SQLEnum(TimesheetStatus), nullable=True)
    to_status = Column(SQLEnum(TimesheetStatus), nullable=False)
    changed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    comment = Column(String(500), nullable=True)
    changed_at = Column(DateTime, nullable=False, default=utcnow)
