"""
User model. Rows are maintained by the admin subsystem; the timesheet
engine only reads ownership and the manager graph from it.
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from timesheet_api.db.base import Base
from timesheet_api.utils.clock import utcnow


class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "User"
    MANAGER = "Manager"
    ADMIN = "Admin"


class User(Base):
    """Application user."""
    
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.USER, index=True)
    manager_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    
    # Relationships
    manager = relationship("User", remote_side=[id], back_populates="managed_users")
    managed_users = relationship("User", back_populates="manager")
    weekly_logs = relationship("WeeklyLog", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
