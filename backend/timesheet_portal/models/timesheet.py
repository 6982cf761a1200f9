from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Numeric, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func

from timesheet_portal.database import Base


TIMESHEET_STATUSES = ("draft", "pending", "approved", "rejected", "invoiced")


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "week_starting", name="uq_timesheets_user_week"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference_number = Column(String(50), nullable=True, unique=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    week_starting = Column(Date, nullable=False)

    # {"monday": {"start": "08:00", "end": "16:00", "notes": ""}, ...}
    daily_hours = Column(JSON, nullable=False)

    total_hours = Column(Numeric(10, 2), nullable=False, default=0)
    normal_hours = Column(Numeric(10, 2), nullable=False, default=0)
    overtime_hours = Column(Numeric(10, 2), nullable=False, default=0)
    normal_rate = Column(Numeric(10, 2), nullable=False, default=0)
    overtime_rate = Column(Numeric(10, 2), nullable=False, default=0)
    total_cost = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="draft", index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
