from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from datetime import date, datetime

_TIME_PATTERN = r"^$|^([01]\d|2[0-3]):[0-5]\d$"

TimesheetStatus = Literal["draft", "pending", "approved", "rejected", "invoiced"]


class DayEntry(BaseModel):
    start: str = Field(default="", pattern=_TIME_PATTERN)
    end: str = Field(default="", pattern=_TIME_PATTERN)
    notes: str = ""


class WeeklyHours(BaseModel):
    monday: DayEntry = Field(default_factory=DayEntry)
    tuesday: DayEntry = Field(default_factory=DayEntry)
    wednesday: DayEntry = Field(default_factory=DayEntry)
    thursday: DayEntry = Field(default_factory=DayEntry)
    friday: DayEntry = Field(default_factory=DayEntry)
    saturday: DayEntry = Field(default_factory=DayEntry)
    sunday: DayEntry = Field(default_factory=DayEntry)


class TimesheetCreate(BaseModel):
    project_id: int
    week_starting: date
    daily_hours: WeeklyHours
    status: Literal["draft", "pending"] = "draft"
    notes: Optional[str] = None


class TimesheetUpdate(BaseModel):
    project_id: Optional[int] = None
    daily_hours: Optional[WeeklyHours] = None
    notes: Optional[str] = None
    status: Optional[TimesheetStatus] = None


class TimesheetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reference_number: Optional[str] = None
    user_id: int
    project_id: int
    week_starting: date
    daily_hours: dict
    total_hours: float
    normal_hours: float
    overtime_hours: float
    normal_rate: float
    overtime_rate: float
    total_cost: float
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TimesheetListItem(TimesheetResponse):
    """Timesheet plus the display names admins see in lists."""
    project_name: Optional[str] = None
    username: Optional[str] = None


class WeekLookupResponse(BaseModel):
    exists: bool
    timesheet: Optional[TimesheetResponse] = None
