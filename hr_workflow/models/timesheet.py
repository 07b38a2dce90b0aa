"""Timesheet model definitions."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from hr_workflow.models.user import EmployeeSummary, ReviewerSummary


class Weekday(str, Enum):
    """Days a timesheet entry can be booked against."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class TimesheetStatus(str, Enum):
    """Timesheet lifecycle states."""

    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TimesheetEntry(BaseModel):
    """A single day/project line of a timesheet."""

    day: Weekday
    hours: float = Field(ge=0, le=24)
    project: str
    description: Optional[str] = None

    @field_validator("project")
    @classmethod
    def project_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project/Task name is required")
        return value

    @field_validator("description")
    @classmethod
    def description_length(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > 500:
            raise ValueError("Description cannot exceed 500 characters")
        return value


class TimesheetSave(BaseModel):
    """Payload for creating or updating the draft timesheet of a week."""

    week_start_date: date
    entries: list[TimesheetEntry] = Field(min_length=1)


class Timesheet(BaseModel):
    """Full timesheet model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    department: str = ""
    week_start_date: date
    week_end_date: date
    entries: list[TimesheetEntry] = []
    status: TimesheetStatus = TimesheetStatus.DRAFT
    total_hours: float = 0
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    employee: Optional[EmployeeSummary] = None
    reviewer: Optional[ReviewerSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
