"""Time-off request model definitions."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from hr_workflow.models.user import EmployeeSummary, ReviewerSummary


class TimeOffStatus(str, Enum):
    """Time-off request lifecycle states."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TimeOffCreate(BaseModel):
    """Time-off request creation model."""

    from_date: date
    to_date: date
    reason: str

    @field_validator("to_date")
    @classmethod
    def to_date_not_before_from_date(cls, value: date, info: ValidationInfo) -> date:
        from_date = info.data.get("from_date")
        if from_date is not None and value < from_date:
            raise ValueError("To date must be after or equal to from date")
        return value

    @field_validator("reason")
    @classmethod
    def reason_length(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Reason is required")
        if len(value) > 1000:
            raise ValueError("Reason cannot exceed 1000 characters")
        return value


class TimeOffRequest(BaseModel):
    """Full time-off request model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    department: str = ""
    from_date: date
    to_date: date
    reason: str
    status: TimeOffStatus = TimeOffStatus.PENDING
    days_requested: int
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    employee: Optional[EmployeeSummary] = None
    reviewer: Optional[ReviewerSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
