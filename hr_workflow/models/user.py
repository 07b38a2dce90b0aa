"""User and principal model definitions."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator


class Role(str, Enum):
    """Roles known to the workflow."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class UserBase(BaseModel):
    """Base user fields."""

    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    employee_id: str = Field(min_length=1)  # e.g. EMP001, MGR001
    role: Role = Role.EMPLOYEE
    department: str = ""

    @field_validator("first_name", "last_name", "employee_id", "department")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip()


class UserCreate(UserBase):
    """User creation model with password."""

    password: str = Field(min_length=6)


class User(UserBase):
    """User model without password (for API responses)."""

    id: str = Field(alias="_id", serialization_alias="id")
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class UserInDB(User):
    """User model with hashed password (for database storage)."""

    hashed_password: str


class Principal(BaseModel):
    """
    The authenticated actor performing an operation.

    Resolved by the identity layer before any workflow operation runs and
    passed explicitly into every service call.
    """

    id: str
    role: Role
    employee_id: str = ""
    department: str = ""

    model_config = {"frozen": True}

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER


class ReviewerSummary(BaseModel):
    """Name of the manager who reviewed a record."""

    id: str
    first_name: str
    last_name: str


class EmployeeSummary(ReviewerSummary):
    """Owner details shown alongside a timesheet or time-off request."""

    employee_id: str
    department: str = ""
