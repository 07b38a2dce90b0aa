"""Model definitions shared by timesheets and time-off requests."""
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ReviewAction(str, Enum):
    """Decisions a manager can take on a record under review."""

    APPROVE = "approve"
    REJECT = "reject"


class ReviewRequest(BaseModel):
    """Review request body.

    ``action`` stays a plain string so unknown actions reach the workflow
    and fail there with a typed error.
    """

    action: str
    rejection_reason: Optional[str] = None


class Page(BaseModel, Generic[T]):
    """One page of a listing."""

    items: list[T]
    total_pages: int
    current_page: int
    total: int
