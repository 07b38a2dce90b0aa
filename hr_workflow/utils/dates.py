"""Date conversion helpers.

BSON has no date-only type, so calendar dates are stored as midnight
datetimes and converted back when documents are read.
"""
from datetime import date, datetime
from typing import Optional


def to_datetime(value: date) -> datetime:
    """
    Convert a calendar date to a midnight datetime for storage.

    Examples:
        >>> to_datetime(date(2024, 1, 1))
        datetime.datetime(2024, 1, 1, 0, 0)
    """
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, datetime.min.time())


def to_date(value: Optional[date]) -> Optional[date]:
    """Convert a stored datetime back to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value
