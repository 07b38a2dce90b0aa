"""Aggregator - derived fields for timesheets and time-off requests."""
import math
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

SECONDS_PER_DAY = 24 * 60 * 60


def _hours(entry) -> float:
    if isinstance(entry, Mapping):
        return entry["hours"]
    return entry.hours


def total_hours(entries: Iterable) -> float:
    """
    Sum the hours of timesheet entries.

    Accepts entry models or stored entry documents.

    Examples:
        >>> total_hours([{"hours": 8}, {"hours": 6}])
        14.0
        >>> total_hours([])
        0.0
    """
    return sum((_hours(entry) for entry in entries), 0.0)


def days_requested(from_date: date, to_date: date) -> int:
    """
    Inclusive number of calendar days between two dates.

    Partial days round up, so datetimes with a time component still count
    the day they touch.

    Examples:
        >>> days_requested(date(2024, 2, 1), date(2024, 2, 3))
        3
        >>> days_requested(date(2024, 2, 1), date(2024, 2, 1))
        1
    """
    delta = to_date - from_date
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY) + 1


def week_end_date(week_start_date: date) -> date:
    """Last day of the week that starts on ``week_start_date``."""
    return week_start_date + timedelta(days=6)
