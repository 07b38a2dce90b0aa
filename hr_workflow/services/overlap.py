"""Overlap checker - conflicting time-off detection."""
import logging
from datetime import date
from typing import Optional

from hr_workflow.errors import ConflictError
from hr_workflow.models.time_off import TimeOffStatus
from hr_workflow.utils.dates import to_datetime

logger = logging.getLogger(__name__)

# Requests in these states still block the calendar.
ACTIVE_STATUSES = (TimeOffStatus.PENDING.value, TimeOffStatus.APPROVED.value)


def intervals_overlap(
    first_from: date,
    first_to: date,
    second_from: date,
    second_to: date,
) -> bool:
    """
    Check whether two inclusive date intervals share at least one day.

    Examples:
        >>> intervals_overlap(date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 4), date(2024, 1, 10))
        True
        >>> intervals_overlap(date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 4), date(2024, 1, 10))
        False
    """
    return first_from <= second_to and first_to >= second_from


def overlap_query(user_id: str, from_date: date, to_date: date) -> dict:
    """Build the query matching active requests that overlap [from_date, to_date]."""
    return {
        "user_id": user_id,
        "status": {"$in": list(ACTIVE_STATUSES)},
        "from_date": {"$lte": to_datetime(to_date)},
        "to_date": {"$gte": to_datetime(from_date)},
    }


async def find_overlapping_request(
    collection,
    user_id: str,
    from_date: date,
    to_date: date,
) -> Optional[dict]:
    """
    Find an active request of the employee that overlaps the candidate interval.

    Args:
        collection: time_off_requests collection
        user_id: Owner of the candidate request
        from_date: Candidate start (inclusive)
        to_date: Candidate end (inclusive)

    Returns:
        The first overlapping document, or None
    """
    return await collection.find_one(overlap_query(user_id, from_date, to_date))


async def ensure_no_overlap(
    collection,
    user_id: str,
    from_date: date,
    to_date: date,
) -> None:
    """
    Raise if the candidate interval collides with an active request.

    Raises:
        ConflictError: If an overlapping Pending or Approved request exists
    """
    existing = await find_overlapping_request(collection, user_id, from_date, to_date)
    if existing:
        logger.warning(
            "Time off %s..%s for %s overlaps request %s",
            from_date, to_date, user_id, existing.get("_id"),
        )
        raise ConflictError("You already have a time off request for this period")
