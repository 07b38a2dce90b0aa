"""Owner and reviewer details attached to workflow records."""
from typing import Optional

from bson import ObjectId

from hr_workflow.models.user import EmployeeSummary, ReviewerSummary

SUMMARY_FIELDS = {"first_name": 1, "last_name": 1, "employee_id": 1, "department": 1}


async def load_people(db, docs: list[dict]) -> dict[str, dict]:
    """
    Fetch the owners and reviewers of ``docs`` with a single users query.

    Args:
        db: Database handle
        docs: Timesheet or time-off documents

    Returns:
        User documents keyed by their string id
    """
    user_ids = set()
    for doc in docs:
        user_ids.add(doc.get("user_id"))
        user_ids.add(doc.get("reviewed_by"))

    object_ids = [ObjectId(user_id) for user_id in user_ids if user_id and ObjectId.is_valid(user_id)]
    if not object_ids:
        return {}

    cursor = db["users"].find({"_id": {"$in": object_ids}}, SUMMARY_FIELDS)
    users = await cursor.to_list(length=len(object_ids))
    return {str(user["_id"]): user for user in users}


def employee_summary(people: Optional[dict[str, dict]], user_id: Optional[str]) -> Optional[EmployeeSummary]:
    user = people.get(user_id) if people and user_id else None
    if user is None:
        return None
    return EmployeeSummary(
        id=user_id,
        first_name=user["first_name"],
        last_name=user["last_name"],
        employee_id=user["employee_id"],
        department=user.get("department", ""),
    )


def reviewer_summary(people: Optional[dict[str, dict]], user_id: Optional[str]) -> Optional[ReviewerSummary]:
    user = people.get(user_id) if people and user_id else None
    if user is None:
        return None
    return ReviewerSummary(
        id=user_id,
        first_name=user["first_name"],
        last_name=user["last_name"],
    )
