"""Persisting workflow transitions as guarded single writes."""
import logging
from datetime import datetime
from typing import Callable, Optional

from pymongo import ReturnDocument

from hr_workflow.errors import InvalidStateError, NotFoundError
from hr_workflow.models.common import ReviewAction
from hr_workflow.models.user import Principal
from hr_workflow.services.access_policy import authorize_transition
from hr_workflow.services.validation import validate_rejection_reason
from hr_workflow.services.workflow import Transition, Workflow
from hr_workflow.utils.object_id import parse_object_id

logger = logging.getLogger(__name__)


async def apply_transition(
    collection,
    workflow: Workflow,
    object_id,
    transition: Transition,
    changes: dict,
    extra_guard: Optional[dict] = None,
) -> dict:
    """
    Move a record along ``transition`` with one conditional update.

    The update only matches while the record is still in
    ``transition.from_state``, so of two concurrent callers at most one wins.

    Args:
        collection: Collection holding the record
        workflow: Workflow the transition belongs to
        object_id: Record id
        transition: Transition to apply
        changes: Extra fields to set alongside the new status
        extra_guard: Additional conditions the record must still satisfy

    Returns:
        The updated document

    Raises:
        InvalidStateError: If the record left ``from_state`` before the write
    """
    guard = {"_id": object_id, "status": transition.from_state}
    if extra_guard:
        guard.update(extra_guard)

    updated_doc = await collection.find_one_and_update(
        guard,
        {"$set": {"status": transition.to_state, **changes}},
        return_document=ReturnDocument.AFTER,
    )

    if updated_doc is None:
        logger.warning(
            "%s %s changed state before %s could be applied",
            workflow.noun, object_id, transition.action,
        )
        raise InvalidStateError(
            workflow.state_message(transition.action),
            current_status=transition.from_state,
        )

    logger.info(
        "%s %s: %s -> %s",
        workflow.noun, object_id, transition.from_state, transition.to_state,
    )
    return updated_doc


async def review_record(
    collection,
    workflow: Workflow,
    principal: Principal,
    record_id: str,
    action: str,
    rejection_reason: Optional[str],
    label: str,
    derived: Callable[[dict], dict],
) -> dict:
    """
    Approve or reject a record awaiting review.

    Order of checks: manager role, record exists, record awaits review,
    action is known, rejection reason present when rejecting.

    Args:
        collection: Collection holding the record
        workflow: Workflow of the record kind
        principal: Reviewing manager
        record_id: Record id from the request
        action: "approve" or "reject"
        rejection_reason: Required when rejecting
        label: Record kind for not-found messages
        derived: Recomputes derived fields from the stored document

    Returns:
        The updated document
    """
    authorize_transition(principal, workflow.actor_for(ReviewAction.APPROVE.value), owner_id="")

    object_id = parse_object_id(record_id, label)
    doc = await collection.find_one({"_id": object_id})
    if not doc:
        raise NotFoundError(f"{label} not found")

    transition = workflow.review(doc["status"], action)
    reason = validate_rejection_reason(ReviewAction(transition.action), rejection_reason)

    now = datetime.utcnow()
    changes = {
        **derived(doc),
        "reviewed_at": now,
        "reviewed_by": principal.id,
        "rejection_reason": reason,
        "updated_at": now,
    }
    return await apply_transition(collection, workflow, object_id, transition, changes)
