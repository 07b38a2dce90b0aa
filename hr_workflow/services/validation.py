"""Record validator - field-level checks for incoming payloads.

Each entity kind has one declarative pydantic schema. This module is the
single entry point that runs a schema and turns pydantic's error list into
a ``ValidationError`` carrying every failing field.
"""
from typing import Any, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hr_workflow.errors import FieldError, ValidationError
from hr_workflow.models.common import ReviewAction
from hr_workflow.models.time_off import TimeOffCreate
from hr_workflow.models.timesheet import TimesheetSave

M = TypeVar("M", bound=BaseModel)

# Messages for failures pydantic reports with its own wording
# (missing fields, wrong types, bounds, enum membership).
FIELD_MESSAGES = {
    "week_start_date": "Please provide a valid week start date",
    "entries": "At least one entry is required",
    "day": "Invalid day",
    "hours": "Hours must be between 0 and 24",
    "project": "Project/Task name is required",
    "description": "Description cannot exceed 500 characters",
    "from_date": "Please provide a valid from date",
    "to_date": "Please provide a valid to date",
    "reason": "Reason is required",
}

MAX_REJECTION_REASON_LENGTH = 500


def _field_path(loc: tuple) -> str:
    """
    Render a pydantic error location as a dotted path.

    Examples:
        >>> _field_path(("entries", 1, "hours"))
        'entries[1].hours'
        >>> _field_path(("reason",))
        'reason'
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "body"


def _message(error: dict) -> str:
    if error["type"] == "value_error":
        return str(error["ctx"]["error"])

    names = [part for part in error["loc"] if isinstance(part, str)]
    if names and names[-1] in FIELD_MESSAGES:
        return FIELD_MESSAGES[names[-1]]
    return error["msg"]


def validate_payload(model: type[M], payload: Any) -> M:
    """
    Validate a raw payload against a schema.

    Args:
        model: Schema to validate against
        payload: Raw mapping (or an already-built instance of ``model``)

    Returns:
        Validated model instance

    Raises:
        ValidationError: With one FieldError per failing field
    """
    if isinstance(payload, model):
        return payload

    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            FieldError(field=_field_path(error["loc"]), message=_message(error))
            for error in exc.errors()
        ]
        raise ValidationError(errors) from exc


def validate_timesheet(payload: Any) -> TimesheetSave:
    """Validate a timesheet create/update payload."""
    return validate_payload(TimesheetSave, payload)


def validate_time_off(payload: Any) -> TimeOffCreate:
    """Validate a time-off request payload."""
    return validate_payload(TimeOffCreate, payload)


def validate_rejection_reason(
    action: ReviewAction,
    rejection_reason: Optional[str],
) -> Optional[str]:
    """
    Check the rejection reason that accompanies a review decision.

    A reason is mandatory when rejecting and ignored when approving.

    Returns:
        Trimmed rejection reason, or None for approvals

    Raises:
        ValidationError: If a rejection has no reason or the reason is too long
    """
    if action is ReviewAction.APPROVE:
        return None

    reason = (rejection_reason or "").strip()
    if not reason:
        raise ValidationError([
            FieldError("rejection_reason", "Rejection reason is required when rejecting"),
        ])
    if len(reason) > MAX_REJECTION_REASON_LENGTH:
        raise ValidationError([
            FieldError("rejection_reason", "Rejection reason cannot exceed 500 characters"),
        ])
    return reason
