"""Typed errors raised by the timesheet and time-off workflow.

Every error is recoverable at the request boundary. Callers catch by type;
the transport layer maps each type to a response code.

    WorkflowError
    +-- ValidationError      malformed or out-of-range input
    +-- ConflictError        overlapping time off, lock already held
    +-- InvalidStateError    transition attempted from the wrong status
    +-- InvalidActionError   unrecognized review action
    +-- EmptyPayloadError    submitting a timesheet without entries
    +-- AccessDeniedError    role or ownership check failed
    +-- NotFoundError        unknown or malformed record id
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation message."""

    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class WorkflowError(Exception):
    """Base class for all workflow errors."""

    code: str = "workflow_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorkflowError):
    """Raised when a payload fails field-level checks.

    Carries every failing field, not just the first one.
    """

    code = "validation_error"

    def __init__(self, errors: list[FieldError], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]


class ConflictError(WorkflowError):
    code = "conflict"


class InvalidStateError(WorkflowError):
    code = "invalid_state"

    def __init__(self, message: str, current_status: str | None = None):
        super().__init__(message)
        self.current_status = current_status


class InvalidActionError(WorkflowError):
    code = "invalid_action"

    def __init__(self, action: str):
        super().__init__("Action must be either approve or reject")
        self.action = action


class EmptyPayloadError(WorkflowError):
    code = "empty_payload"


class AccessDeniedError(WorkflowError):
    code = "access_denied"


class NotFoundError(WorkflowError):
    code = "not_found"
