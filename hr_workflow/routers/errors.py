"""Mapping of workflow errors to HTTP responses."""
from fastapi import HTTPException, status

from hr_workflow.errors import (
    AccessDeniedError,
    ConflictError,
    EmptyPayloadError,
    InvalidActionError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    WorkflowError,
)

STATUS_CODES: dict[type[WorkflowError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidActionError: status.HTTP_400_BAD_REQUEST,
    EmptyPayloadError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def to_http_exception(error: WorkflowError) -> HTTPException:
    """
    Translate a workflow error into an HTTPException.

    Validation errors keep their per-field messages in the detail body.
    """
    status_code = STATUS_CODES.get(type(error), status.HTTP_400_BAD_REQUEST)

    if isinstance(error, ValidationError):
        detail = {
            "message": error.message,
            "errors": [field_error.as_dict() for field_error in error.errors],
        }
    else:
        detail = error.message

    return HTTPException(status_code=status_code, detail=detail)
