"""Record id parsing."""
from bson import ObjectId
from bson.errors import InvalidId

from hr_workflow.errors import NotFoundError


def parse_object_id(record_id: str, label: str) -> ObjectId:
    """
    Parse a record id from a request.

    A malformed id cannot name an existing record, so it is reported the
    same way as an unknown one.

    Args:
        record_id: Id string from the request path
        label: Record kind for the error message ("Timesheet")

    Raises:
        NotFoundError: If the id is not a valid ObjectId
    """
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        raise NotFoundError(f"{label} not found") from None
