"""Time-off service - time-off request workflow."""
import logging
from datetime import datetime
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING

from hr_workflow.errors import NotFoundError
from hr_workflow.models.common import Page
from hr_workflow.models.time_off import TimeOffRequest, TimeOffStatus
from hr_workflow.models.user import Principal
from hr_workflow.services.access_policy import authorize_transition, ensure_can_read, require_manager
from hr_workflow.services.aggregation import days_requested
from hr_workflow.services.overlap import ensure_no_overlap
from hr_workflow.services.people import employee_summary, load_people, reviewer_summary
from hr_workflow.services.transitions import review_record
from hr_workflow.services.validation import validate_time_off
from hr_workflow.services.workflow import TIME_OFF_WORKFLOW
from hr_workflow.utils.dates import to_date, to_datetime
from hr_workflow.utils.locks import employee_lock
from hr_workflow.utils.object_id import parse_object_id
from hr_workflow.utils.pagination import paginate

logger = logging.getLogger(__name__)


class TimeOffService:
    """Service for handling time-off requests."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.requests = db["time_off_requests"]

    def _doc_to_request(self, doc: dict, people: Optional[dict] = None) -> TimeOffRequest:
        """Convert database document to TimeOffRequest model."""
        return TimeOffRequest(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            department=doc.get("department", ""),
            from_date=to_date(doc["from_date"]),
            to_date=to_date(doc["to_date"]),
            reason=doc["reason"],
            status=doc["status"],
            days_requested=doc["days_requested"],
            reviewed_at=doc.get("reviewed_at"),
            reviewed_by=doc.get("reviewed_by"),
            rejection_reason=doc.get("rejection_reason"),
            employee=employee_summary(people, doc["user_id"]),
            reviewer=reviewer_summary(people, doc.get("reviewed_by")),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _to_requests(self, docs: list[dict]) -> list[TimeOffRequest]:
        people = await load_people(self.db, docs)
        return [self._doc_to_request(doc, people) for doc in docs]

    async def _to_request(self, doc: dict) -> TimeOffRequest:
        return (await self._to_requests([doc]))[0]

    async def create_request(
        self,
        principal: Principal,
        payload: Any,
    ) -> TimeOffRequest:
        """
        Create a pending time-off request.

        The overlap check and the insert run under a per-employee lock, so two
        concurrent requests from one employee cannot both pass the check.

        Args:
            principal: Employee requesting time off
            payload: Raw payload (from_date, to_date, reason)

        Returns:
            Created request

        Raises:
            ValidationError: If the payload is malformed
            ConflictError: If the dates overlap a pending or approved request,
                or another request of the employee is being processed
        """
        time_off = validate_time_off(payload)
        transition = TIME_OFF_WORKFLOW.transition("create", None)
        authorize_transition(principal, transition.actor, principal.id)

        async with employee_lock(self.db, "time_off", principal.id):
            await ensure_no_overlap(
                self.requests,
                principal.id,
                time_off.from_date,
                time_off.to_date,
            )

            now = datetime.utcnow()
            request_doc = {
                "user_id": principal.id,
                "department": principal.department,
                "from_date": to_datetime(time_off.from_date),
                "to_date": to_datetime(time_off.to_date),
                "reason": time_off.reason,
                "status": transition.to_state,
                "days_requested": days_requested(time_off.from_date, time_off.to_date),
                "reviewed_at": None,
                "reviewed_by": None,
                "rejection_reason": None,
                "created_at": now,
                "updated_at": now,
            }

            result = await self.requests.insert_one(request_doc)
            request_doc["_id"] = result.inserted_id

        logger.info(
            "Time off request %s created for %s (%s..%s)",
            request_doc["_id"], principal.id, time_off.from_date, time_off.to_date,
        )
        return await self._to_request(request_doc)

    async def get_request(
        self,
        principal: Principal,
        request_id: str,
    ) -> TimeOffRequest:
        """
        Get a single time-off request.

        Raises:
            NotFoundError: If the request does not exist
            AccessDeniedError: If an employee asks for someone else's request
        """
        object_id = parse_object_id(request_id, "Time off request")
        doc = await self.requests.find_one({"_id": object_id})
        if not doc:
            raise NotFoundError("Time off request not found")

        ensure_can_read(principal, doc["user_id"])
        return await self._to_request(doc)

    async def list_my_requests(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[TimeOffStatus] = None,
    ) -> Page[TimeOffRequest]:
        """List the principal's own requests, newest first."""
        query = {"user_id": principal.id}
        if status:
            query["status"] = TimeOffStatus(status).value

        return await paginate(
            self.requests,
            query,
            [("created_at", DESCENDING)],
            page,
            limit,
            self._to_requests,
        )

    async def list_pending_requests(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        department: Optional[str] = None,
    ) -> Page[TimeOffRequest]:
        """
        List requests awaiting review, oldest first.

        Raises:
            AccessDeniedError: If the principal is not a manager
        """
        require_manager(principal)

        query = {"status": TimeOffStatus.PENDING.value}
        if department:
            query["department"] = department

        return await paginate(
            self.requests,
            query,
            [("created_at", ASCENDING)],
            page,
            limit,
            self._to_requests,
        )

    async def review_request(
        self,
        principal: Principal,
        request_id: str,
        action: str,
        rejection_reason: Optional[str] = None,
    ) -> TimeOffRequest:
        """
        Approve or reject a pending request.

        Raises:
            AccessDeniedError: If the principal is not a manager
            NotFoundError: If the request does not exist
            InvalidStateError: If the request is not pending
            InvalidActionError: If action is not approve or reject
            ValidationError: If rejecting without a rejection reason
        """
        updated_doc = await review_record(
            self.requests,
            TIME_OFF_WORKFLOW,
            principal,
            request_id,
            action,
            rejection_reason,
            label="Time off request",
            derived=lambda doc: {
                "days_requested": days_requested(to_date(doc["from_date"]), to_date(doc["to_date"])),
            },
        )
        return await self._to_request(updated_doc)
