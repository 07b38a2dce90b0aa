"""Timesheet service - weekly timesheet workflow."""
import logging
from datetime import datetime
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from hr_workflow.errors import EmptyPayloadError, InvalidStateError, NotFoundError
from hr_workflow.models.common import Page
from hr_workflow.models.timesheet import Timesheet, TimesheetStatus
from hr_workflow.models.user import Principal
from hr_workflow.services.access_policy import authorize_transition, ensure_can_read, require_manager
from hr_workflow.services.aggregation import total_hours, week_end_date
from hr_workflow.services.people import employee_summary, load_people, reviewer_summary
from hr_workflow.services.transitions import apply_transition, review_record
from hr_workflow.services.validation import validate_timesheet
from hr_workflow.services.workflow import TIMESHEET_WORKFLOW
from hr_workflow.utils.dates import to_date, to_datetime
from hr_workflow.utils.object_id import parse_object_id
from hr_workflow.utils.pagination import paginate

logger = logging.getLogger(__name__)


class TimesheetService:
    """Service for handling timesheet operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.timesheets = db["timesheets"]

    def _doc_to_timesheet(self, doc: dict, people: Optional[dict] = None) -> Timesheet:
        """
        Convert database document to Timesheet model.

        Handles datetime to date conversion for the week bounds.
        """
        return Timesheet(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            department=doc.get("department", ""),
            week_start_date=to_date(doc["week_start_date"]),
            week_end_date=to_date(doc["week_end_date"]),
            entries=doc.get("entries", []),
            status=doc["status"],
            total_hours=doc.get("total_hours", 0),
            submitted_at=doc.get("submitted_at"),
            reviewed_at=doc.get("reviewed_at"),
            reviewed_by=doc.get("reviewed_by"),
            rejection_reason=doc.get("rejection_reason"),
            employee=employee_summary(people, doc["user_id"]),
            reviewer=reviewer_summary(people, doc.get("reviewed_by")),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _to_timesheets(self, docs: list[dict]) -> list[Timesheet]:
        people = await load_people(self.db, docs)
        return [self._doc_to_timesheet(doc, people) for doc in docs]

    async def _to_timesheet(self, doc: dict) -> Timesheet:
        return (await self._to_timesheets([doc]))[0]

    async def _get_doc(self, timesheet_id: str) -> dict:
        object_id = parse_object_id(timesheet_id, "Timesheet")
        doc = await self.timesheets.find_one({"_id": object_id})
        if not doc:
            raise NotFoundError("Timesheet not found")
        return doc

    async def save_timesheet(
        self,
        principal: Principal,
        payload: Any,
    ) -> tuple[Timesheet, bool]:
        """
        Create the draft timesheet for a week, or replace its entries.

        One timesheet exists per (employee, week_start_date); saving again
        for the same week updates it while it is still a draft.

        Args:
            principal: Owner of the timesheet
            payload: Raw timesheet payload (week_start_date, entries)

        Returns:
            Tuple of (timesheet, created) where created is False on update

        Raises:
            ValidationError: If the payload is malformed
            InvalidStateError: If the week's timesheet is no longer a draft
        """
        timesheet_save = validate_timesheet(payload)
        week_start = to_datetime(timesheet_save.week_start_date)

        existing = await self.timesheets.find_one({
            "user_id": principal.id,
            "week_start_date": week_start,
        })
        current_status = existing["status"] if existing else None
        owner_id = existing["user_id"] if existing else principal.id

        authorize_transition(principal, TIMESHEET_WORKFLOW.actor_for("save"), owner_id)
        transition = TIMESHEET_WORKFLOW.transition("save", current_status)

        now = datetime.utcnow()
        entries = [entry.model_dump(mode="json") for entry in timesheet_save.entries]

        guard = {
            "user_id": principal.id,
            "week_start_date": week_start,
            "status": transition.to_state,
        }
        changes = {
            "week_end_date": to_datetime(week_end_date(timesheet_save.week_start_date)),
            "entries": entries,
            "total_hours": total_hours(timesheet_save.entries),
            "updated_at": now,
        }
        created = existing is None

        try:
            doc = await self.timesheets.find_one_and_update(
                guard,
                {
                    "$set": changes,
                    "$setOnInsert": {
                        "department": principal.department,
                        "submitted_at": None,
                        "reviewed_at": None,
                        "reviewed_by": None,
                        "rejection_reason": None,
                        "created_at": now,
                    },
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # Another save inserted the week first; update it if still a draft
            doc = await self._update_existing_draft(guard, changes)
            created = False

        logger.info(
            "Timesheet %s %s for %s week of %s",
            doc["_id"], "created" if created else "updated",
            principal.id, timesheet_save.week_start_date,
        )
        return await self._to_timesheet(doc), created

    async def _update_existing_draft(self, guard: dict, changes: dict) -> dict:
        """Apply a save to a week's timesheet created by a concurrent save."""
        week = {"user_id": guard["user_id"], "week_start_date": guard["week_start_date"]}
        current = await self.timesheets.find_one(week)
        current_status = current["status"] if current else None

        if current_status == guard["status"]:
            doc = await self.timesheets.find_one_and_update(
                guard,
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
            if doc is not None:
                return doc
            current = await self.timesheets.find_one(week)
            current_status = current["status"] if current else None

        raise InvalidStateError(
            TIMESHEET_WORKFLOW.state_message("save"),
            current_status=current_status,
        )

    async def get_timesheet(
        self,
        principal: Principal,
        timesheet_id: str,
    ) -> Timesheet:
        """
        Get a single timesheet.

        Raises:
            NotFoundError: If the timesheet does not exist
            AccessDeniedError: If an employee asks for someone else's timesheet
        """
        doc = await self._get_doc(timesheet_id)
        ensure_can_read(principal, doc["user_id"])
        return await self._to_timesheet(doc)

    async def list_my_timesheets(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[TimesheetStatus] = None,
    ) -> Page[Timesheet]:
        """
        List the principal's own timesheets, newest week first.

        Args:
            principal: Owner
            page: 1-based page number
            limit: Page size
            status: Optional status filter
        """
        query = {"user_id": principal.id}
        if status:
            query["status"] = TimesheetStatus(status).value

        return await paginate(
            self.timesheets,
            query,
            [("week_start_date", DESCENDING)],
            page,
            limit,
            self._to_timesheets,
        )

    async def list_pending_timesheets(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        department: Optional[str] = None,
    ) -> Page[Timesheet]:
        """
        List submitted timesheets awaiting review, oldest submission first.

        Raises:
            AccessDeniedError: If the principal is not a manager
        """
        require_manager(principal)

        query = {"status": TimesheetStatus.SUBMITTED.value}
        if department:
            query["department"] = department

        return await paginate(
            self.timesheets,
            query,
            [("submitted_at", ASCENDING)],
            page,
            limit,
            self._to_timesheets,
        )

    async def submit_timesheet(
        self,
        principal: Principal,
        timesheet_id: str,
    ) -> Timesheet:
        """
        Submit a draft timesheet for review.

        Raises:
            NotFoundError: If the timesheet does not exist
            AccessDeniedError: If the principal does not own the timesheet
            InvalidStateError: If the timesheet is not a draft
            EmptyPayloadError: If the timesheet has no entries
        """
        doc = await self._get_doc(timesheet_id)
        authorize_transition(principal, TIMESHEET_WORKFLOW.actor_for("submit"), doc["user_id"])
        transition = TIMESHEET_WORKFLOW.transition("submit", doc["status"])

        entries = doc.get("entries") or []
        if not entries:
            raise EmptyPayloadError("Cannot submit empty timesheet")

        now = datetime.utcnow()
        updated_doc = await apply_transition(
            self.timesheets,
            TIMESHEET_WORKFLOW,
            doc["_id"],
            transition,
            {
                "total_hours": total_hours(entries),
                "submitted_at": now,
                "updated_at": now,
            },
            extra_guard={"entries.0": {"$exists": True}},
        )
        return await self._to_timesheet(updated_doc)

    async def review_timesheet(
        self,
        principal: Principal,
        timesheet_id: str,
        action: str,
        rejection_reason: Optional[str] = None,
    ) -> Timesheet:
        """
        Approve or reject a submitted timesheet.

        Raises:
            AccessDeniedError: If the principal is not a manager
            NotFoundError: If the timesheet does not exist
            InvalidStateError: If the timesheet is not submitted
            InvalidActionError: If action is not approve or reject
            ValidationError: If rejecting without a rejection reason
        """
        updated_doc = await review_record(
            self.timesheets,
            TIMESHEET_WORKFLOW,
            principal,
            timesheet_id,
            action,
            rejection_reason,
            label="Timesheet",
            derived=lambda doc: {"total_hours": total_hours(doc.get("entries") or [])},
        )
        return await self._to_timesheet(updated_doc)
