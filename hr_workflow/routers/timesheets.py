"""Timesheet router - weekly timesheet endpoints."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from hr_workflow.config import settings
from hr_workflow.database import get_database
from hr_workflow.dependencies import get_current_principal
from hr_workflow.errors import WorkflowError
from hr_workflow.models.common import Page, ReviewRequest
from hr_workflow.models.timesheet import Timesheet, TimesheetStatus
from hr_workflow.models.user import Principal
from hr_workflow.routers.errors import to_http_exception
from hr_workflow.services.timesheet_service import TimesheetService


router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.post("", response_model=Timesheet)
async def save_timesheet(
    response: Response,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Create or update the draft timesheet for a week.

    - Body: week_start_date, entries[{day, hours, project, description?}]
    - 201 when the week's timesheet is created, 200 when it is updated
    - 409 if the week's timesheet has already been submitted
    """
    service = TimesheetService(db)
    try:
        timesheet, created = await service.save_timesheet(principal, payload)
    except WorkflowError as e:
        raise to_http_exception(e)

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return timesheet


@router.get("/my", response_model=Page[Timesheet])
async def list_my_timesheets(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status_filter: Optional[TimesheetStatus] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    List the authenticated user's timesheets.

    - Most recent week first
    - Optional status filter
    """
    service = TimesheetService(db)
    return await service.list_my_timesheets(
        principal,
        page=page,
        limit=limit,
        status=status_filter,
    )


@router.get("/pending", response_model=Page[Timesheet])
async def list_pending_timesheets(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    department: Optional[str] = Query(None, description="Filter by department"),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    List submitted timesheets awaiting review.

    - Managers only
    - Oldest submission first
    """
    service = TimesheetService(db)
    try:
        return await service.list_pending_timesheets(
            principal,
            page=page,
            limit=limit,
            department=department,
        )
    except WorkflowError as e:
        raise to_http_exception(e)


@router.get("/{timesheet_id}", response_model=Timesheet)
async def get_timesheet(
    timesheet_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Get a single timesheet.

    - Employees can only read their own timesheets
    """
    service = TimesheetService(db)
    try:
        return await service.get_timesheet(principal, timesheet_id)
    except WorkflowError as e:
        raise to_http_exception(e)


@router.post("/{timesheet_id}/submit", response_model=Timesheet)
async def submit_timesheet(
    timesheet_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Submit a draft timesheet for review.

    - Owner only
    - Timesheet must be a draft with at least one entry
    """
    service = TimesheetService(db)
    try:
        return await service.submit_timesheet(principal, timesheet_id)
    except WorkflowError as e:
        raise to_http_exception(e)


@router.post("/{timesheet_id}/review", response_model=Timesheet)
async def review_timesheet(
    timesheet_id: str,
    review: ReviewRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Approve or reject a submitted timesheet.

    - Managers only
    - rejection_reason is required when rejecting
    """
    service = TimesheetService(db)
    try:
        return await service.review_timesheet(
            principal,
            timesheet_id,
            action=review.action,
            rejection_reason=review.rejection_reason,
        )
    except WorkflowError as e:
        raise to_http_exception(e)
