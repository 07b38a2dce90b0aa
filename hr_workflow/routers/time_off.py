"""Time-off router - time-off request endpoints."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from hr_workflow.config import settings
from hr_workflow.database import get_database
from hr_workflow.dependencies import get_current_principal
from hr_workflow.errors import WorkflowError
from hr_workflow.models.common import Page, ReviewRequest
from hr_workflow.models.time_off import TimeOffRequest, TimeOffStatus
from hr_workflow.models.user import Principal
from hr_workflow.routers.errors import to_http_exception
from hr_workflow.services.time_off_service import TimeOffService


router = APIRouter(prefix="/time-off", tags=["time-off"])


@router.post("", response_model=TimeOffRequest, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Request time off.

    - Body: from_date, to_date, reason
    - 409 if the dates overlap a pending or approved request
    """
    service = TimeOffService(db)
    try:
        return await service.create_request(principal, payload)
    except WorkflowError as e:
        raise to_http_exception(e)


@router.get("/my", response_model=Page[TimeOffRequest])
async def list_my_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status_filter: Optional[TimeOffStatus] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """List the authenticated user's time-off requests, newest first."""
    service = TimeOffService(db)
    return await service.list_my_requests(
        principal,
        page=page,
        limit=limit,
        status=status_filter,
    )


@router.get("/pending", response_model=Page[TimeOffRequest])
async def list_pending_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    department: Optional[str] = Query(None, description="Filter by department"),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    List pending time-off requests.

    - Managers only
    - Oldest request first
    """
    service = TimeOffService(db)
    try:
        return await service.list_pending_requests(
            principal,
            page=page,
            limit=limit,
            department=department,
        )
    except WorkflowError as e:
        raise to_http_exception(e)


@router.get("/{request_id}", response_model=TimeOffRequest)
async def get_request(
    request_id: str,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Get a single time-off request.

    - Employees can only read their own requests
    """
    service = TimeOffService(db)
    try:
        return await service.get_request(principal, request_id)
    except WorkflowError as e:
        raise to_http_exception(e)


@router.post("/{request_id}/review", response_model=TimeOffRequest)
async def review_request(
    request_id: str,
    review: ReviewRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_database),
):
    """
    Approve or reject a pending request.

    - Managers only
    - rejection_reason is required when rejecting
    """
    service = TimeOffService(db)
    try:
        return await service.review_request(
            principal,
            request_id,
            action=review.action,
            rejection_reason=review.rejection_reason,
        )
    except WorkflowError as e:
        raise to_http_exception(e)
