# =============================================================================
# app/routers/inquiries.py - Student Inquiry Endpoints
# =============================================================================
# Students submit inquiries without signing in; everything else is admin-only.
# Notifications for a new inquiry run on the Celery "notifications" queue.
# =============================================================================

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response
from kombu.exceptions import OperationalError

from app.auth import AuthUser, get_current_user
from app.middleware import limiter
from app.responses import success_response
from core.models.inquiry import Inquiry, InquiryCreate, InquiryStatus, InquiryStatusUpdate
from core.services.inquiry_service import InquiryService
from workers.tasks import notify_new_inquiry

logger = logging.getLogger(__name__)

router = APIRouter()


def queue_inquiry_notifications(inquiry: Inquiry) -> bool:
    """
    Enqueue admin and student notifications for a new inquiry.

    Returns:
        False if the broker is unreachable; the inquiry is already stored
    """
    try:
        notify_new_inquiry.delay(inquiry.model_dump(mode="json"))
    except OperationalError as e:
        logger.error(f"Could not queue notifications for inquiry {inquiry.id}: {e}")
        return False
    return True


@router.get("/inquiries", dependencies=[Depends(limiter)])
async def list_inquiries(
    status: Annotated[InquiryStatus | None, Query(description="Filter by status")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """List inquiries, newest first."""
    return success_response(InquiryService.list_inquiries(status))


@router.post("/inquiries", status_code=201, dependencies=[Depends(limiter)])
async def submit_inquiry(body: InquiryCreate):
    """
    Submit an inquiry about a hostel.

    The response does not wait for notification delivery.
    """
    inquiry = InquiryService.create_inquiry(body)
    queue_inquiry_notifications(inquiry)
    return success_response({"id": inquiry.id}, message="Inquiry submitted successfully")


@router.get("/inquiries/export")
async def export_inquiries(
    status: Annotated[InquiryStatus | None, Query(description="Filter by status")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """Download inquiries as CSV."""
    csv_text = InquiryService.export_csv(InquiryService.list_inquiries(status))
    filename = f"inquiries-{date.today().isoformat()}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/inquiries/{inquiry_id}")
async def get_inquiry(
    inquiry_id: Annotated[str, Path(description="Inquiry UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Get one inquiry."""
    return success_response(InquiryService.get_inquiry(inquiry_id))


@router.put("/inquiries/{inquiry_id}")
async def update_inquiry_status(
    inquiry_id: Annotated[str, Path(description="Inquiry UUID")],
    body: InquiryStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Change an inquiry's status (unread, read, contacted)."""
    inquiry = InquiryService.update_status(inquiry_id, body.status)
    return success_response(inquiry, message="Inquiry updated successfully")


@router.delete("/inquiries/{inquiry_id}")
async def delete_inquiry(
    inquiry_id: Annotated[str, Path(description="Inquiry UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete an inquiry."""
    InquiryService.delete_inquiry(inquiry_id)
    return success_response(message="Inquiry deleted successfully")
