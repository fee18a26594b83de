# =============================================================================
# core/services/inquiry_service.py - Inquiry Business Logic
# =============================================================================
# Handles student inquiry storage, triage status changes and CSV export.
# =============================================================================

import io
import logging

import pandas as pd

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.inquiry import Inquiry, InquiryCreate, InquiryStatus
from app.exceptions import InquiryNotFoundError

logger = logging.getLogger(__name__)

INQUIRIES_TABLE = "inquiries"

# Column headers of the admin CSV export, in order
EXPORT_COLUMNS = ["Name", "Email", "Phone", "Hostel", "Message", "Date", "Status"]


class InquiryService:
    """Service for student inquiry operations."""

    @staticmethod
    def create_inquiry(data: InquiryCreate) -> Inquiry:
        """
        Store a new inquiry.

        New inquiries always start as unread, whatever the client sent.
        """
        now = utc_now_iso()
        record = data.model_dump(mode="json")
        record.update({
            "status": InquiryStatus.UNREAD.value,
            "date": now,
            "created_at": now,
            "updated_at": now,
        })

        row = SupabaseClient.insert(INQUIRIES_TABLE, record)
        logger.info(f"Created inquiry: {row['id']} for '{data.hostel_interested}'")
        return Inquiry.from_record(row)

    @staticmethod
    def get_inquiry(inquiry_id: str) -> Inquiry:
        """
        Get an inquiry by ID.

        Raises:
            InquiryNotFoundError: If the inquiry doesn't exist
        """
        row = SupabaseClient.fetch_by_id(INQUIRIES_TABLE, inquiry_id)
        if not row:
            raise InquiryNotFoundError(str(inquiry_id))
        return Inquiry.from_record(row)

    @staticmethod
    def list_inquiries(status: InquiryStatus | None = None) -> list[Inquiry]:
        """List inquiries, newest first, optionally by status."""
        filters = {"status": status.value} if status else None
        rows = SupabaseClient.fetch_all(INQUIRIES_TABLE, order_by="date", desc=True, filters=filters)
        return [Inquiry.from_record(row) for row in rows]

    @staticmethod
    def update_status(inquiry_id: str, status: InquiryStatus) -> Inquiry:
        """
        Change an inquiry's triage status.

        Raises:
            InquiryNotFoundError: If the inquiry doesn't exist
        """
        row = SupabaseClient.update(
            INQUIRIES_TABLE,
            inquiry_id,
            {"status": status.value, "updated_at": utc_now_iso()},
        )
        if not row:
            raise InquiryNotFoundError(str(inquiry_id))

        logger.info(f"Inquiry {inquiry_id} marked {status.value}")
        return Inquiry.from_record(row)

    @staticmethod
    def delete_inquiry(inquiry_id: str) -> None:
        """
        Delete an inquiry.

        Raises:
            InquiryNotFoundError: If the inquiry doesn't exist
        """
        if not SupabaseClient.delete(INQUIRIES_TABLE, inquiry_id):
            raise InquiryNotFoundError(str(inquiry_id))
        logger.info(f"Deleted inquiry: {inquiry_id}")

    @staticmethod
    def recent_inquiries(limit: int = 10) -> list[Inquiry]:
        """Most recent inquiries by submission date."""
        rows = SupabaseClient.fetch_all(INQUIRIES_TABLE, order_by="date", desc=True, limit=limit)
        return [Inquiry.from_record(row) for row in rows]

    @staticmethod
    def export_csv(inquiries: list[Inquiry]) -> str:
        """
        Render inquiries as CSV text for download.

        Dates are written as YYYY-MM-DD; quoting is handled by pandas.
        """
        df = pd.DataFrame(
            [
                [
                    inquiry.student_name,
                    inquiry.email,
                    inquiry.phone,
                    inquiry.hostel_interested,
                    inquiry.message,
                    inquiry.date.date().isoformat() if inquiry.date else "",
                    inquiry.status.value,
                ]
                for inquiry in inquiries
            ],
            columns=EXPORT_COLUMNS,
        )

        buffer = io.StringIO()
        df.to_csv(buffer, index=False)
        return buffer.getvalue()
