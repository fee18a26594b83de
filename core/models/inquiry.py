# =============================================================================
# core/models/inquiry.py - Student Inquiry Schemas
# =============================================================================
# A student submits an inquiry about a listing from the public site.
# Admins triage it through the status field: unread -> read -> contacted.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .base import SanitizedModel


class InquiryStatus(str, Enum):
    """
    Triage state of an inquiry.

    Any status can be set from any other; the order below is the usual flow.
    """
    UNREAD = "unread"
    READ = "read"
    CONTACTED = "contacted"


class InquiryCreate(SanitizedModel):
    """
    Schema for a public inquiry submission.

    Example:
        {
            "student_name": "Ama Owusu",
            "email": "ama@example.com",
            "phone": "+233 20 000 0000",
            "hostel_interested": "Sunrise Hostel",
            "message": "Is a two-in-a-room available for next semester?"
        }
    """

    student_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(
        ...,
        min_length=3,
        max_length=200,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Contact email address",
    )
    phone: str = Field(..., min_length=1, max_length=50)
    hostel_interested: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class InquiryStatusUpdate(BaseModel):
    """Schema for changing an inquiry's triage status."""

    status: InquiryStatus


class Inquiry(BaseModel):
    """A stored inquiry."""

    id: str
    student_name: str = ""
    email: str = ""
    phone: str = ""
    hostel_interested: str = ""
    message: str = ""
    date: datetime | None = None
    status: InquiryStatus = InquiryStatus.UNREAD
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Inquiry":
        """Build from a database row, treating nulls as defaults."""
        return cls(**{key: value for key, value in row.items() if value is not None})
