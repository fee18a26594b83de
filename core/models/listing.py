# =============================================================================
# core/models/listing.py - Hostel Listing Schemas
# =============================================================================
# These models define the API contract for hostel listings:
# - ListingStatus: Enum for listing visibility
# - ListingCreate / ListingUpdate: Input for creating and editing listings
# - Listing: Output when returning listing data to clients
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .base import SanitizedModel


# Amenity choices offered by the admin form
AMENITIES = [
    "WiFi",
    "Water Supply",
    "Security",
    "Kitchen",
    "Laundry",
    "Parking",
    "Generator",
    "Study Room",
    "Gym",
    "Air Conditioning",
]


class ListingStatus(str, Enum):
    """
    Possible states for a listing.

    - active: Shown on the public rooms page
    - unavailable: Hidden from the public site
    - featured: Highlighted on the landing page
    """
    ACTIVE = "active"
    UNAVAILABLE = "unavailable"
    FEATURED = "featured"


class ListingCreate(SanitizedModel):
    """
    Schema for creating a listing.

    Images are uploaded first via POST /upload; the returned URLs are
    passed here in `images`.

    Example:
        {
            "name": "Sunrise Hostel",
            "location": "Ayeduase, Kumasi",
            "price": 3500,
            "amenities": ["WiFi", "Security"],
            "owner_name": "Kwame Mensah",
            "owner_contact": "+233 24 000 0000",
            "images": ["https://xxx.supabase.co/storage/v1/object/public/images/listings/..."]
        }
    """

    name: str = Field(..., min_length=1, max_length=200, description="Hostel name")
    location: str = Field(..., min_length=1, max_length=200, description="Area or address")
    price: float = Field(..., gt=0, description="Price per academic year")
    description: str = Field(default="", max_length=5000)
    amenities: list[str] = Field(default_factory=list)
    owner_name: str = Field(default="", max_length=200)
    owner_contact: str = Field(default="", max_length=100)
    owner_email: str | None = Field(default=None, max_length=200)
    status: ListingStatus = Field(default=ListingStatus.ACTIVE)
    images: list[str] = Field(default_factory=list, description="Public image URLs")


class ListingUpdate(SanitizedModel):
    """
    Schema for a partial listing update.

    Only fields present in the request body are written.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, min_length=1, max_length=200)
    price: float | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=5000)
    amenities: list[str] | None = None
    owner_name: str | None = Field(default=None, max_length=200)
    owner_contact: str | None = Field(default=None, max_length=100)
    owner_email: str | None = Field(default=None, max_length=200)
    status: ListingStatus | None = None
    images: list[str] | None = None


class Listing(BaseModel):
    """A stored hostel listing."""

    id: str
    name: str = ""
    location: str = ""
    price: float = 0
    description: str = ""
    amenities: list[str] = Field(default_factory=list)
    owner_name: str = ""
    owner_contact: str = ""
    owner_email: str | None = None
    status: ListingStatus = ListingStatus.ACTIVE
    images: list[str] = Field(default_factory=list)
    views: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Listing":
        """Build from a database row, treating nulls as defaults."""
        return cls(**{key: value for key, value in row.items() if value is not None})
