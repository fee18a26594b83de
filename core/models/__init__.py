# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: Sanitized input base and pagination metadata
# - listing.py: Hostel listing schemas
# - inquiry.py: Student inquiry schemas
# - article.py: News article schemas
# - stats.py: Dashboard statistics
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import PaginationInfo, SanitizedModel

from .listing import (
    AMENITIES,
    Listing,
    ListingCreate,
    ListingStatus,
    ListingUpdate,
)

from .inquiry import (
    Inquiry,
    InquiryCreate,
    InquiryStatus,
    InquiryStatusUpdate,
)

from .article import (
    CATEGORIES,
    Article,
    ArticleCreate,
    ArticleStatus,
    ArticleUpdate,
)

from .stats import DashboardStats, MostViewedListing

__all__ = [
    # Base
    "PaginationInfo",
    "SanitizedModel",
    # Listing
    "AMENITIES",
    "Listing",
    "ListingCreate",
    "ListingStatus",
    "ListingUpdate",
    # Inquiry
    "Inquiry",
    "InquiryCreate",
    "InquiryStatus",
    "InquiryStatusUpdate",
    # Article
    "CATEGORIES",
    "Article",
    "ArticleCreate",
    "ArticleStatus",
    "ArticleUpdate",
    # Stats
    "DashboardStats",
    "MostViewedListing",
]
