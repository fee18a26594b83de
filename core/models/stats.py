# =============================================================================
# core/models/stats.py - Dashboard Statistics Schema
# =============================================================================

from pydantic import BaseModel, Field

from .inquiry import Inquiry


class MostViewedListing(BaseModel):
    """Compact listing entry for the dashboard leaderboard."""
    id: str
    name: str
    views: int


class DashboardStats(BaseModel):
    """
    Aggregate counts for the admin dashboard.

    Computed in memory from full listing and inquiry fetches.
    """

    total_listings: int = 0
    active_listings: int = 0
    featured_listings: int = 0
    unavailable_listings: int = 0
    total_inquiries: int = 0
    unread_inquiries: int = 0
    read_inquiries: int = 0
    contacted_inquiries: int = 0
    total_views: int = 0
    most_viewed: list[MostViewedListing] = Field(default_factory=list)
    recent_inquiries: list[Inquiry] = Field(default_factory=list)
