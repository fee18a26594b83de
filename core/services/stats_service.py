# =============================================================================
# core/services/stats_service.py - Dashboard Aggregates
# =============================================================================

import logging

from core.models.listing import ListingStatus
from core.models.inquiry import InquiryStatus
from core.models.stats import DashboardStats, MostViewedListing
from core.services.listing_service import ListingService
from core.services.inquiry_service import InquiryService

logger = logging.getLogger(__name__)

MOST_VIEWED_LIMIT = 5
RECENT_INQUIRIES_LIMIT = 5


class StatsService:
    """Aggregate counts for the admin dashboard."""

    @staticmethod
    def get_dashboard_stats() -> DashboardStats:
        """
        Compute dashboard statistics from full listing and inquiry fetches.

        Returns:
            DashboardStats with per-status counts, total views, the five
            most viewed listings and the five newest inquiries
        """
        listings = ListingService.list_listings()
        inquiries = InquiryService.list_inquiries()

        listing_counts = {status: 0 for status in ListingStatus}
        for listing in listings:
            listing_counts[listing.status] += 1

        inquiry_counts = {status: 0 for status in InquiryStatus}
        for inquiry in inquiries:
            inquiry_counts[inquiry.status] += 1

        top = sorted(listings, key=lambda l: l.views, reverse=True)[:MOST_VIEWED_LIMIT]

        stats = DashboardStats(
            total_listings=len(listings),
            active_listings=listing_counts[ListingStatus.ACTIVE],
            featured_listings=listing_counts[ListingStatus.FEATURED],
            unavailable_listings=listing_counts[ListingStatus.UNAVAILABLE],
            total_inquiries=len(inquiries),
            unread_inquiries=inquiry_counts[InquiryStatus.UNREAD],
            read_inquiries=inquiry_counts[InquiryStatus.READ],
            contacted_inquiries=inquiry_counts[InquiryStatus.CONTACTED],
            total_views=sum(listing.views for listing in listings),
            most_viewed=[
                MostViewedListing(id=listing.id, name=listing.name, views=listing.views)
                for listing in top
            ],
            recent_inquiries=inquiries[:RECENT_INQUIRIES_LIMIT],
        )

        logger.debug(
            f"Dashboard stats: {stats.total_listings} listings, "
            f"{stats.total_inquiries} inquiries, {stats.total_views} views"
        )
        return stats
