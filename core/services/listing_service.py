# =============================================================================
# core/services/listing_service.py - Listing Business Logic
# =============================================================================
# Handles hostel listing CRUD operations and view counting.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import utc_now_iso
from core.models.listing import Listing, ListingCreate, ListingStatus, ListingUpdate
from core.services.storage_service import StorageService
from app.exceptions import ListingNotFoundError

logger = logging.getLogger(__name__)

LISTINGS_TABLE = "listings"


class ListingService:
    """
    Service for hostel listing operations.

    Provides a clean interface between API routes/pages and the store.
    """

    @staticmethod
    def create_listing(data: ListingCreate, image_urls: list[str] | None = None) -> str:
        """
        Create a new listing.

        Args:
            data: Validated listing input
            image_urls: Uploaded image URLs (appended to data.images)

        Returns:
            The new listing id
        """
        now = utc_now_iso()
        record = data.model_dump(mode="json")
        record["images"] = list(data.images) + list(image_urls or [])
        record["views"] = 0
        record["created_at"] = now
        record["updated_at"] = now

        listing = SupabaseClient.insert(LISTINGS_TABLE, record)
        logger.info(f"Created listing: {listing['id']} ({data.name})")
        return str(listing["id"])

    @staticmethod
    def get_listing(listing_id: str) -> Listing:
        """
        Get a listing by ID.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
        """
        row = SupabaseClient.fetch_by_id(LISTINGS_TABLE, listing_id)
        if not row:
            raise ListingNotFoundError(str(listing_id))
        return Listing.from_record(row)

    @staticmethod
    def list_listings(status: ListingStatus | None = None) -> list[Listing]:
        """
        List listings, newest first.

        Args:
            status: Optional status filter
        """
        filters = {"status": status.value} if status else None
        rows = SupabaseClient.fetch_all(LISTINGS_TABLE, order_by="created_at", desc=True, filters=filters)
        return [Listing.from_record(row) for row in rows]

    @staticmethod
    def update_listing(listing_id: str, updates: ListingUpdate | dict[str, Any]) -> Listing:
        """
        Apply a partial update.

        Only fields set on `updates` are written; updated_at is refreshed.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
        """
        if isinstance(updates, ListingUpdate):
            update_data = updates.model_dump(mode="json", exclude_unset=True)
        else:
            update_data = dict(updates)

        update_data["updated_at"] = utc_now_iso()

        row = SupabaseClient.update(LISTINGS_TABLE, listing_id, update_data)
        if not row:
            raise ListingNotFoundError(str(listing_id))

        logger.info(f"Updated listing: {listing_id} ({', '.join(sorted(update_data))})")
        return Listing.from_record(row)

    @staticmethod
    def delete_listing(listing_id: str) -> None:
        """
        Delete a listing and, best-effort, its images.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
        """
        listing = ListingService.get_listing(listing_id)
        SupabaseClient.delete(LISTINGS_TABLE, listing_id)
        logger.info(f"Deleted listing: {listing_id}")

        if listing.images:
            removed = StorageService.delete_images(listing.images)
            logger.info(f"Removed {removed}/{len(listing.images)} images for listing {listing_id}")

    @staticmethod
    def increment_views(listing_id: str) -> None:
        """
        Add one to a listing's view counter.

        Read-modify-write; concurrent views may collapse into one.
        Failures are logged and never raised.
        """
        try:
            row = SupabaseClient.fetch_by_id(LISTINGS_TABLE, listing_id)
            if not row:
                return
            SupabaseClient.update(LISTINGS_TABLE, listing_id, {"views": (row.get("views") or 0) + 1})
        except SupabaseClientError as e:
            logger.warning(f"Failed to increment views for listing {listing_id}: {e}")

    @staticmethod
    def most_viewed(limit: int = 5) -> list[Listing]:
        """Top listings by view count."""
        rows = SupabaseClient.fetch_all(LISTINGS_TABLE, order_by="views", desc=True, limit=limit)
        return [Listing.from_record(row) for row in rows]
