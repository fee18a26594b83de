# =============================================================================
# app/routers/listings.py - Hostel Listing Endpoints
# =============================================================================
# Public reads; creating, editing and deleting require an admin token.
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_user
from app.middleware import limiter
from app.responses import success_response
from core.models.listing import ListingCreate, ListingStatus, ListingUpdate
from core.services.listing_service import ListingService
from core.services.query import LISTING_SORT_KEYS, paginate, search, sort_records

logger = logging.getLogger(__name__)

router = APIRouter()

LISTING_SEARCH_FIELDS = ("name", "location", "description")


@router.get("/listings", dependencies=[Depends(limiter)])
async def list_listings(
    status: Annotated[ListingStatus | None, Query(description="Filter by status")] = None,
    search_text: Annotated[str | None, Query(alias="search", description="Match name, location or description")] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    sort_by: Annotated[str, Query(description=f"One of: {', '.join(LISTING_SORT_KEYS)}")] = "created_at",
    order: Annotated[Literal["asc", "desc"], Query()] = "desc",
):
    """
    List hostel listings.

    Filters by status, then searches, sorts and paginates in memory.
    """
    listings = ListingService.list_listings(status)
    listings = search(listings, search_text, LISTING_SEARCH_FIELDS)
    listings = sort_records(listings, sort_by, order, LISTING_SORT_KEYS)
    items, pagination = paginate(listings, page, limit)

    return success_response(items, pagination=pagination)


@router.post("/listings", status_code=201, dependencies=[Depends(limiter)])
async def create_listing(
    body: ListingCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a listing.

    Upload images first via POST /upload and pass the URLs in `images`.
    """
    listing_id = ListingService.create_listing(body)
    logger.info(f"Listing {listing_id} created by {user.email}")
    return success_response({"id": listing_id}, message="Listing created successfully")


@router.get("/listings/{listing_id}")
async def get_listing(
    listing_id: Annotated[str, Path(description="Listing UUID")],
):
    """Get one listing."""
    return success_response(ListingService.get_listing(listing_id))


@router.put("/listings/{listing_id}")
async def update_listing(
    listing_id: Annotated[str, Path(description="Listing UUID")],
    body: ListingUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Apply a partial update; only fields present in the body change."""
    listing = ListingService.update_listing(listing_id, body)
    return success_response(listing, message="Listing updated successfully")


@router.delete("/listings/{listing_id}")
async def delete_listing(
    listing_id: Annotated[str, Path(description="Listing UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete a listing and its stored images."""
    ListingService.delete_listing(listing_id)
    logger.info(f"Listing {listing_id} deleted by {user.email}")
    return success_response(message="Listing deleted successfully")
