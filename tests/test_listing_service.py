# =============================================================================
# tests/test_listing_service.py - Listing Service Tests
# =============================================================================
# The store is mocked at the SupabaseClient boundary.
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import ListingNotFoundError
from core.models import ListingCreate, ListingStatus, ListingUpdate
from core.services.listing_service import LISTINGS_TABLE, ListingService
from lib.supabase_client import SupabaseClientError


@pytest.fixture
def mock_db():
    with patch("core.services.listing_service.SupabaseClient") as db:
        yield db


class TestCreateListing:
    """Tests for ListingService.create_listing."""

    def test_inserts_record_with_defaults(self, mock_db):
        mock_db.insert.return_value = {"id": "new-id"}
        data = ListingCreate(name="Sunrise", location="Ayeduase", price=3500, images=["a.jpg"])

        listing_id = ListingService.create_listing(data, image_urls=["b.jpg"])

        assert listing_id == "new-id"
        table, record = mock_db.insert.call_args.args
        assert table == LISTINGS_TABLE
        assert record["images"] == ["a.jpg", "b.jpg"]
        assert record["views"] == 0
        assert record["status"] == "active"
        assert record["created_at"] == record["updated_at"]


class TestGetListing:
    """Tests for ListingService.get_listing."""

    def test_found(self, mock_db, sample_listing_row):
        mock_db.fetch_by_id.return_value = sample_listing_row
        listing = ListingService.get_listing(sample_listing_row["id"])
        assert listing.name == "Sunrise Hostel"

    def test_missing_raises(self, mock_db):
        mock_db.fetch_by_id.return_value = None
        with pytest.raises(ListingNotFoundError):
            ListingService.get_listing("missing")


class TestListListings:
    """Tests for ListingService.list_listings."""

    def test_status_filter_passed_to_store(self, mock_db, sample_listing_row):
        mock_db.fetch_all.return_value = [sample_listing_row]

        result = ListingService.list_listings(ListingStatus.FEATURED)

        assert len(result) == 1
        kwargs = mock_db.fetch_all.call_args.kwargs
        assert kwargs["filters"] == {"status": "featured"}
        assert kwargs["order_by"] == "created_at"
        assert kwargs["desc"] is True

    def test_no_filter(self, mock_db):
        mock_db.fetch_all.return_value = []
        assert ListingService.list_listings() == []
        assert mock_db.fetch_all.call_args.kwargs["filters"] is None


class TestUpdateListing:
    """Tests for ListingService.update_listing."""

    def test_writes_only_set_fields(self, mock_db, sample_listing_row):
        mock_db.update.return_value = {**sample_listing_row, "price": 4000}

        listing = ListingService.update_listing(sample_listing_row["id"], ListingUpdate(price=4000))

        assert listing.price == 4000
        _, _, update_data = mock_db.update.call_args.args
        assert set(update_data) == {"price", "updated_at"}

    def test_missing_raises(self, mock_db):
        mock_db.update.return_value = None
        with pytest.raises(ListingNotFoundError):
            ListingService.update_listing("missing", ListingUpdate(price=1))


class TestDeleteListing:
    """Tests for ListingService.delete_listing."""

    def test_deletes_images(self, mock_db, sample_listing_row):
        mock_db.fetch_by_id.return_value = sample_listing_row
        with patch("core.services.listing_service.StorageService") as storage:
            storage.delete_images.return_value = 1
            ListingService.delete_listing(sample_listing_row["id"])

        mock_db.delete.assert_called_once_with(LISTINGS_TABLE, sample_listing_row["id"])
        storage.delete_images.assert_called_once_with(sample_listing_row["images"])

    def test_missing_raises_without_deleting(self, mock_db):
        mock_db.fetch_by_id.return_value = None
        with pytest.raises(ListingNotFoundError):
            ListingService.delete_listing("missing")
        mock_db.delete.assert_not_called()


class TestIncrementViews:
    """Tests for ListingService.increment_views."""

    def test_adds_one(self, mock_db, sample_listing_row):
        mock_db.fetch_by_id.return_value = sample_listing_row
        ListingService.increment_views(sample_listing_row["id"])
        mock_db.update.assert_called_once_with(LISTINGS_TABLE, sample_listing_row["id"], {"views": 13})

    def test_store_errors_are_swallowed(self, mock_db):
        mock_db.fetch_by_id.side_effect = SupabaseClientError("boom")
        ListingService.increment_views("any")
        mock_db.update.assert_not_called()


class TestMostViewed:
    """Tests for ListingService.most_viewed."""

    def test_orders_by_views(self, mock_db, sample_listing_row):
        mock_db.fetch_all.return_value = [sample_listing_row]

        result = ListingService.most_viewed(3)

        assert result[0].views == 12
        mock_db.fetch_all.assert_called_once_with(LISTINGS_TABLE, order_by="views", desc=True, limit=3)
