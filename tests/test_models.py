# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the listing, inquiry and article models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Incoming strings are stripped of markup
# - Stored rows with missing fields read back with defaults
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    Article,
    ArticleCreate,
    ArticleStatus,
    ArticleUpdate,
    Inquiry,
    InquiryCreate,
    InquiryStatus,
    Listing,
    ListingCreate,
    ListingStatus,
    ListingUpdate,
)
from lib.sanitize import sanitize_text, sanitize_value


# =============================================================================
# Sanitization Tests
# =============================================================================

class TestSanitize:
    """Tests for markup stripping."""

    def test_strips_tags_and_scripts(self):
        """Tags are removed and script bodies dropped entirely."""
        assert sanitize_text("  <b>Hi</b><script>alert(1)</script> ") == "Hi"

    def test_strips_control_characters(self):
        assert sanitize_text("a\x00b\x07c") == "abc"

    def test_plain_text_is_unchanged(self):
        """Ampersands and quotes are kept as-is, not entity-encoded."""
        assert sanitize_text("Tips & Tricks \"2024\"") == "Tips & Tricks \"2024\""

    def test_comparison_signs_survive(self):
        """A bare "<" or ">" is text, not the start of a tag."""
        text = "Rent < 4000 cedis for rooms > 2 beds"
        assert sanitize_text(text) == text

    def test_comments_stripped(self):
        assert sanitize_text("Quiet <!-- hidden --> rooms") == "Quiet  rooms"

    def test_listing_description_keeps_prices(self):
        listing = ListingCreate(
            name="Sunrise",
            location="Ayeduase",
            price=3500,
            description="Rent < 4000 cedis for rooms > 2 beds, 5 min walk",
        )
        assert listing.description == "Rent < 4000 cedis for rooms > 2 beds, 5 min walk"

    def test_nested_values(self):
        data = {"tags": ["<i>a</i>", "b"], "price": 10, "meta": {"x": "<p>y</p>"}}
        assert sanitize_value(data) == {"tags": ["a", "b"], "price": 10, "meta": {"x": "y"}}


# =============================================================================
# Listing Model Tests
# =============================================================================

class TestListingCreate:
    """Tests for ListingCreate model."""

    def test_valid_listing(self):
        """Test creating a valid listing payload."""
        # Arrange
        data = {
            "name": "Sunrise Hostel",
            "location": "Ayeduase",
            "price": 3500,
            "amenities": ["WiFi"],
        }

        # Act
        listing = ListingCreate(**data)

        # Assert
        assert listing.name == "Sunrise Hostel"
        assert listing.price == 3500
        assert listing.status == ListingStatus.ACTIVE
        assert listing.images == []

    def test_markup_is_stripped(self):
        listing = ListingCreate(
            name="<script>x()</script>Sunrise <b>Hostel</b>",
            location="Ayeduase",
            price=1,
        )
        assert listing.name == "Sunrise Hostel"

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            ListingCreate(name="A", location="B", price=0)

    def test_name_required(self):
        """A name made only of markup is empty after sanitizing."""
        with pytest.raises(ValidationError):
            ListingCreate(name="<b></b>", location="B", price=10)

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            ListingCreate(name="A", location="B", price=10, status="sold")


class TestListingUpdate:
    """Tests for ListingUpdate model."""

    def test_only_set_fields_dump(self):
        update = ListingUpdate(price=4000)
        assert update.model_dump(exclude_unset=True) == {"price": 4000}

    def test_rejects_negative_price(self):
        with pytest.raises(ValidationError):
            ListingUpdate(price=-5)


class TestListing:
    """Tests for reading listings from store rows."""

    def test_from_record(self, sample_listing_row):
        listing = Listing.from_record(sample_listing_row)
        assert listing.id == sample_listing_row["id"]
        assert listing.status == ListingStatus.ACTIVE
        assert listing.owner_email is None
        assert listing.created_at.year == 2024

    def test_nulls_become_defaults(self):
        listing = Listing.from_record({"id": "x", "amenities": None, "views": None, "images": None})
        assert listing.amenities == []
        assert listing.views == 0
        assert listing.images == []


# =============================================================================
# Inquiry Model Tests
# =============================================================================

class TestInquiryCreate:
    """Tests for InquiryCreate model."""

    def test_valid_inquiry(self):
        inquiry = InquiryCreate(
            student_name="Ama",
            email="ama@example.com",
            phone="0200000000",
            hostel_interested="Sunrise Hostel",
            message="Hello",
        )
        assert inquiry.email == "ama@example.com"

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@c.com"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError):
            InquiryCreate(
                student_name="Ama",
                email=email,
                phone="0200000000",
                hostel_interested="Sunrise Hostel",
                message="Hello",
            )

    def test_all_fields_required(self):
        with pytest.raises(ValidationError) as exc_info:
            InquiryCreate(student_name="Ama")
        missing = {error["loc"][0] for error in exc_info.value.errors()}
        assert missing == {"email", "phone", "hostel_interested", "message"}


class TestInquiry:
    """Tests for reading inquiries from store rows."""

    def test_from_record(self, sample_inquiry_row):
        inquiry = Inquiry.from_record(sample_inquiry_row)
        assert inquiry.status == InquiryStatus.UNREAD
        assert inquiry.date.month == 2

    def test_missing_status_is_unread(self):
        assert Inquiry.from_record({"id": "x", "status": None}).status == InquiryStatus.UNREAD


# =============================================================================
# Article Model Tests
# =============================================================================

class TestArticleCreate:
    """Tests for ArticleCreate model."""

    def _payload(self, **overrides):
        data = {
            "title": "Welcome",
            "excerpt": "Short",
            "content": "Body",
            "author": "Staylo Team",
            "category": "Events",
            "featured_image": "https://cdn.example.com/a.jpg",
        }
        data.update(overrides)
        return data

    def test_defaults(self):
        article = ArticleCreate(**self._payload())
        assert article.status == ArticleStatus.DRAFT
        assert article.slug is None
        assert article.tags == []

    def test_featured_image_required(self):
        with pytest.raises(ValidationError):
            ArticleCreate(**self._payload(featured_image=""))

    def test_tags_sanitized(self):
        article = ArticleCreate(**self._payload(tags=["<b>study</b>", "campus"]))
        assert article.tags == ["study", "campus"]

    def test_update_rejects_blank_slug(self):
        with pytest.raises(ValidationError):
            ArticleUpdate(slug="")


class TestArticle:
    """Tests for reading articles from store rows."""

    def test_blank_fields_use_defaults(self):
        article = Article.from_record({"id": "x", "author": "", "category": None, "status": None})
        assert article.author == "Admin"
        assert article.category == "General"
        assert article.status == ArticleStatus.DRAFT

    def test_display_date_prefers_published_at(self, sample_article_row):
        article = Article.from_record(sample_article_row)
        assert article.display_date == article.published_at

    def test_display_date_falls_back_to_created_at(self, sample_article_row):
        sample_article_row["published_at"] = None
        article = Article.from_record(sample_article_row)
        assert article.display_date == article.created_at
