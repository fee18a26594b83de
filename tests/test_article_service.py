# =============================================================================
# tests/test_article_service.py - Article Service Tests
# =============================================================================
# Covers slug derivation, id-or-slug lookup, slug conflicts, publish date
# stamping and the public reading lists.
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import ArticleNotFoundError, InvalidSlugError, SlugConflictError
from core.models import ArticleCreate, ArticleStatus, ArticleUpdate
from core.services.article_service import ARTICLES_TABLE, ArticleService, slugify


@pytest.fixture
def mock_db():
    with patch("core.services.article_service.SupabaseClient") as db:
        yield db


def _create_payload(**overrides):
    data = {
        "title": "Top 5 Study Spots!",
        "excerpt": "Short",
        "content": "Body",
        "author": "Staylo Team",
        "category": "Student Life",
        "featured_image": "https://cdn.example.com/a.jpg",
    }
    data.update(overrides)
    return ArticleCreate(**data)


def _row(article_id, status="published", views=0, published_at=None, created_at=None, category="Events"):
    return {
        "id": article_id,
        "title": article_id,
        "slug": article_id,
        "status": status,
        "views": views,
        "category": category,
        "published_at": published_at,
        "created_at": created_at,
    }


class TestSlugify:
    """Tests for slug derivation."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Top 5 Study Spots!", "top-5-study-spots"),
            ("  Hello,   World  ", "hello-world"),
            ("Tips & Tricks", "tips-tricks"),
            ("already-a-slug", "already-a-slug"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, title, expected):
        assert slugify(title) == expected


class TestReadingLists:
    """Tests for published, status, category and popularity lists."""

    @pytest.fixture
    def rows(self):
        return [
            _row("old", published_at="2024-01-01T00:00:00Z", views=50),
            _row("new", published_at="2024-03-01T00:00:00Z", views=5, category="Travel"),
            _row("no-date", created_at="2024-02-01T00:00:00Z", views=20),
            _row("draft", status="draft", created_at="2024-04-01T00:00:00Z", views=999),
        ]

    def test_published_newest_first(self, mock_db, rows):
        mock_db.fetch_all.return_value = rows
        assert [a.id for a in ArticleService.list_published()] == ["new", "no-date", "old"]

    def test_by_status(self, mock_db, rows):
        mock_db.fetch_all.return_value = rows
        assert [a.id for a in ArticleService.list_by_status(ArticleStatus.DRAFT)] == ["draft"]

    def test_by_category_is_published_only(self, mock_db, rows):
        rows.append(_row("travel-draft", status="draft", category="Travel"))
        mock_db.fetch_all.return_value = rows
        assert [a.id for a in ArticleService.list_by_category("Travel")] == ["new"]

    def test_popular_excludes_drafts(self, mock_db, rows):
        mock_db.fetch_all.return_value = rows
        assert [a.id for a in ArticleService.popular(2)] == ["old", "no-date"]

    def test_recent_limit(self, mock_db, rows):
        mock_db.fetch_all.return_value = rows
        assert [a.id for a in ArticleService.recent(1)] == ["new"]


class TestGetByIdOrSlug:
    """Tests for ArticleService.get_by_id_or_slug."""

    def test_uuid_hits_id_lookup(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row

        article = ArticleService.get_by_id_or_slug(sample_article_row["id"])

        assert article.id == sample_article_row["id"]
        mock_db.fetch_one_by.assert_not_called()

    def test_slug_skips_id_lookup(self, mock_db, sample_article_row):
        mock_db.fetch_one_by.return_value = sample_article_row

        article = ArticleService.get_by_id_or_slug("top-5-study-spots-on-campus")

        assert article.slug == "top-5-study-spots-on-campus"
        mock_db.fetch_by_id.assert_not_called()
        mock_db.fetch_one_by.assert_called_once_with(ARTICLES_TABLE, "slug", "top-5-study-spots-on-campus")

    def test_unknown_uuid_falls_back_to_slug(self, mock_db):
        mock_db.fetch_by_id.return_value = None
        mock_db.fetch_one_by.return_value = None

        with pytest.raises(ArticleNotFoundError):
            ArticleService.get_by_id_or_slug("33333333-3333-4333-8333-000000000000")
        mock_db.fetch_one_by.assert_called_once()


class TestCreateArticle:
    """Tests for ArticleService.create_article."""

    def test_slug_from_title(self, mock_db):
        mock_db.fetch_one_by.return_value = None
        mock_db.insert.side_effect = lambda table, record: {**record, "id": "new-id"}

        article = ArticleService.create_article(_create_payload())

        assert article.slug == "top-5-study-spots"
        assert article.views == 0
        assert article.published_at is None

    def test_explicit_slug_is_normalized(self, mock_db):
        mock_db.fetch_one_by.return_value = None
        mock_db.insert.side_effect = lambda table, record: {**record, "id": "new-id"}

        article = ArticleService.create_article(_create_payload(slug="My Custom Slug"))

        assert article.slug == "my-custom-slug"

    def test_publishing_stamps_date(self, mock_db):
        mock_db.fetch_one_by.return_value = None
        mock_db.insert.side_effect = lambda table, record: {**record, "id": "new-id"}

        article = ArticleService.create_article(_create_payload(status="published"))

        assert article.published_at is not None

    def test_slug_conflict(self, mock_db, sample_article_row):
        mock_db.fetch_one_by.return_value = sample_article_row

        with pytest.raises(SlugConflictError):
            ArticleService.create_article(_create_payload(title="Top 5 Study Spots on Campus"))
        mock_db.insert.assert_not_called()

    @pytest.mark.parametrize("overrides", [{"title": "!!!"}, {"title": "\u6821\u56ed"}, {"slug": "--"}])
    def test_empty_slug_rejected(self, mock_db, overrides):
        with pytest.raises(InvalidSlugError) as exc_info:
            ArticleService.create_article(_create_payload(**overrides))
        assert exc_info.value.status_code == 400
        mock_db.fetch_one_by.assert_not_called()
        mock_db.insert.assert_not_called()


class TestUpdateArticle:
    """Tests for ArticleService.update_article."""

    def test_missing_raises(self, mock_db):
        mock_db.fetch_by_id.return_value = None
        with pytest.raises(ArticleNotFoundError):
            ArticleService.update_article("missing", ArticleUpdate(title="x"))

    def test_keeping_own_slug_is_not_a_conflict(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row
        mock_db.fetch_one_by.return_value = sample_article_row
        mock_db.update.return_value = sample_article_row

        ArticleService.update_article(sample_article_row["id"], ArticleUpdate(slug=sample_article_row["slug"]))

        mock_db.update.assert_called_once()

    def test_taken_slug_conflicts(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row
        mock_db.fetch_one_by.return_value = {**sample_article_row, "id": "someone-else"}

        with pytest.raises(SlugConflictError):
            ArticleService.update_article(sample_article_row["id"], ArticleUpdate(slug="Taken Slug"))

    def test_empty_slug_rejected(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row

        with pytest.raises(InvalidSlugError):
            ArticleService.update_article(sample_article_row["id"], ArticleUpdate(slug="--"))
        mock_db.update.assert_not_called()

    def test_first_publish_stamps_date(self, mock_db, sample_article_row):
        draft = {**sample_article_row, "status": "draft", "published_at": None}
        mock_db.fetch_by_id.return_value = draft
        mock_db.update.return_value = draft

        ArticleService.update_article(draft["id"], ArticleUpdate(status="published"))

        _, _, update_data = mock_db.update.call_args.args
        assert update_data["status"] == "published"
        assert update_data["published_at"]

    def test_republish_keeps_original_date(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row
        mock_db.update.return_value = sample_article_row

        ArticleService.update_article(sample_article_row["id"], ArticleUpdate(status="published"))

        _, _, update_data = mock_db.update.call_args.args
        assert "published_at" not in update_data


class TestDeleteAndViews:
    """Tests for delete and view counting."""

    def test_delete_missing_raises(self, mock_db):
        mock_db.delete.return_value = False
        with pytest.raises(ArticleNotFoundError):
            ArticleService.delete_article("missing")

    def test_increment_views(self, mock_db, sample_article_row):
        mock_db.fetch_by_id.return_value = sample_article_row
        ArticleService.increment_views(sample_article_row["id"])
        mock_db.update.assert_called_once_with(ARTICLES_TABLE, sample_article_row["id"], {"views": 41})
