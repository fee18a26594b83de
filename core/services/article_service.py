# =============================================================================
# core/services/article_service.py - News Article Business Logic
# =============================================================================
# Handles news article CRUD, slug lookup and the public reading lists.
# Status and category filters run in memory over a full fetch so the
# store needs no composite indexes.
# =============================================================================

import logging
import re
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import is_valid_uuid, timestamp_sort_key, utc_now_iso
from core.models.article import Article, ArticleCreate, ArticleStatus, ArticleUpdate
from app.exceptions import ArticleNotFoundError, InvalidSlugError, SlugConflictError

logger = logging.getLogger(__name__)

ARTICLES_TABLE = "articles"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """
    Derive a URL slug from a title.

    Example:
        slugify("Top 5 Study Spots!") -> "top-5-study-spots"
    """
    return _SLUG_RE.sub("-", title.lower()).strip("-")


def _newest_published_first(articles: list[Article]) -> list[Article]:
    return sorted(
        articles,
        key=lambda a: timestamp_sort_key(a.published_at or a.created_at),
        reverse=True,
    )


class ArticleService:
    """Service for news article operations."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def _fetch_all() -> list[Article]:
        rows = SupabaseClient.fetch_all(ARTICLES_TABLE, order_by="created_at", desc=True)
        return [Article.from_record(row) for row in rows]

    @staticmethod
    def list_all() -> list[Article]:
        """Every article regardless of status, newest created first."""
        return ArticleService._fetch_all()

    @staticmethod
    def list_published() -> list[Article]:
        """Published articles, newest publish date (else creation date) first."""
        return _newest_published_first(
            [a for a in ArticleService._fetch_all() if a.status == ArticleStatus.PUBLISHED]
        )

    @staticmethod
    def list_by_status(status: ArticleStatus) -> list[Article]:
        """Articles with the given status, newest created first."""
        articles = [a for a in ArticleService._fetch_all() if a.status == status]
        return sorted(articles, key=lambda a: timestamp_sort_key(a.created_at), reverse=True)

    @staticmethod
    def list_by_category(category: str) -> list[Article]:
        """Published articles in a category."""
        return [a for a in ArticleService.list_published() if a.category == category]

    @staticmethod
    def recent(limit: int = 5) -> list[Article]:
        """Latest published articles."""
        return ArticleService.list_published()[:limit]

    @staticmethod
    def popular(limit: int = 5) -> list[Article]:
        """Most viewed published articles."""
        published = [a for a in ArticleService._fetch_all() if a.status == ArticleStatus.PUBLISHED]
        return sorted(published, key=lambda a: a.views, reverse=True)[:limit]

    @staticmethod
    def get_article(article_id: str) -> Article | None:
        """Article by id, or None."""
        row = SupabaseClient.fetch_by_id(ARTICLES_TABLE, article_id)
        return Article.from_record(row) if row else None

    @staticmethod
    def get_by_slug(slug: str) -> Article | None:
        """Article by slug, or None."""
        row = SupabaseClient.fetch_one_by(ARTICLES_TABLE, "slug", slug)
        return Article.from_record(row) if row else None

    @staticmethod
    def get_by_id_or_slug(value: str) -> Article:
        """
        Resolve an article from either its id or its slug.

        The id lookup is skipped for values that are not UUIDs.

        Raises:
            ArticleNotFoundError: If neither matches
        """
        article = ArticleService.get_article(value) if is_valid_uuid(value) else None
        if article is None:
            article = ArticleService.get_by_slug(value)
        if article is None:
            raise ArticleNotFoundError(value)
        return article

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def _checked_slug(source: str, exclude_id: str | None = None) -> str:
        """Slugify `source` and make sure the result is usable and unclaimed."""
        slug = slugify(source)
        if not slug:
            raise InvalidSlugError(source)
        existing = ArticleService.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise SlugConflictError(slug)
        return slug

    @staticmethod
    def _stamp_publish_date(record: dict[str, Any], status: str | None) -> None:
        if status == ArticleStatus.PUBLISHED.value and not record.get("published_at"):
            record["published_at"] = datetime.now(timezone.utc).isoformat()

    @staticmethod
    def create_article(data: ArticleCreate) -> Article:
        """
        Create an article.

        The slug defaults to slugify(title) and must be unique. Publishing
        without a publish date stamps the current time.

        Raises:
            InvalidSlugError: If the slug would be empty
            SlugConflictError: If the slug is taken
        """
        record = data.model_dump(mode="json")
        record["slug"] = ArticleService._checked_slug(data.slug or data.title)

        now = utc_now_iso()
        record.update({"views": 0, "created_at": now, "updated_at": now})
        ArticleService._stamp_publish_date(record, record["status"])

        row = SupabaseClient.insert(ARTICLES_TABLE, record)
        logger.info(f"Created article: {row['id']} ({record['slug']})")
        return Article.from_record(row)

    @staticmethod
    def update_article(article_id: str, updates: ArticleUpdate) -> Article:
        """
        Apply a partial update.

        Raises:
            ArticleNotFoundError: If the article doesn't exist
            InvalidSlugError: If the new slug would be empty
            SlugConflictError: If the new slug is taken
        """
        existing = ArticleService.get_article(article_id)
        if existing is None:
            raise ArticleNotFoundError(article_id)

        update_data = updates.model_dump(mode="json", exclude_unset=True)
        if update_data.get("slug"):
            update_data["slug"] = ArticleService._checked_slug(update_data["slug"], exclude_id=existing.id)

        if "published_at" not in update_data and existing.published_at is None:
            ArticleService._stamp_publish_date(update_data, update_data.get("status"))
        update_data["updated_at"] = utc_now_iso()

        row = SupabaseClient.update(ARTICLES_TABLE, existing.id, update_data)
        if not row:
            raise ArticleNotFoundError(article_id)

        logger.info(f"Updated article: {existing.id}")
        return Article.from_record(row)

    @staticmethod
    def delete_article(article_id: str) -> None:
        """
        Delete an article.

        Raises:
            ArticleNotFoundError: If the article doesn't exist
        """
        if not SupabaseClient.delete(ARTICLES_TABLE, article_id):
            raise ArticleNotFoundError(article_id)
        logger.info(f"Deleted article: {article_id}")

    @staticmethod
    def increment_views(article_id: str) -> None:
        """
        Add one to an article's view counter.

        Never raises; a failed increment must not fail a page view.
        """
        try:
            row = SupabaseClient.fetch_by_id(ARTICLES_TABLE, article_id)
            if not row:
                return
            SupabaseClient.update(ARTICLES_TABLE, article_id, {"views": (row.get("views") or 0) + 1})
        except SupabaseClientError as e:
            logger.warning(f"Failed to increment views for article {article_id}: {e}")
