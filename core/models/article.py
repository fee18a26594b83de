# =============================================================================
# core/models/article.py - News Article Schemas
# =============================================================================
# News posts shown on the public /news page.
# Publish lifecycle: draft -> published -> archived
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .base import SanitizedModel


# Categories offered by the admin form and the public filter bar
CATEGORIES = [
    "Travel",
    "Tourist Guide",
    "City Sights",
    "Communication",
    "Events",
    "Tips & Tricks",
    "Student Life",
    "Accommodation",
]


class ArticleStatus(str, Enum):
    """
    Publish state of an article.

    Only published articles are visible on the public site.
    """
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ArticleCreate(SanitizedModel):
    """
    Schema for creating an article.

    `slug` may be omitted; it is derived from the title.

    Example:
        {
            "title": "Top 5 Study Spots on Campus",
            "excerpt": "Where to get work done between lectures.",
            "content": "...",
            "author": "Staylo Team",
            "category": "Student Life",
            "tags": ["study", "campus"],
            "featured_image": "https://xxx.supabase.co/storage/v1/object/public/images/articles/...",
            "status": "published"
        }
    """

    title: str = Field(..., min_length=1, max_length=300)
    slug: str | None = Field(default=None, max_length=300)
    excerpt: str = Field(..., min_length=1, max_length=1000)
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    tags: list[str] = Field(default_factory=list)
    featured_image: str = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)
    status: ArticleStatus = Field(default=ArticleStatus.DRAFT)
    published_at: datetime | None = None


class ArticleUpdate(SanitizedModel):
    """Schema for a partial article update."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, min_length=1, max_length=300)
    excerpt: str | None = Field(default=None, max_length=1000)
    content: str | None = None
    author: str | None = Field(default=None, max_length=200)
    category: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = None
    featured_image: str | None = None
    images: list[str] | None = None
    status: ArticleStatus | None = None
    published_at: datetime | None = None


class Article(BaseModel):
    """
    A stored article.

    Missing fields read back with the defaults below.
    """

    id: str
    title: str = ""
    slug: str = ""
    excerpt: str = ""
    content: str = ""
    author: str = "Admin"
    category: str = "General"
    tags: list[str] = Field(default_factory=list)
    featured_image: str = ""
    images: list[str] = Field(default_factory=list)
    status: ArticleStatus = ArticleStatus.DRAFT
    views: int = 0
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Article":
        """Build from a database row, treating nulls and blanks as defaults."""
        return cls(**{key: value for key, value in row.items() if value not in (None, "")})

    @property
    def display_date(self) -> datetime | None:
        """Date shown publicly: publish date, else creation date."""
        return self.published_at or self.created_at
