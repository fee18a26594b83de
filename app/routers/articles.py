# =============================================================================
# app/routers/articles.py - News Article Endpoints
# =============================================================================
# Anyone can read published articles. Drafts, archived posts and the "all"
# listing need an admin token, as do all writes.
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.exceptions import AuthenticationError
from app.middleware import limiter
from app.responses import success_response
from core.models.article import Article, ArticleCreate, ArticleStatus, ArticleUpdate
from core.services.article_service import ArticleService
from core.services.query import ARTICLE_SORT_KEYS, paginate, search, sort_records

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(limiter)])

ARTICLE_SEARCH_FIELDS = ("title", "excerpt", "content", "author", "tags")


def select_articles(status: str | None, category: str | None) -> list[Article]:
    """
    Resolve the base article set for a listing request.

    A category always means published posts in that category. Otherwise
    "all" returns every article, a known status filters by it, and
    anything else falls back to published posts.
    """
    if category:
        return ArticleService.list_by_category(category)
    if status == "all":
        return ArticleService.list_all()
    if status in {s.value for s in ArticleStatus}:
        return ArticleService.list_by_status(ArticleStatus(status))
    return ArticleService.list_published()


def needs_admin(status: str | None, category: str | None) -> bool:
    """Whether a listing request can reveal unpublished articles."""
    if category or not status:
        return False
    return status == "all" or status in {ArticleStatus.DRAFT.value, ArticleStatus.ARCHIVED.value}


@router.get("/articles")
async def list_articles(
    status: Annotated[str | None, Query(description="draft, published, archived or all")] = None,
    category: Annotated[str | None, Query(description="Published posts in this category")] = None,
    search_text: Annotated[str | None, Query(alias="search", description="Match title, excerpt, content, author or tags")] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 12,
    sort_by: Annotated[str, Query(description=f"One of: {', '.join(ARTICLE_SORT_KEYS)}")] = "published_at",
    order: Annotated[Literal["asc", "desc"], Query()] = "desc",
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """
    List articles.

    Defaults to published articles only.
    """
    if needs_admin(status, category) and user is None:
        raise AuthenticationError()

    articles = select_articles(status, category)
    articles = search(articles, search_text, ARTICLE_SEARCH_FIELDS)
    articles = sort_records(articles, sort_by, order, ARTICLE_SORT_KEYS)
    items, pagination = paginate(articles, page, limit)

    return success_response(items, pagination=pagination)


@router.post("/articles", status_code=201)
async def create_article(
    body: ArticleCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Create an article; the slug is derived from the title when omitted."""
    article = ArticleService.create_article(body)
    logger.info(f"Article {article.id} created by {user.email}")
    return success_response(article, message="News post created successfully")


@router.get("/articles/{id_or_slug}")
async def get_article(
    id_or_slug: Annotated[str, Path(description="Article UUID or slug")],
    background_tasks: BackgroundTasks,
):
    """
    Get one article by id or slug.

    Each read counts as a view; the counter is bumped after responding.
    """
    article = ArticleService.get_by_id_or_slug(id_or_slug)
    background_tasks.add_task(ArticleService.increment_views, article.id)
    return success_response(article)


@router.put("/articles/{article_id}")
async def update_article(
    article_id: Annotated[str, Path(description="Article UUID")],
    body: ArticleUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Apply a partial update."""
    article = ArticleService.update_article(article_id, body)
    return success_response(article, message="News post updated successfully")


@router.delete("/articles/{article_id}")
async def delete_article(
    article_id: Annotated[str, Path(description="Article UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete an article."""
    ArticleService.delete_article(article_id)
    return success_response(message="News post deleted successfully")
