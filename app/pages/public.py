# =============================================================================
# app/pages/public.py - Public Site Pages
# =============================================================================
# Student-facing pages: landing, rooms, news and the inquiry form.
# Only active/featured listings and published articles are shown.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from app.exceptions import ArticleNotFoundError, ListingNotFoundError
from app.middleware import limiter
from app.pages.templating import templates
from app.routers.inquiries import queue_inquiry_notifications
from core.models.article import ArticleStatus
from core.models.inquiry import InquiryCreate
from core.models.listing import ListingStatus
from core.services.article_service import ArticleService
from core.services.inquiry_service import InquiryService
from core.services.listing_service import ListingService
from core.services.query import paginate, sort_records

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)

ROOMS_PER_PAGE = 6
NEWS_PER_PAGE = 9
POPULAR_POSTS = 5


def _not_found(request: Request, what: str) -> HTMLResponse:
    return templates.TemplateResponse(request, "public/not_found.html", {"what": what}, status_code=404)


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Landing page with featured rooms, newest rooms and recent news."""
    featured = ListingService.list_listings(ListingStatus.FEATURED)[:3]
    latest = ListingService.list_listings(ListingStatus.ACTIVE)[:ROOMS_PER_PAGE]
    return templates.TemplateResponse(
        request,
        "public/home.html",
        {"featured": featured, "latest": latest, "news": ArticleService.recent(3)},
    )


@router.get("/rooms", response_class=HTMLResponse)
async def rooms(request: Request, page: Annotated[int, Query(ge=1)] = 1):
    """Active listings, newest first."""
    listings = sort_records(ListingService.list_listings(ListingStatus.ACTIVE), "created_at", "desc")
    items, pagination = paginate(listings, page, ROOMS_PER_PAGE)
    return templates.TemplateResponse(
        request,
        "public/rooms.html",
        {"listings": items, "pagination": pagination},
    )


def _render_room(
    request: Request,
    listing_id: str,
    form: dict | None = None,
    errors: list[str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    try:
        listing = ListingService.get_listing(listing_id)
    except ListingNotFoundError:
        return _not_found(request, "room")
    if listing.status == ListingStatus.UNAVAILABLE:
        return _not_found(request, "room")

    return templates.TemplateResponse(
        request,
        "public/room_detail.html",
        {
            "listing": listing,
            "form": form or {},
            "errors": errors or [],
            "sent": request.query_params.get("sent") == "1",
        },
        status_code=status_code,
    )


@router.get("/rooms/{listing_id}", response_class=HTMLResponse)
async def room_detail(request: Request, listing_id: str, background_tasks: BackgroundTasks):
    """Listing detail with the inquiry form; each visit counts as a view."""
    response = _render_room(request, listing_id)
    if response.status_code == 200:
        background_tasks.add_task(ListingService.increment_views, listing_id)
    return response


@router.post("/rooms/{listing_id}/inquire", dependencies=[Depends(limiter)])
async def submit_room_inquiry(
    request: Request,
    listing_id: str,
    student_name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    phone: Annotated[str, Form()] = "",
    message: Annotated[str, Form()] = "",
):
    """Store an inquiry about this listing and queue the notifications."""
    try:
        listing = ListingService.get_listing(listing_id)
    except ListingNotFoundError:
        return _not_found(request, "room")

    form = {"student_name": student_name, "email": email, "phone": phone, "message": message}
    try:
        data = InquiryCreate(**form, hostel_interested=listing.name)
    except ValidationError as e:
        errors = [f"{error['loc'][0]}: {error['msg']}" for error in e.errors()]
        return _render_room(request, listing_id, form=form, errors=errors, status_code=400)

    inquiry = InquiryService.create_inquiry(data)
    queue_inquiry_notifications(inquiry)
    return RedirectResponse(f"/rooms/{listing_id}?sent=1", status_code=303)


@router.get("/news", response_class=HTMLResponse)
async def news(
    request: Request,
    page: Annotated[int, Query(ge=1)] = 1,
    category: str | None = None,
):
    """Published articles, newest first, optionally by category."""
    articles = ArticleService.list_by_category(category) if category else ArticleService.list_published()
    items, pagination = paginate(articles, page, NEWS_PER_PAGE)
    return templates.TemplateResponse(
        request,
        "public/news.html",
        {"articles": items, "pagination": pagination, "category": category or ""},
    )


@router.get("/news/{slug}", response_class=HTMLResponse)
async def news_detail(request: Request, slug: str, background_tasks: BackgroundTasks):
    """One published article with the popular posts sidebar."""
    try:
        article = ArticleService.get_by_id_or_slug(slug)
    except ArticleNotFoundError:
        return _not_found(request, "post")
    if article.status != ArticleStatus.PUBLISHED:
        return _not_found(request, "post")

    background_tasks.add_task(ArticleService.increment_views, article.id)
    popular = [a for a in ArticleService.popular(POPULAR_POSTS + 1) if a.id != article.id][:POPULAR_POSTS]
    return templates.TemplateResponse(
        request,
        "public/news_detail.html",
        {"article": article, "popular": popular},
    )
