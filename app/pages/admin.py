# =============================================================================
# app/pages/admin.py - Admin Panel Pages
# =============================================================================
# Server-rendered admin panel. Every page except login requires the
# HTTP-only admin cookie; forms post back here and redirect (303) on success.
#
# Pages:
# - /admin/login, /admin/logout
# - /admin                      Dashboard
# - /admin/listings[...]        List, create, edit, delete listings
# - /admin/inquiries[...]       List, detail, status, delete, CSV export
# - /admin/articles[...]        List, create, edit, delete articles
# =============================================================================

import logging
from contextlib import contextmanager
from datetime import date
from typing import Annotated, Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile

from app.auth import AuthUser, get_admin_from_cookie, require_admin_page
from app.auth.routes import sign_in
from app.config import settings
from app.exceptions import StayloException
from app.pages.templating import templates
from app.routers.upload import read_image_files
from core.models.article import ArticleCreate, ArticleStatus, ArticleUpdate
from core.models.inquiry import InquiryStatus
from core.models.listing import ListingCreate, ListingStatus, ListingUpdate
from core.services.article_service import ArticleService
from core.services.inquiry_service import InquiryService
from core.services.listing_service import ListingService
from core.services.query import paginate, search
from core.services.stats_service import StatsService
from core.services.storage_service import ARTICLES_FOLDER, LISTINGS_FOLDER, StorageService
from lib.utils import split_csv_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", include_in_schema=False)

AdminUser = Annotated[AuthUser, Depends(require_admin_page)]

ADMIN_PAGE_SIZE = 20

# Placeholder that satisfies validation until the featured image is uploaded
_PENDING_UPLOAD = "pending-upload"


# =============================================================================
# Helpers
# =============================================================================

def _redirect(path: str, **params: str) -> RedirectResponse:
    url = f"{path}?{urlencode(params)}" if params else path
    return RedirectResponse(url, status_code=303)


def _render(request: Request, name: str, user: AuthUser | None, status_code: int = 200, **context: Any) -> HTMLResponse:
    context.setdefault("message", request.query_params.get("msg"))
    return templates.TemplateResponse(
        request,
        name,
        {"user": user, **context},
        status_code=status_code,
    )


def _validation_messages(exc: ValidationError) -> list[str]:
    """One line per field error, e.g. "price: Input should be greater than 0"."""
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" if error["loc"] else error["msg"]
        for error in exc.errors()
    ]


def _form_text(form: FormData, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def _form_list(form: FormData, name: str) -> list[str]:
    return [v.strip() for v in form.getlist(name) if isinstance(v, str) and v.strip()]


def _form_files(form: FormData, name: str) -> list[UploadFile]:
    return [v for v in form.getlist(name) if isinstance(v, UploadFile) and v.filename]


async def _upload(form: FormData, field: str, folder: str) -> list[str]:
    """Validate and store the files posted in `field`; returns public URLs."""
    files = _form_files(form, field)
    if not files:
        return []
    return StorageService.upload_images(await read_image_files(files), folder)


@contextmanager
def _discard_uploads_on_error(urls: list[str]):
    """Delete freshly uploaded images if the write that references them fails."""
    try:
        yield
    except Exception:
        if urls:
            logger.info(f"Write failed; deleting {len(urls)} new upload(s)")
            StorageService.delete_images(urls)
        raise


def _safe_next(next_path: str | None) -> str:
    if next_path and next_path.startswith("/admin") and not next_path.startswith("/admin/login"):
        return next_path
    return "/admin"


# =============================================================================
# Login / Logout
# =============================================================================

@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, next: str | None = None):
    """Sign-in form; already signed-in admins go straight to the dashboard."""
    if get_admin_from_cookie(request):
        return _redirect(_safe_next(next))
    return _render(request, "admin/login.html", None, next=_safe_next(next), email="", error=None)


@router.post("/login")
async def login_submit(
    request: Request,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    next: Annotated[str, Form()] = "/admin",
):
    """Exchange credentials for a token and store it in the admin cookie."""
    if not email or not password:
        return _render(
            request, "admin/login.html", None, status_code=400,
            next=_safe_next(next), email=email, error="Email and password are required",
        )

    try:
        token = sign_in(email.strip(), password)
    except StayloException as e:
        return _render(
            request, "admin/login.html", None, status_code=e.status_code,
            next=_safe_next(next), email=email, error=e.message,
        )

    response = _redirect(_safe_next(next))
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token.access_token,
        max_age=token.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout():
    """Clear the admin cookie."""
    response = _redirect("/admin/login")
    response.delete_cookie(settings.ADMIN_COOKIE_NAME)
    return response


# =============================================================================
# Dashboard
# =============================================================================

@router.get("", response_class=HTMLResponse)
async def dashboard(request: Request, user: AdminUser):
    """Stats cards, most viewed listings and the newest inquiries."""
    return _render(request, "admin/dashboard.html", user, stats=StatsService.get_dashboard_stats())


# =============================================================================
# Listings
# =============================================================================

def _listing_values(form: FormData) -> dict[str, Any]:
    return {
        "name": _form_text(form, "name"),
        "location": _form_text(form, "location"),
        "price": _form_text(form, "price") or None,
        "description": _form_text(form, "description"),
        "amenities": _form_list(form, "amenities"),
        "owner_name": _form_text(form, "owner_name"),
        "owner_contact": _form_text(form, "owner_contact"),
        "owner_email": _form_text(form, "owner_email") or None,
        "status": _form_text(form, "status") or ListingStatus.ACTIVE.value,
    }


def _render_listing_form(
    request: Request,
    user: AuthUser,
    listing: dict[str, Any],
    listing_id: str | None = None,
    errors: list[str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return _render(
        request, "admin/listing_form.html", user, status_code=status_code,
        listing=listing, listing_id=listing_id, errors=errors or [],
        statuses=[s.value for s in ListingStatus],
    )


@router.get("/listings", response_class=HTMLResponse)
async def listings_page(
    request: Request,
    user: AdminUser,
    status: ListingStatus | None = None,
    q: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
):
    """All listings with status filter and name/location search."""
    listings = search(ListingService.list_listings(status), q, ("name", "location"))
    items, pagination = paginate(listings, page, ADMIN_PAGE_SIZE)
    return _render(
        request, "admin/listings.html", user,
        listings=items, pagination=pagination, status=status.value if status else "",
        q=q or "", statuses=[s.value for s in ListingStatus],
    )


@router.get("/listings/new", response_class=HTMLResponse)
async def new_listing_page(request: Request, user: AdminUser):
    """Empty listing form."""
    return _render_listing_form(request, user, {"status": ListingStatus.ACTIVE.value, "amenities": [], "images": []})


@router.post("/listings/new")
async def create_listing_submit(request: Request, user: AdminUser):
    """Validate the form, upload images, then create the listing."""
    form = await request.form()
    values = _listing_values(form)

    try:
        data = ListingCreate(**values)
        image_urls = await _upload(form, "images", LISTINGS_FOLDER)
    except ValidationError as e:
        return _render_listing_form(request, user, {**values, "images": []}, errors=_validation_messages(e), status_code=400)
    except StayloException as e:
        return _render_listing_form(request, user, {**values, "images": []}, errors=[e.message], status_code=e.status_code)

    with _discard_uploads_on_error(image_urls):
        listing_id = ListingService.create_listing(data, image_urls)
    return _redirect("/admin/listings", msg=f"Listing created ({listing_id})")


@router.get("/listings/{listing_id}/edit", response_class=HTMLResponse)
async def edit_listing_page(request: Request, listing_id: str, user: AdminUser):
    """Listing form pre-filled from the stored listing."""
    listing = ListingService.get_listing(listing_id)
    return _render_listing_form(request, user, listing.model_dump(mode="json"), listing_id=listing_id)


@router.post("/listings/{listing_id}/edit")
async def update_listing_submit(request: Request, listing_id: str, user: AdminUser):
    """
    Save listing edits.

    Images ticked for removal are dropped from the listing and deleted
    from storage; newly uploaded images are appended.
    """
    existing = ListingService.get_listing(listing_id)
    form = await request.form()
    values = _listing_values(form)
    removed = [url for url in _form_list(form, "remove_images") if url in existing.images]
    kept = [url for url in existing.images if url not in removed]

    try:
        # The edit form posts every field, so it is held to the create rules
        updates = ListingUpdate(**ListingCreate(**values).model_dump())
        new_urls = await _upload(form, "images", LISTINGS_FOLDER)
    except ValidationError as e:
        return _render_listing_form(request, user, {**values, "images": existing.images}, listing_id, _validation_messages(e), 400)
    except StayloException as e:
        return _render_listing_form(request, user, {**values, "images": existing.images}, listing_id, [e.message], e.status_code)

    updates.images = kept + new_urls
    with _discard_uploads_on_error(new_urls):
        ListingService.update_listing(listing_id, updates)
    if removed:
        StorageService.delete_images(removed)

    return _redirect("/admin/listings", msg="Listing updated")


@router.post("/listings/{listing_id}/delete")
async def delete_listing_submit(listing_id: str, user: AdminUser):
    """Delete a listing and its images."""
    ListingService.delete_listing(listing_id)
    return _redirect("/admin/listings", msg="Listing deleted")


# =============================================================================
# Inquiries
# =============================================================================

@router.get("/inquiries", response_class=HTMLResponse)
async def inquiries_page(request: Request, user: AdminUser, status: InquiryStatus | None = None):
    """Inquiries with a status filter; tab counts cover all inquiries."""
    inquiries = InquiryService.list_inquiries()
    counts = {s.value: sum(1 for i in inquiries if i.status == s) for s in InquiryStatus}
    if status:
        inquiries = [i for i in inquiries if i.status == status]

    return _render(
        request, "admin/inquiries.html", user,
        inquiries=inquiries, counts=counts, total=sum(counts.values()),
        status=status.value if status else "", statuses=[s.value for s in InquiryStatus],
    )


@router.get("/inquiries/export")
async def export_inquiries_csv(user: AdminUser, status: InquiryStatus | None = None):
    """Download inquiries as CSV."""
    csv_text = InquiryService.export_csv(InquiryService.list_inquiries(status))
    filename = f"inquiries-{date.today().isoformat()}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/inquiries/{inquiry_id}", response_class=HTMLResponse)
async def inquiry_detail_page(request: Request, inquiry_id: str, user: AdminUser):
    """Full inquiry with status controls."""
    inquiry = InquiryService.get_inquiry(inquiry_id)
    return _render(
        request, "admin/inquiry_detail.html", user,
        inquiry=inquiry, statuses=[s.value for s in InquiryStatus],
    )


@router.post("/inquiries/{inquiry_id}/status")
async def inquiry_status_submit(
    inquiry_id: str,
    user: AdminUser,
    status: Annotated[InquiryStatus, Form()],
):
    """Change an inquiry's status."""
    InquiryService.update_status(inquiry_id, status)
    return _redirect("/admin/inquiries", msg=f"Inquiry marked {status.value}")


@router.post("/inquiries/{inquiry_id}/delete")
async def delete_inquiry_submit(inquiry_id: str, user: AdminUser):
    """Delete an inquiry."""
    InquiryService.delete_inquiry(inquiry_id)
    return _redirect("/admin/inquiries", msg="Inquiry deleted")


# =============================================================================
# Articles
# =============================================================================

def _article_values(form: FormData) -> dict[str, Any]:
    values: dict[str, Any] = {
        "title": _form_text(form, "title"),
        "slug": _form_text(form, "slug") or None,
        "excerpt": _form_text(form, "excerpt"),
        "content": _form_text(form, "content"),
        "author": _form_text(form, "author"),
        "category": _form_text(form, "category"),
        "tags": split_csv_field(_form_text(form, "tags")),
        "status": _form_text(form, "status") or ArticleStatus.DRAFT.value,
        "published_at": _form_text(form, "published_at") or None,
    }
    return values


def _render_article_form(
    request: Request,
    user: AuthUser,
    article: dict[str, Any],
    article_id: str | None = None,
    errors: list[str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return _render(
        request, "admin/article_form.html", user, status_code=status_code,
        article=article, article_id=article_id, errors=errors or [],
        statuses=[s.value for s in ArticleStatus],
    )


@router.get("/articles", response_class=HTMLResponse)
async def articles_page(
    request: Request,
    user: AdminUser,
    status: ArticleStatus | None = None,
    q: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
):
    """All articles with status filter and title/excerpt/tag search."""
    articles = ArticleService.list_by_status(status) if status else ArticleService.list_all()
    articles = search(articles, q, ("title", "excerpt", "tags"))
    items, pagination = paginate(articles, page, ADMIN_PAGE_SIZE)
    return _render(
        request, "admin/articles.html", user,
        articles=items, pagination=pagination, status=status.value if status else "",
        q=q or "", statuses=[s.value for s in ArticleStatus],
    )


@router.get("/articles/new", response_class=HTMLResponse)
async def new_article_page(request: Request, user: AdminUser):
    """Empty article form."""
    return _render_article_form(request, user, {"status": ArticleStatus.DRAFT.value, "tags": [], "images": []})


@router.post("/articles/new")
async def create_article_submit(request: Request, user: AdminUser):
    """Validate the form, upload the featured image and gallery, then create."""
    form = await request.form()
    values = _article_values(form)
    has_featured = bool(_form_files(form, "featured_image"))
    display = {**values, "images": []}

    try:
        data = ArticleCreate(**values, featured_image=_PENDING_UPLOAD if has_featured else "")
        featured = await _upload(form, "featured_image", ARTICLES_FOLDER)
        gallery = await _upload(form, "images", ARTICLES_FOLDER)
        data = data.model_copy(update={"featured_image": featured[0], "images": gallery})
        with _discard_uploads_on_error(featured + gallery):
            ArticleService.create_article(data)
    except ValidationError as e:
        return _render_article_form(request, user, display, errors=_validation_messages(e), status_code=400)
    except StayloException as e:
        return _render_article_form(request, user, display, errors=[e.message], status_code=e.status_code)

    return _redirect("/admin/articles", msg="News post created")


@router.get("/articles/{article_id}/edit", response_class=HTMLResponse)
async def edit_article_page(request: Request, article_id: str, user: AdminUser):
    """Article form pre-filled from the stored article."""
    article = ArticleService.get_by_id_or_slug(article_id)
    return _render_article_form(request, user, article.model_dump(mode="json"), article_id=article.id)


@router.post("/articles/{article_id}/edit")
async def update_article_submit(request: Request, article_id: str, user: AdminUser):
    """
    Save article edits.

    A new featured image replaces the old one. Gallery images ticked for
    removal are dropped and deleted from storage.
    """
    existing = ArticleService.get_by_id_or_slug(article_id)
    form = await request.form()
    values = _article_values(form)
    # Blank slug keeps the current one; blank date lets publishing stamp it
    for key in ("slug", "published_at"):
        if values[key] is None:
            values.pop(key)

    removed = [url for url in _form_list(form, "remove_images") if url in existing.images]
    kept = [url for url in existing.images if url not in removed]
    display = {**existing.model_dump(mode="json"), **values}

    try:
        has_featured = bool(_form_files(form, "featured_image"))
        validated = ArticleCreate(
            **values,
            featured_image=existing.featured_image or (_PENDING_UPLOAD if has_featured else ""),
        )
        updates = ArticleUpdate(**validated.model_dump(exclude_none=True, exclude={"featured_image", "images"}))
        featured = await _upload(form, "featured_image", ARTICLES_FOLDER)
        gallery = await _upload(form, "images", ARTICLES_FOLDER)
        updates.images = kept + gallery
        if featured:
            updates.featured_image = featured[0]
        with _discard_uploads_on_error(featured + gallery):
            ArticleService.update_article(existing.id, updates)
    except ValidationError as e:
        return _render_article_form(request, user, display, existing.id, _validation_messages(e), 400)
    except StayloException as e:
        return _render_article_form(request, user, display, existing.id, [e.message], e.status_code)

    stale = removed + ([existing.featured_image] if featured and existing.featured_image else [])
    if stale:
        StorageService.delete_images(stale)

    return _redirect("/admin/articles", msg="News post updated")


@router.post("/articles/{article_id}/delete")
async def delete_article_submit(article_id: str, user: AdminUser):
    """Delete an article."""
    ArticleService.delete_article(article_id)
    return _redirect("/admin/articles", msg="News post deleted")
