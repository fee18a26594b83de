# =============================================================================
# app/pages/templating.py - Jinja2 Setup for Server-Rendered Pages
# =============================================================================
# Shared Jinja2Templates instance with the filters the admin and public
# templates use. Autoescaping is on for every .html template.
# =============================================================================

import logging
from datetime import datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.config import settings
from core.models.article import CATEGORIES
from core.models.listing import AMENITIES
from core.services.query import page_window
from core.services.storage_service import StorageService
from lib.utils import parse_timestamp

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def thumbnail(url: str | None, width: int, height: int | None = None) -> str:
    """
    Resized variant of a stored image.

    URLs from outside our bucket are returned unchanged.
    """
    if not url:
        return ""
    try:
        return StorageService.get_optimized_url(url, width, height)
    except ValueError:
        return url


def format_date(value: datetime | str | None, fmt: str = "%b %d, %Y") -> str:
    """Format a timestamp for display; blank when missing."""
    parsed = parse_timestamp(value)
    return parsed.strftime(fmt) if parsed else ""


def format_price(value: float | int | None) -> str:
    """Whole-number prices without decimals, e.g. 3500 -> "3,500"."""
    if value is None:
        return ""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["thumbnail"] = thumbnail
templates.env.filters["date"] = format_date
templates.env.filters["price"] = format_price
templates.env.globals.update(
    page_window=page_window,
    amenity_choices=AMENITIES,
    category_choices=CATEGORIES,
    site_name="Staylo",
    app_url=settings.PUBLIC_APP_URL,
)
