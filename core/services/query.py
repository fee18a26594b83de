# =============================================================================
# core/services/query.py - In-Memory Filter, Sort and Paginate
# =============================================================================
# Collections are small and fetched in full from the store, so search,
# sorting and pagination run in memory over the fetched records.
# =============================================================================

import math
from typing import Any, Iterable, Sequence, TypeVar

from core.models.base import PaginationInfo
from lib.utils import timestamp_sort_key

T = TypeVar("T")

# Marker used by page_window for collapsed page ranges
ELLIPSIS = None

# Sortable keys per resource; the first entry is the default
LISTING_SORT_KEYS = ("created_at", "price", "views", "name")
ARTICLE_SORT_KEYS = ("published_at", "created_at", "title", "views")

_TEXT_KEYS = {"name", "title"}
_TIMESTAMP_KEYS = {"created_at", "published_at", "updated_at", "date"}


def _field_text(record: Any, field: str) -> list[str]:
    value = getattr(record, field, None)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).lower() for item in value]
    return [str(value).lower()]


def search(records: Iterable[T], text: str | None, fields: Sequence[str]) -> list[T]:
    """
    Case-insensitive substring search.

    A record matches when any of `fields` contains `text`; list fields
    (such as tags) match when any element does. Blank text matches all.

    Example:
        search(listings, "kumasi", ("name", "location", "description"))
    """
    records = list(records)
    needle = (text or "").strip().lower()
    if not needle:
        return records

    return [
        record for record in records
        if any(needle in value for field in fields for value in _field_text(record, field))
    ]


def _sort_value(record: Any, key: str) -> Any:
    value = getattr(record, key, None)
    if key in _TIMESTAMP_KEYS:
        return timestamp_sort_key(value)
    if key in _TEXT_KEYS:
        return (value or "").lower()
    return value or 0


def sort_records(
    records: Iterable[T],
    sort_by: str | None,
    order: str = "desc",
    allowed: Sequence[str] = LISTING_SORT_KEYS,
) -> list[T]:
    """
    Sort records by one of the allowed keys.

    Unknown keys fall back to allowed[0]. Timestamps compare as epoch
    seconds with missing values as 0, text compares case-insensitively.
    The sort is stable, so ties keep their fetched order.
    """
    key = sort_by if sort_by in allowed else allowed[0]
    return sorted(
        records,
        key=lambda record: _sort_value(record, key),
        reverse=(order != "asc"),
    )


def paginate(records: Sequence[T], page: int, limit: int) -> tuple[list[T], PaginationInfo]:
    """
    Slice one page out of records.

    Args:
        records: Full, already filtered and sorted result set
        page: Page number (1-indexed)
        limit: Items per page

    Returns:
        Tuple of (page items, pagination info)

    Example:
        items, info = paginate(listings, page=2, limit=20)
    """
    total = len(records)
    total_pages = math.ceil(total / limit) if limit else 0
    start = (page - 1) * limit

    info = PaginationInfo(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    return list(records[start:start + limit]), info


def page_window(page: int, total_pages: int) -> list[int | None]:
    """
    Page numbers for a pagination bar, with None marking a gap.

    Always shows the first and last page and one page either side of the
    current one.

    Example:
        page_window(5, 10) -> [1, None, 4, 5, 6, None, 10]
    """
    if total_pages <= 0:
        return []

    pages: list[int | None] = [1]
    if page > 3:
        pages.append(ELLIPSIS)
    for number in range(max(2, page - 1), min(total_pages - 1, page + 1) + 1):
        pages.append(number)
    if page < total_pages - 2:
        pages.append(ELLIPSIS)
    if total_pages > 1:
        pages.append(total_pages)
    return pages
