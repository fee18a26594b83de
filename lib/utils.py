# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# UUID and timestamp helpers shared by the store wrapper and services.
# =============================================================================

from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """Store ids are compared as strings."""
    return str(value) if isinstance(value, UUID) else value


def is_valid_uuid(value: str) -> bool:
    """Check whether a string parses as a UUID."""
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


# =============================================================================
# Timestamp Utilities
# =============================================================================

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a stored timestamp into an aware datetime.

    Accepts datetime objects and ISO-8601 strings (including a trailing "Z").
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def timestamp_sort_key(value: Any) -> float:
    """Epoch seconds for sorting; missing timestamps sort as 0."""
    parsed = parse_timestamp(value)
    return parsed.timestamp() if parsed else 0.0


def split_csv_field(value: str | None) -> list[str]:
    """
    Split a comma-separated form field into trimmed, non-empty items.

    Example:
        split_csv_field("wifi, , study") -> ["wifi", "study"]
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Errors
# =============================================================================

class ApplicationError(Exception):
    """
    Base for errors raised outside the HTTP layer, such as in workers.

    HTTP-facing errors derive from app.exceptions.StayloException instead.
    """

    def __init__(self, message: str, code: str = "APPLICATION_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
