# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for table operations
# - sanitize.py: Input sanitization for user-supplied text
# - utils.py: Shared utilities (errors, UUIDs, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.sanitize import sanitize_text, sanitize_value
from lib.utils import (
    ApplicationError,
    is_valid_uuid,
    normalize_uuid,
    parse_timestamp,
    split_csv_field,
    utc_now_iso,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Sanitization
    "sanitize_text",
    "sanitize_value",
    # Utils
    "ApplicationError",
    "is_valid_uuid",
    "normalize_uuid",
    "parse_timestamp",
    "split_csv_field",
    "utc_now_iso",
]
