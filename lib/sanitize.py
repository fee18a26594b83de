# =============================================================================
# lib/sanitize.py - Input Sanitization
# =============================================================================
# Strips markup from user-supplied text before it reaches the store.
# Output escaping is left to Jinja2 autoescape, so stored text is plain
# (no HTML entities) and renders correctly in pages and emails.
# =============================================================================

import html
import re
from typing import Any

import bleach

# Script and style bodies are code, not text; drop them with their tags
_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_cleaner = bleach.Cleaner(tags=[], attributes={}, strip=True, strip_comments=True)


def sanitize_text(value: str) -> str:
    """
    Remove HTML tags, script/style blocks and control characters.

    A bare "<" or ">" that doesn't open a tag is kept:

        sanitize_text("  <b>Hi</b><script>x()</script> ") -> "Hi"
        sanitize_text("Rent < 4000 for rooms > 2 beds") -> unchanged
    """
    cleaned = _CONTROL_RE.sub("", value)
    cleaned = _SCRIPT_RE.sub("", cleaned)
    # bleach returns HTML-escaped text; store it unescaped
    return html.unescape(_cleaner.clean(cleaned)).strip()


def sanitize_value(value: Any) -> Any:
    """Recursively sanitize strings inside dicts and lists."""
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [sanitize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_value(item) for key, item in value.items()}
    return value
