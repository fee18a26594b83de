# =============================================================================
# app/pages/ - Server-Rendered Pages
# =============================================================================
# - admin.py: Admin panel (cookie session, forms post back to these routes)
# - public.py: Public site (rooms, news, inquiry form)
# - templating.py: Jinja2 environment and filters
# =============================================================================

from . import admin
from . import public

__all__ = [
    "admin",
    "public",
]
