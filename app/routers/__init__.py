# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by resource, all mounted under /api/v1:
# - health.py: Health check endpoints
# - listings.py: Hostel listings
# - inquiries.py: Student inquiries and CSV export
# - articles.py: News articles
# - stats.py: Dashboard aggregates
# - upload.py: Image upload to storage
# =============================================================================

from . import health
from . import listings
from . import inquiries
from . import articles
from . import stats
from . import upload

__all__ = [
    "health",
    "listings",
    "inquiries",
    "articles",
    "stats",
    "upload",
]
