# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .listing_service import ListingService
from .inquiry_service import InquiryService
from .article_service import ArticleService, slugify
from .stats_service import StatsService
from .storage_service import StorageService

__all__ = [
    "ListingService",
    "InquiryService",
    "ArticleService",
    "slugify",
    "StatsService",
    "StorageService",
]
