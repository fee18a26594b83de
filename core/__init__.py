# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API and pages:
# - models/: Pydantic schemas for data validation
# - services/: Listing, inquiry, article, stats, storage and notification
#   operations on top of lib/supabase_client.py
#
# Services raise app.exceptions errors but never touch requests or
# responses, so they can be called from routers, pages and workers alike.
# =============================================================================
