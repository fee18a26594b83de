# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - middleware.py: Client IP detection and rate limiting
# - auth/: Supabase JWT verification and admin login
# - routers/: JSON API endpoints under /api/v1
# - pages/: Server-rendered admin and public pages
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
