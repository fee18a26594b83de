# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Staylo API and site.
# It configures the FastAPI application with middleware, routers, pages
# and exception handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   staylo-api                      # API_HOST:API_PORT from settings
# =============================================================================

import logging
from contextlib import asynccontextmanager
from urllib.parse import quote

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.auth import AdminLoginRequired
from app.auth import routes as auth_routes
from app.exceptions import (
    StayloException,
    http_exception_handler,
    staylo_exception_handler,
    supabase_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.middleware import log_requests
from app.pages import admin as admin_pages
from app.pages import public as public_pages
from app.routers import articles, health, inquiries, listings, stats, upload
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and shutdown.
    """
    logger.info(f"Starting Staylo in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list if settings.is_production else ['*']}")
    if settings.admin_emails_list:
        logger.info(f"Admin allow-list: {len(settings.admin_emails_list)} emails")
    else:
        logger.warning("ADMIN_EMAILS is empty; any authenticated Supabase user is an admin")

    yield

    logger.info("Shutting down Staylo")


# Create FastAPI application
app = FastAPI(
    title="Staylo API",
    description="""
## Student Hostel Listings and News

Staylo lists student hostels, collects inquiries from students and
publishes news posts. Admins manage everything from `/admin`.

### Authentication

Write endpoints, inquiry management, stats and uploads need an admin token:

```bash
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "admin@staylo.com", "password": "..."}'

curl http://localhost:8000/api/v1/stats -H "Authorization: Bearer <access_token>"
```

### Responses

Success: `{"success": true, "data": ..., "message"?: ..., "pagination"?: ...}`

Error: `{"success": false, "error": ..., "code": ..., "suggestion"?: ..., "details"?: ...}`
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Admin sign-in and token checks"},
        {"name": "Listings", "description": "Hostel listings"},
        {"name": "Inquiries", "description": "Student inquiries and CSV export"},
        {"name": "Articles", "description": "News posts"},
        {"name": "Stats", "description": "Admin dashboard aggregates"},
        {"name": "Upload", "description": "Image upload to storage"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.middleware("http")(log_requests)

# CORS middleware - added last so it wraps everything, including errors
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS", "PATCH", "DELETE", "POST", "PUT"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(StayloException, staylo_exception_handler)
app.add_exception_handler(SupabaseClientError, supabase_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.exception_handler(AdminLoginRequired)
async def handle_admin_login_required(request: Request, exc: AdminLoginRequired):
    """Send unauthenticated admin page visits to the login form."""
    return RedirectResponse(f"/admin/login?next={quote(exc.next_path)}", status_code=303)


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix=API_PREFIX, tags=["Auth"])
app.include_router(listings.router, prefix=API_PREFIX, tags=["Listings"])
app.include_router(inquiries.router, prefix=API_PREFIX, tags=["Inquiries"])
app.include_router(articles.router, prefix=API_PREFIX, tags=["Articles"])
app.include_router(stats.router, prefix=API_PREFIX, tags=["Stats"])
app.include_router(upload.router, prefix=API_PREFIX, tags=["Upload"])
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

# Server-rendered pages
app.include_router(admin_pages.router)
app.include_router(public_pages.router)


# =============================================================================
# API Root
# =============================================================================

@app.get(API_PREFIX, tags=["Health"])
async def api_root():
    """
    API root - returns API info.
    """
    return {
        "name": "Staylo API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }


def main():
    """Serve the app with uvicorn on API_HOST:API_PORT."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
