# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Probes for monitoring and load balancers:
# - /health: process is up, with environment and version
# - /health/ready: store tables, image bucket and Celery broker reachable
# - /health/live: liveness only, touches nothing external
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, Response
from pydantic import BaseModel

from app.config import settings
from core.services.article_service import ARTICLES_TABLE
from core.services.inquiry_service import INQUIRIES_TABLE
from core.services.listing_service import LISTINGS_TABLE
from lib.supabase_client import SupabaseClient
from workers.celery_app import celery_app

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """
    Readiness check response.

    `checks` maps each dependency to "healthy" or "unhealthy: <reason>".
    """
    status: str
    checks: dict[str, str]
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Dependency Probes
# =============================================================================

def _probe_tables() -> None:
    client = SupabaseClient.get_client()
    for table in (LISTINGS_TABLE, INQUIRIES_TABLE, ARTICLES_TABLE):
        client.table(table).select("id").limit(1).execute()


def _probe_bucket() -> None:
    SupabaseClient.get_client().storage.get_bucket(settings.STORAGE_BUCKET)


def _probe_broker() -> None:
    with celery_app.connection_for_write() as connection:
        connection.ensure_connection(max_retries=1)


PROBES: dict[str, Callable[[], None]] = {
    "database": _probe_tables,
    "storage": _probe_bucket,
    "broker": _probe_broker,
}


def run_checks() -> dict[str, str]:
    """Run every probe; a failing probe is reported, never raised."""
    results = {}
    for name, probe in PROBES.items():
        try:
            probe()
            results[name] = "healthy"
        except Exception as e:
            logger.warning(f"Readiness probe '{name}' failed: {e}")
            results[name] = f"unhealthy: {str(e)[:80]}"
    return results


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(response: Response):
    """
    Readiness check.

    Responds 503 with status "degraded" when any dependency is down, so
    load balancers stop routing here until it recovers.
    """
    checks = run_checks()
    ready = all(result == "healthy" for result in checks.values())
    if not ready:
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check():
    """Whether the process is alive."""
    return {"status": "alive", "timestamp": _now()}
