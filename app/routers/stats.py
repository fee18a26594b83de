# =============================================================================
# app/routers/stats.py - Dashboard Statistics Endpoint
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.responses import success_response
from core.services.stats_service import StatsService

router = APIRouter()


@router.get("/stats")
async def get_stats(user: AuthUser = Depends(get_current_user)):
    """
    Aggregate counts for the admin dashboard.

    Returns listing and inquiry counts by status, total listing views,
    the five most viewed listings and the five newest inquiries.
    """
    return success_response(StatsService.get_dashboard_stats())
