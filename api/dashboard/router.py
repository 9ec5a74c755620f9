"""
Dashboard API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter(prefix="/api/dashboard")


@router.get("/stats")
async def dashboard_stats(year: int | None = Query(default=None, ge=1900, le=9999)) -> dict:
    """
    Profit, revenue, expense and inventory totals for the current month and
    the given year (default: current year), plus a per-month breakdown.
    """
    return await service.dashboard_stats(year)
