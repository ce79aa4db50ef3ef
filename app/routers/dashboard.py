"""Dashboard aggregate and visualization endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dependencies import get_dashboard_service
from app.schemas.categories import Category
from app.services.dashboard_service import DashboardService, donut_payload, ring_payload

router = APIRouter()


@router.get("/totals")
def get_totals(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return the value-field sum for every category."""
    totals = service.total_by_category(year=year, month=month)
    return {
        "totals": {category.value: value for category, value in totals.items()},
        "grand_total": sum(totals.values()),
    }


@router.get("/monthly")
def get_monthly(
    year: int | None = Query(default=None, ge=2000, le=2100),
    category: Category | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return twelve monthly buckets for a year."""
    resolved_year = year or service.today().year
    return {
        "year": resolved_year,
        "category": category.value if category else None,
        "months": service.total_by_month(resolved_year, category=category),
    }


@router.get("/year-to-date")
def get_year_to_date(
    category: Category | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return the total from January 1st through today."""
    today = service.today()
    return {
        "as_of": today.isoformat(),
        "category": category.value if category else None,
        "total": service.year_to_date(category=category, today=today),
    }


@router.get("/trend")
def get_trend(
    window: int = Query(default=settings.trend_window_months, ge=1, le=60),
    category: Category | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return monthly trend points, oldest first."""
    points = service.trend(window, category=category)
    return {
        "category": category.value if category else None,
        "points": [asdict(point) for point in points],
    }


@router.get("/summary")
def get_summary(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return the month overview cards."""
    return {"summary": asdict(service.month_summary(year=year, month=month))}


@router.get("/donut")
def get_donut(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    hover: Category | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return category-share donut geometry."""
    return {"donut": donut_payload(service.donut(year=year, month=month, hovered=hover))}


@router.get("/ring")
def get_ring(
    goal: float = Query(..., gt=0, allow_inf_nan=False),
    category: Category | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return year-to-date progress toward ``goal`` as ring geometry."""
    return {"ring": ring_payload(service.goal_ring(goal, category=category))}


@router.get("/counter")
def get_counter(
    target: float = Query(..., allow_inf_nan=False),
    duration_ms: int | None = Query(default=None, ge=0, le=10_000),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict:
    """Return the eased count-up keyframes for a counter animating to ``target``."""
    frames = service.counter(target, duration_ms=duration_ms)
    return {"target": target, "frame_rate": service.frame_rate, "frames": frames}
