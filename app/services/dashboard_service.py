"""Dashboard read models composed from the repository, aggregates and geometry."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any

from app.schemas.categories import Category
from app.services import aggregation_service as aggregates
from app.services.animation import counter_keyframes
from app.services.arc_geometry import (
    DonutChart,
    ProgressRing,
    arc_path,
    build_donut,
    build_progress_ring,
)
from app.services.entry_repository import EntryRepository
from app.utils.errors import InvalidInputError
from app.utils.time import local_today


class DashboardService:
    """Recomputes every figure from a fresh repository snapshot on each call."""

    def __init__(
        self,
        repository: EntryRepository,
        timezone: str = "UTC",
        donut_radius: float = 70.0,
        donut_stroke_width: float = 24.0,
        donut_hover_stroke_delta: float = 6.0,
        ring_radius: float = 52.0,
        ring_stroke_width: float = 10.0,
        counter_duration_ms: int = 1000,
        frame_rate: int = 60,
    ) -> None:
        self.repository = repository
        self.timezone = timezone
        self.donut_radius = donut_radius
        self.donut_stroke_width = donut_stroke_width
        self.donut_hover_stroke_delta = donut_hover_stroke_delta
        self.ring_radius = ring_radius
        self.ring_stroke_width = ring_stroke_width
        self.counter_duration_ms = counter_duration_ms
        self.frame_rate = frame_rate

    def today(self) -> date:
        return local_today(self.timezone)

    def total_by_category(
        self, year: int | None = None, month: int | None = None
    ) -> dict[Category, float]:
        return aggregates.total_by_category(self.repository.snapshot(), year=year, month=month)

    def total_by_month(
        self, year: int | None = None, category: Category | None = None
    ) -> list[float]:
        return aggregates.total_by_month(
            self.repository.snapshot(), year or self.today().year, category=category
        )

    def year_to_date(self, category: Category | None = None, today: date | None = None) -> float:
        return aggregates.year_to_date(
            self.repository.snapshot(), today or self.today(), category=category
        )

    def trend(
        self,
        window_months: int,
        category: Category | None = None,
        today: date | None = None,
    ) -> list[aggregates.TrendPoint]:
        return aggregates.trend(
            self.repository.snapshot(), window_months, today or self.today(), category=category
        )

    def month_summary(
        self, year: int | None = None, month: int | None = None
    ) -> aggregates.MonthSummary:
        today = self.today()
        return aggregates.month_summary(
            self.repository.snapshot(), year or today.year, month or today.month
        )

    def donut(
        self,
        year: int | None = None,
        month: int | None = None,
        hovered: Category | None = None,
    ) -> DonutChart:
        """Category share donut; hovering a category highlights its segment."""
        totals = self.total_by_category(year=year, month=month)
        return build_donut(
            [(category.label, totals[category], category.color) for category in Category],
            radius=self.donut_radius,
            stroke_width=self.donut_stroke_width,
            hovered=hovered.label if hovered is not None else None,
            hover_delta=self.donut_hover_stroke_delta,
        )

    def goal_ring(self, goal: float, category: Category | None = None) -> ProgressRing:
        """Year-to-date progress toward ``goal`` as a ring."""
        if goal <= 0:
            raise InvalidInputError("Goal must be greater than zero")
        achieved = self.year_to_date(category=category)
        return build_progress_ring(
            achieved / goal * 100, radius=self.ring_radius, stroke_width=self.ring_stroke_width
        )

    def counter(self, target: float, duration_ms: int | None = None) -> list[float]:
        return counter_keyframes(
            target,
            duration_ms=self.counter_duration_ms if duration_ms is None else duration_ms,
            frame_rate=self.frame_rate,
        )


def donut_payload(chart: DonutChart) -> dict[str, Any]:
    """Serialize a donut for the view layer, including SVG dash and path data."""
    widest = max([chart.stroke_width, *(segment.stroke_width for segment in chart.segments)])
    center = chart.radius + widest / 2
    return {
        "radius": chart.radius,
        "stroke_width": chart.stroke_width,
        "circumference": chart.circumference,
        "background_length": chart.background_length,
        "total": chart.total,
        "is_empty": chart.is_empty,
        "center_label": chart.center_label,
        "center_value": chart.center_value,
        "hovered": chart.hovered,
        "segments": [
            {
                **asdict(segment),
                "start_degrees": segment.start_degrees,
                "sweep_degrees": segment.sweep_degrees,
                "dash_array": segment.dash_array,
                "dash_offset": segment.dash_offset,
                "visible": segment.visible,
                "path": arc_path(
                    center, center, chart.radius, segment.start_degrees, segment.sweep_degrees
                ),
            }
            for segment in chart.segments
        ],
    }


def ring_payload(ring: ProgressRing) -> dict[str, Any]:
    return {
        **asdict(ring),
        "background_length": ring.background_length,
        "sweep_degrees": ring.sweep_degrees,
        "dash_offset": ring.dash_offset,
    }
