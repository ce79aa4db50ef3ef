"""Stroke-arc geometry for donut charts and progress rings.

Lengths are measured along the ring's circumference, the way an SVG circle's
``stroke-dasharray`` / ``stroke-dashoffset`` pair consumes them. Segments are
laid end to end clockwise from 12 o'clock.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace

from app.utils.errors import NotFoundError, ValidationError

ORIGIN_DEGREES = -90.0
LENGTH_EPSILON = 1e-9
TOTAL_LABEL = "Total"


def circumference(radius: float) -> float:
    return 2 * math.pi * radius


@dataclass(frozen=True)
class ArcSegment:
    label: str
    value: float
    color: str
    length: float
    offset: float
    gap: float
    stroke_width: float
    hovered: bool = False

    @property
    def start_degrees(self) -> float:
        ring = self.length + self.gap
        return ORIGIN_DEGREES + (360.0 * self.offset / ring if ring else 0.0)

    @property
    def sweep_degrees(self) -> float:
        ring = self.length + self.gap
        return 360.0 * self.length / ring if ring else 0.0

    @property
    def dash_array(self) -> str:
        return f"{self.length:.4f} {self.gap:.4f}"

    @property
    def dash_offset(self) -> float:
        return -self.offset

    @property
    def visible(self) -> bool:
        return self.length > 0


@dataclass(frozen=True)
class DonutChart:
    """Renderable donut: a full background ring plus proportional segments.

    ``total`` is the real sum of values (0 for an empty chart); the divisor
    used for proportions is ``total or 1``.
    """

    radius: float
    stroke_width: float
    circumference: float
    total: float
    segments: tuple[ArcSegment, ...]
    center_label: str
    center_value: float
    hovered: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def background_length(self) -> float:
        return self.circumference

    @property
    def colored_segments(self) -> tuple[ArcSegment, ...]:
        return tuple(segment for segment in self.segments if segment.visible)

    def segment(self, label: str) -> ArcSegment:
        for segment in self.segments:
            if segment.label == label:
                return segment
        raise NotFoundError(f"Segment '{label}'")


def _check_value(label: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Segment value for {label} must be a number", field=label)
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(f"Segment value for {label} must be finite", field=label)
    if value < 0:
        raise ValidationError(f"Segment value for {label} cannot be negative", field=label)
    return value


def build_donut(
    items: Iterable[tuple[str, float, str]],
    radius: float,
    stroke_width: float,
    hovered: str | None = None,
    hover_delta: float = 0.0,
) -> DonutChart:
    """Lay ``(label, value, color)`` items out as consecutive arcs.

    Raises:
        ValidationError: a value is negative, not finite, or not a number.
        NotFoundError: ``hovered`` names no segment.
    """
    rows = [(label, _check_value(label, value), color) for label, value, color in items]
    ring = circumference(radius)
    total = sum((value for _, value, _ in rows), 0)
    divisor = total or 1

    segments: list[ArcSegment] = []
    offset = 0.0
    for label, value, color in rows:
        length = ring * value / divisor
        # Float rounding must never push the last arc past the ring.
        length = min(length, max(ring - offset, 0.0))
        segments.append(
            ArcSegment(
                label=label,
                value=value,
                color=color,
                length=length,
                offset=offset,
                gap=ring - length,
                stroke_width=stroke_width,
            )
        )
        offset += length

    chart = DonutChart(
        radius=radius,
        stroke_width=stroke_width,
        circumference=ring,
        total=total,
        segments=tuple(segments),
        center_label=TOTAL_LABEL,
        center_value=total,
    )
    return with_hover(chart, hovered, hover_delta) if hovered is not None else chart


def with_hover(chart: DonutChart, label: str | None, hover_delta: float = 0.0) -> DonutChart:
    """Return ``chart`` with ``label`` highlighted, or cleared when ``label`` is None.

    Only stroke widths and the center text change; every offset and length is
    carried over untouched.
    """
    if label is None:
        return replace(
            chart,
            segments=tuple(
                replace(segment, hovered=False, stroke_width=chart.stroke_width)
                for segment in chart.segments
            ),
            center_label=TOTAL_LABEL,
            center_value=chart.total,
            hovered=None,
        )

    target = chart.segment(label)
    segments = tuple(
        replace(
            segment,
            hovered=segment.label == label,
            stroke_width=chart.stroke_width + (hover_delta if segment.label == label else 0.0),
        )
        for segment in chart.segments
    )
    return replace(
        chart,
        segments=segments,
        center_label=target.label,
        center_value=target.value,
        hovered=label,
    )


@dataclass(frozen=True)
class ProgressRing:
    percent: float
    radius: float
    stroke_width: float
    circumference: float
    arc_length: float

    @property
    def background_length(self) -> float:
        return self.circumference

    @property
    def sweep_degrees(self) -> float:
        return 360.0 * self.percent / 100

    @property
    def dash_offset(self) -> float:
        return self.circumference - self.arc_length


def clamp_percent(percent: float) -> float:
    if math.isnan(percent):
        return 0.0
    return max(0.0, min(float(percent), 100.0))


def build_progress_ring(percent: float, radius: float, stroke_width: float) -> ProgressRing:
    """Sweep ``percent`` (clamped to 0..100) of a ring over a full background ring."""
    clamped = clamp_percent(percent)
    ring = circumference(radius)
    return ProgressRing(
        percent=clamped,
        radius=radius,
        stroke_width=stroke_width,
        circumference=ring,
        arc_length=ring * clamped / 100,
    )


def arc_path(
    cx: float, cy: float, radius: float, start_degrees: float, sweep_degrees: float
) -> str:
    """Return an SVG path ``d`` attribute for an open arc.

    A full sweep is drawn as two half arcs because a single arc command with
    identical endpoints renders nothing.
    """
    if sweep_degrees <= 0:
        return ""
    if sweep_degrees >= 360:
        top = _point(cx, cy, radius, start_degrees)
        bottom = _point(cx, cy, radius, start_degrees + 180)
        return (
            f"M {top[0]:.3f} {top[1]:.3f} "
            f"A {radius:.3f} {radius:.3f} 0 1 1 {bottom[0]:.3f} {bottom[1]:.3f} "
            f"A {radius:.3f} {radius:.3f} 0 1 1 {top[0]:.3f} {top[1]:.3f}"
        )
    start = _point(cx, cy, radius, start_degrees)
    end = _point(cx, cy, radius, start_degrees + sweep_degrees)
    large_arc = 1 if sweep_degrees > 180 else 0
    return (
        f"M {start[0]:.3f} {start[1]:.3f} "
        f"A {radius:.3f} {radius:.3f} 0 {large_arc} 1 {end[0]:.3f} {end[1]:.3f}"
    )


def _point(cx: float, cy: float, radius: float, degrees: float) -> tuple[float, float]:
    radians = math.radians(degrees)
    return cx + radius * math.cos(radians), cy + radius * math.sin(radians)
