"""Time utility helpers."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def local_today(timezone: str = "UTC") -> date:
    """Return the current date in ``timezone``."""
    return datetime.now(tz=ZoneInfo(timezone)).date()


def parse_iso_date(value: str | None, default: date | None = None) -> date:
    """Parse an ISO date string with an optional fallback default."""
    if not value:
        if default is None:
            raise ValueError("Missing required date value")
        return default
    return date.fromisoformat(value)


def month_code(month: int) -> str:
    """Return the three-letter upper-case code for a 1-based month (``JAN``)."""
    return MONTH_NAMES[month - 1][:3].upper()


def month_label(year: int, month: int) -> str:
    """Return a compact chart label such as ``Jan 2026``."""
    return f"{MONTH_NAMES[month - 1][:3]} {year}"


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months from ``(year, month)`` and return the new pair."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
