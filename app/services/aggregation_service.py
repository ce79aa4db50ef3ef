"""Read-only aggregates over a repository snapshot.

Every function here recomputes from the entries it is handed; nothing keeps a
running counter, so a total can never drift from the rows it summarizes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from app.schemas.categories import Category
from app.schemas.entries import (
    BusPassEntry,
    DiaperEntry,
    DonationGivenEntry,
    DonationReceivedEntry,
    ResourceEntry,
)
from app.services.entry_repository import RepositorySnapshot
from app.utils.errors import InvalidInputError
from app.utils.time import month_label, shift_month


@dataclass(frozen=True)
class TrendPoint:
    label: str
    year: int
    month: int
    value: float


@dataclass(frozen=True)
class DiaperSummary:
    quantity: int = 0
    packs: int = 0
    families: int = 0


@dataclass(frozen=True)
class DonationSummary:
    given_items: int = 0
    given_value: float = 0.0
    received_items: int = 0
    received_value: float = 0.0
    donors: int = 0


@dataclass(frozen=True)
class TransportSummary:
    trips: int = 0
    cost: float = 0.0


@dataclass(frozen=True)
class AssistanceSummary:
    amount: float = 0.0
    bills: int = 0
    families: int = 0


@dataclass(frozen=True)
class MonthSummary:
    """Overview cards for one calendar month."""

    year: int
    month: int
    label: str
    diapers: DiaperSummary
    donations: DonationSummary
    bus_passes: TransportSummary
    rideshare: TransportSummary
    water: AssistanceSummary
    electric: AssistanceSummary
    rent: AssistanceSummary


def _in_period(entry: ResourceEntry, year: int | None, month: int | None) -> bool:
    if year is not None and entry.date.year != year:
        return False
    if month is not None and entry.date.month != month:
        return False
    return True


def select_entries(
    snapshot: RepositorySnapshot,
    category: Category | None = None,
    year: int | None = None,
    month: int | None = None,
) -> list[ResourceEntry]:
    """Return snapshot entries, optionally narrowed to a category and period."""
    return [entry for entry in snapshot.entries(category) if _in_period(entry, year, month)]


def sum_values(entries: Iterable[ResourceEntry]) -> float:
    return sum((entry.value for entry in entries), 0)


def total_by_category(
    snapshot: RepositorySnapshot,
    year: int | None = None,
    month: int | None = None,
) -> dict[Category, float]:
    """Sum each category's value field; every category is present, empty ones as 0."""
    return {
        category: sum_values(select_entries(snapshot, category, year=year, month=month))
        for category in Category
    }


def total_by_month(
    snapshot: RepositorySnapshot,
    year: int,
    category: Category | None = None,
) -> list[float]:
    """Return twelve January-to-December buckets for ``year``."""
    buckets: list[float] = [0] * 12
    for entry in select_entries(snapshot, category, year=year):
        buckets[entry.date.month - 1] += entry.value
    return buckets


def year_to_date(
    snapshot: RepositorySnapshot,
    today: date,
    category: Category | None = None,
) -> float:
    """Sum entries from January 1st of ``today``'s year through ``today`` inclusive."""
    start = date(today.year, 1, 1)
    return sum_values(
        entry for entry in snapshot.entries(category) if start <= entry.date <= today
    )


def trend(
    snapshot: RepositorySnapshot,
    window_months: int,
    today: date,
    category: Category | None = None,
) -> list[TrendPoint]:
    """Return ``window_months`` monthly points, oldest first, ending at ``today``'s month."""
    if window_months < 1:
        raise InvalidInputError("Trend window must be at least one month")

    months = [
        shift_month(today.year, today.month, offset)
        for offset in range(-(window_months - 1), 1)
    ]
    totals: dict[tuple[int, int], float] = {key: 0 for key in months}
    for entry in snapshot.entries(category):
        key = (entry.date.year, entry.date.month)
        if key in totals:
            totals[key] += entry.value

    return [
        TrendPoint(
            label=month_label(year, month),
            year=year,
            month=month,
            value=totals[(year, month)],
        )
        for year, month in months
    ]


def unique_subjects(entries: Iterable[ResourceEntry]) -> int:
    """Count distinct clients/donors, ignoring case and surrounding whitespace."""
    return len({entry.subject.strip().casefold() for entry in entries})


def _assistance(entries: list[ResourceEntry]) -> AssistanceSummary:
    return AssistanceSummary(
        amount=sum_values(entries),
        bills=len(entries),
        families=unique_subjects(entries),
    )


def month_summary(snapshot: RepositorySnapshot, year: int, month: int) -> MonthSummary:
    """Build the month overview: diapers, donations, transport and utility cards."""
    if not 1 <= month <= 12:
        raise InvalidInputError("Month must be between 1 and 12")

    def period(category: Category) -> list[ResourceEntry]:
        return select_entries(snapshot, category, year=year, month=month)

    diapers: list[DiaperEntry] = period(Category.DIAPERS)
    given: list[DonationGivenEntry] = period(Category.DONATIONS_GIVEN)
    received: list[DonationReceivedEntry] = period(Category.DONATIONS_RECEIVED)
    bus_passes: list[BusPassEntry] = period(Category.BUS_PASSES)
    rides = period(Category.RIDESHARE)

    return MonthSummary(
        year=year,
        month=month,
        label=month_label(year, month),
        diapers=DiaperSummary(
            quantity=sum(entry.diapers_qty for entry in diapers),
            packs=sum(entry.packs for entry in diapers),
            families=unique_subjects(diapers),
        ),
        donations=DonationSummary(
            given_items=sum(entry.quantity for entry in given),
            given_value=sum((entry.estimated_value for entry in given), 0.0),
            received_items=sum(entry.quantity for entry in received),
            received_value=sum((entry.estimated_value for entry in received), 0.0),
            donors=unique_subjects(received),
        ),
        bus_passes=TransportSummary(
            trips=sum(entry.quantity for entry in bus_passes),
            cost=sum_values(bus_passes),
        ),
        rideshare=TransportSummary(trips=len(rides), cost=sum_values(rides)),
        water=_assistance(period(Category.WATER)),
        electric=_assistance(period(Category.ELECTRIC)),
        rent=_assistance(period(Category.RENT)),
    )
