"""Aggregation tests over hand-built snapshots."""

from __future__ import annotations

from datetime import date

import pytest

from app.schemas.categories import Category
from app.schemas.entries import parse_entry
from app.services.aggregation_service import (
    month_summary,
    total_by_category,
    total_by_month,
    trend,
    unique_subjects,
    year_to_date,
)
from app.services.entry_repository import RepositorySnapshot
from app.utils.errors import InvalidInputError


def _diapers(day: str, client: str, qty: int, packs: int = 1):
    return parse_entry(
        Category.DIAPERS,
        {"date": day, "clientName": client, "diapersQty": qty, "packs": packs,
         "diaperSize": "Size 4"},
    )


def _rent(day: str, client: str, amount: float):
    return parse_entry(
        Category.RENT,
        {"date": day, "clientName": client, "amount": amount, "landlord": "Capitol Housing"},
    )


@pytest.fixture
def snapshot() -> RepositorySnapshot:
    return RepositorySnapshot.from_entries(
        [
            _diapers("2025-12-20", "Kia Brown", 30),
            _diapers("2026-01-05", "Kia Brown", 50, packs=2),
            _diapers("2026-01-18", " kia brown ", 20),
            _diapers("2026-03-02", "Lena Moss", 40),
            _rent("2026-01-09", "Lena Moss", 500),
            _rent("2026-03-31", "Ray Cole", 725.5),
            _rent("2026-04-01", "Ray Cole", 100),
            parse_entry(
                Category.RIDESHARE,
                {"date": "2026-01-11", "clientName": "Ray Cole", "pickup": "Home",
                 "destination": "Clinic", "purpose": "Medical Appointment", "cost": 12.5},
            ),
            parse_entry(
                Category.BUS_PASSES,
                {"date": "2026-01-12", "clientName": "Ray Cole", "passType": "Day Pass",
                 "quantity": 3, "cost": 9},
            ),
            parse_entry(
                Category.DONATIONS_RECEIVED,
                {"date": "2026-01-14", "donorName": "Grace Church", "itemType": "Wipes",
                 "quantity": 40, "estimatedValue": 120},
            ),
            parse_entry(
                Category.DONATIONS_GIVEN,
                {"date": "2026-01-15", "clientName": "Kia Brown", "itemType": "Clothing",
                 "quantity": 6, "estimatedValue": 45},
            ),
        ]
    )


def test_total_by_category_reports_every_category(snapshot) -> None:
    """Empty categories appear with 0 rather than being omitted."""
    totals = total_by_category(snapshot)

    assert set(totals) == set(Category)
    assert totals[Category.DIAPERS] == 140
    assert totals[Category.RENT] == 1325.5
    assert totals[Category.WATER] == 0
    assert totals[Category.ELECTRIC] == 0


def test_total_by_category_for_one_month(snapshot) -> None:
    """Period filters narrow every category at once."""
    totals = total_by_category(snapshot, year=2026, month=1)

    assert totals[Category.DIAPERS] == 70
    assert totals[Category.RENT] == 500
    assert totals[Category.RIDESHARE] == 12.5


def test_total_by_month_has_twelve_buckets(snapshot) -> None:
    """Buckets run January to December and exclude other years."""
    buckets = total_by_month(snapshot, 2026, category=Category.DIAPERS)

    assert len(buckets) == 12
    assert buckets[0] == 70
    assert buckets[2] == 40
    assert sum(buckets) == 110
    assert total_by_month(snapshot, 2024) == [0] * 12


def test_year_to_date_includes_today_and_excludes_later(snapshot) -> None:
    """The window is January 1st through today inclusive."""
    assert year_to_date(snapshot, date(2026, 3, 31), Category.RENT) == 1225.5
    assert year_to_date(snapshot, date(2026, 3, 30), Category.RENT) == 500
    assert year_to_date(snapshot, date(2026, 12, 31), Category.DIAPERS) == 110


def test_trend_is_oldest_first_and_crosses_years(snapshot) -> None:
    """Trend windows end at today's month and may span a new year."""
    points = trend(snapshot, 3, date(2026, 1, 20), category=Category.DIAPERS)

    assert [point.label for point in points] == ["Nov 2025", "Dec 2025", "Jan 2026"]
    assert [point.value for point in points] == [0, 30, 70]


def test_trend_rejects_empty_window(snapshot) -> None:
    """A window must cover at least one month."""
    with pytest.raises(InvalidInputError):
        trend(snapshot, 0, date(2026, 1, 1))


def test_aggregates_are_pure(snapshot) -> None:
    """Repeated calls on the same snapshot agree."""
    assert total_by_category(snapshot) == total_by_category(snapshot)
    assert total_by_month(snapshot, 2026) == total_by_month(snapshot, 2026)


def test_empty_snapshot_totals_zero() -> None:
    """No entries yields zero everywhere."""
    empty = RepositorySnapshot.from_entries([])
    assert all(value == 0 for value in total_by_category(empty).values())
    assert year_to_date(empty, date(2026, 6, 1)) == 0


def test_unique_subjects_ignores_case_and_whitespace(snapshot) -> None:
    """Client names that differ only in case count once."""
    assert unique_subjects(snapshot.entries(Category.DIAPERS)) == 2


def test_month_summary_cards(snapshot) -> None:
    """Month overview rolls up diapers, donations and transport."""
    summary = month_summary(snapshot, 2026, 1)

    assert summary.label == "Jan 2026"
    assert summary.diapers.quantity == 70
    assert summary.diapers.packs == 3
    assert summary.diapers.families == 1
    assert summary.donations.given_items == 6
    assert summary.donations.received_items == 40
    assert summary.donations.received_value == 120
    assert summary.donations.donors == 1
    assert summary.bus_passes.trips == 3
    assert summary.bus_passes.cost == 9
    assert summary.rideshare.trips == 1
    assert summary.rent.amount == 500
    assert summary.rent.bills == 1
    assert summary.water.amount == 0


def test_month_summary_rejects_invalid_month(snapshot) -> None:
    """Months are 1 through 12."""
    with pytest.raises(InvalidInputError):
        month_summary(snapshot, 2026, 13)


def test_zero_quantity_entries_add_nothing() -> None:
    """Diaper quantities 20, 30 and 0 total 50."""
    snapshot = RepositorySnapshot.from_entries(
        [
            _diapers("2026-02-01", "A", 20),
            _diapers("2026-02-02", "B", 30),
            _diapers("2026-02-03", "C", 0),
        ]
    )
    assert total_by_category(snapshot)[Category.DIAPERS] == 50


def test_category_totals_match_monthly_buckets(snapshot) -> None:
    """A year's monthly buckets add up to that year's category totals."""
    by_category = total_by_category(snapshot, year=2026)
    for category in Category:
        assert sum(total_by_month(snapshot, 2026, category=category)) == pytest.approx(
            by_category[category]
        )
    assert sum(total_by_month(snapshot, 2026)) == pytest.approx(sum(by_category.values()))
