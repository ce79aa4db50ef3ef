"""Print a CSV of monthly assistance totals per category for one year."""

from __future__ import annotations

import argparse
import csv
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import TextIO

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Load entries through the configured backend and print monthly totals.",
    )
    parser.add_argument(
        "year",
        type=int,
        help="Calendar year to report on.",
    )
    parser.add_argument(
        "--category",
        action="append",
        default=None,
        help="Limit the report to a category slug (repeatable). Defaults to all.",
    )
    parser.add_argument(
        "--as-of",
        default=None,
        help="Ignore entries dated after this ISO date (YYYY-MM-DD). Defaults to today.",
    )
    return parser.parse_args(argv)


def build_rows(snapshot, year: int, categories, as_of: date | None = None) -> list[list[str]]:
    """Return header + one row per category + a totals row."""
    from app.services.aggregation_service import total_by_month
    from app.services.entry_repository import RepositorySnapshot
    from app.utils.time import month_code

    if as_of is not None:
        snapshot = RepositorySnapshot.from_entries(
            (entry for entry in snapshot if entry.date <= as_of),
            version=snapshot.version,
        )

    header = ["category", *(month_code(month) for month in range(1, 13)), "total"]
    rows = [header]
    grand = [0.0] * 12
    for category in categories:
        buckets = total_by_month(snapshot, year, category=category)
        grand = [running + value for running, value in zip(grand, buckets)]
        rows.append([category.value, *(_fmt(value) for value in buckets), _fmt(sum(buckets))])
    rows.append(["all", *(_fmt(value) for value in grand), _fmt(sum(grand))])
    return rows


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def write_report(rows: list[list[str]], out: TextIO) -> None:
    """Write the report rows as CSV."""
    writer = csv.writer(out)
    writer.writerows(rows)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)

    from app.config import settings
    from app.dependencies import get_category, get_repository
    from app.schemas.categories import Category
    from app.utils.time import local_today, parse_iso_date

    try:
        as_of = parse_iso_date(args.as_of, default=local_today(settings.timezone))
    except ValueError as exc:
        raise SystemExit(f"Invalid --as-of date {args.as_of!r}: {exc}") from exc

    categories = [get_category(slug) for slug in args.category] if args.category else None
    repository = get_repository()
    repository.load(categories)

    rows = build_rows(repository.snapshot(), args.year, categories or list(Category), as_of)
    write_report(rows, sys.stdout)


if __name__ == "__main__":
    main()
