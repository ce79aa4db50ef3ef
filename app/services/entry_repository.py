"""In-memory entry collections backed by a remote system of record."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from app.schemas.categories import Category
from app.schemas.entries import ResourceEntry, parse_entry
from app.services.resource_backend import EntryBackend
from app.utils.errors import SyncError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositorySnapshot:
    """Immutable view of every collection at one point in time.

    Collections keep insertion order; ``version`` changes whenever the
    repository's contents change.
    """

    collections: Mapping[Category, tuple[ResourceEntry, ...]]
    version: int = 0

    def entries(self, category: Category | None = None) -> tuple[ResourceEntry, ...]:
        if category is not None:
            return self.collections.get(category, ())
        return tuple(entry for cat in Category for entry in self.collections.get(cat, ()))

    def __iter__(self) -> Iterator[ResourceEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return sum(len(rows) for rows in self.collections.values())

    @classmethod
    def from_entries(cls, entries: Iterable[ResourceEntry], version: int = 0) -> RepositorySnapshot:
        """Group loose entries by their own category."""
        grouped: dict[Category, list[ResourceEntry]] = {category: [] for category in Category}
        for entry in entries:
            grouped[entry.category].append(entry)
        return cls(
            collections=MappingProxyType({cat: tuple(rows) for cat, rows in grouped.items()}),
            version=version,
        )


def sort_recent_first(entries: Iterable[ResourceEntry]) -> list[ResourceEntry]:
    """Order entries newest date first; same-day entries keep insertion order."""
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


class EntryRepository:
    """Owns the per-category collections and is the only thing that mutates them.

    ``add`` appends optimistically, submits to the backend, and either swaps in
    the acknowledged entry or rolls the optimistic one back and raises
    ``SyncError``. Readers get tuples from ``snapshot`` so aggregation never
    sees a half-applied change. Ids are unique within a category; each
    category is its own table upstream, so the same raw id may appear in two.
    """

    def __init__(self, backend: EntryBackend) -> None:
        self.backend = backend
        self._collections: dict[Category, list[ResourceEntry]] = {
            category: [] for category in Category
        }
        self._ids: dict[Category, set[str]] = {category: set() for category in Category}
        self._version = 0
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> RepositorySnapshot:
        with self._lock:
            return RepositorySnapshot(
                collections=MappingProxyType(
                    {category: tuple(rows) for category, rows in self._collections.items()}
                ),
                version=self._version,
            )

    def list(self, category: Category, limit: int | None = None) -> list[ResourceEntry]:
        """Return ``category`` entries, most recent first."""
        with self._lock:
            rows = list(self._collections[category])
        ordered = sort_recent_first(rows)
        return ordered[:limit] if limit else ordered

    def recent(self, category: Category, limit: int = 10) -> list[ResourceEntry]:
        return self.list(category, limit=limit)

    def add(self, category: Category, entry: ResourceEntry | Mapping[str, Any]) -> ResourceEntry:
        """Validate, submit and store one entry, returning it with its backend id.

        Raises:
            ValidationError: malformed payload, wrong category, or a client id.
            SyncError: the backend did not acknowledge; nothing is kept locally.
        """
        pending = self._validate(category, entry)

        with self._lock:
            self._collections[category].append(pending)
            self._version += 1

        try:
            ack = self.backend.submit(category, pending)
        except Exception as exc:
            self._rollback(category, pending)
            if isinstance(exc, SyncError):
                raise
            raise SyncError(f"Saving the {category.label} entry failed, please retry") from exc

        entry_id = ack.get("id") if isinstance(ack, Mapping) else None
        if entry_id in (None, ""):
            self._rollback(category, pending)
            raise SyncError(f"Backend did not assign an id to the {category.label} entry")

        stored = pending.model_copy(update={"id": str(entry_id)})
        with self._lock:
            rows = self._collections[category]
            known = self._ids[category]
            index = self._index_of(rows, pending)
            if index is None and stored.id in known:
                return stored
            if stored.id in known:
                self._remove(category, pending)
                self._version += 1
                logger.warning(
                    "Backend reused id %s for %s; entry rolled back", stored.id, category
                )
                raise SyncError(f"Backend returned a duplicate id for the {category.label} entry")
            if index is None:
                rows.append(stored)
            else:
                rows[index] = stored
            known.add(stored.id)
            self._version += 1
        return stored

    def load(self, categories: Iterable[Category] | None = None) -> dict[Category, int]:
        """Replace collections with what the backend currently holds.

        All requested categories are fetched before anything is swapped in, so
        a failed fetch leaves the previous collections untouched.
        """
        targets = list(categories) if categories is not None else list(Category)
        fetched = {
            category: self._parse_rows(category, self.backend.fetch(category))
            for category in targets
        }

        with self._lock:
            for category, rows in fetched.items():
                self._collections[category] = rows
                self._ids[category] = {entry.id for entry in rows if entry.id is not None}
            self._version += 1
        return {category: len(rows) for category, rows in fetched.items()}

    def _validate(
        self, category: Category, entry: ResourceEntry | Mapping[str, Any]
    ) -> ResourceEntry:
        if isinstance(entry, ResourceEntry):
            if entry.category != category:
                raise ValidationError(
                    f"A {entry.category.label} entry cannot be added to {category.label}",
                    field="category",
                )
            pending = entry
        else:
            pending = parse_entry(category, entry)
        if pending.id is not None:
            raise ValidationError("Entry ids are assigned by the backend", field="id")
        return pending

    def _parse_rows(self, category: Category, rows: list[dict[str, Any]]) -> list[ResourceEntry]:
        parsed: list[ResourceEntry] = []
        seen: set[str] = set()
        for row in rows:
            try:
                entry = parse_entry(category, row)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed %s row (%s): %s", category, exc.field, exc.message
                )
                continue
            if entry.id is not None:
                if entry.id in seen:
                    logger.warning("Skipping duplicate %s row with id %s", category, entry.id)
                    continue
                seen.add(entry.id)
            parsed.append(entry)
        return parsed

    def _rollback(self, category: Category, pending: ResourceEntry) -> None:
        with self._lock:
            self._remove(category, pending)
            self._version += 1
        logger.warning("Rolled back optimistic %s entry dated %s", category, pending.date)

    def _remove(self, category: Category, pending: ResourceEntry) -> None:
        rows = self._collections[category]
        index = self._index_of(rows, pending)
        if index is not None:
            del rows[index]

    @staticmethod
    def _index_of(rows: list[ResourceEntry], pending: ResourceEntry) -> int | None:
        # Identity, not equality: two identical submissions are distinct entries.
        # None when a reload replaced the collection while the submit was in flight.
        for index, row in enumerate(rows):
            if row is pending:
                return index
        return None
