"""Scheduled refresh job tests."""

from __future__ import annotations

import asyncio
import importlib
import logging

from app.schemas.categories import Category
from app.services.entry_repository import EntryRepository
from app.utils.errors import SyncError

# The package re-exports the job function under the module's own name.
refresh_module = importlib.import_module("app.jobs.refresh_entries")


def test_refresh_loads_backend_rows(monkeypatch, backend) -> None:
    backend.rows[Category.WATER] = [
        {"id": "w1", "date": "2026-02-03", "client_name": "Ana", "amount": 20,
         "account_number": "1", "provider": "Other"},
    ]
    repository = EntryRepository(backend)
    monkeypatch.setattr(refresh_module, "get_repository", lambda: repository)

    asyncio.run(refresh_module.refresh_entries())

    assert [entry.id for entry in repository.list(Category.WATER)] == ["w1"]


def test_refresh_failure_keeps_collections(monkeypatch, backend, caplog) -> None:
    repository = EntryRepository(backend)
    stored = repository.add(
        Category.RENT,
        {"date": "2026-02-03", "clientName": "Ana", "amount": 300, "landlord": "L"},
    )
    backend.fetch_error = SyncError("Resource API unavailable")
    monkeypatch.setattr(refresh_module, "get_repository", lambda: repository)

    with caplog.at_level(logging.WARNING):
        asyncio.run(refresh_module.refresh_entries())

    assert repository.list(Category.RENT) == [stored]
    assert "refresh_entries failed" in caplog.text
