"""Pytest fixtures for backend tests."""

from __future__ import annotations

import itertools
import os
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.schemas.categories import Category
from app.schemas.entries import ResourceEntry
from app.utils.errors import SyncError


def _set_default_env() -> None:
    os.environ.setdefault("RESOURCE_BACKEND", "http")
    os.environ.setdefault("RESOURCE_API_BASE_URL", "https://resources.example.org")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")
    os.environ.setdefault("LOAD_ON_STARTUP", "false")
    os.environ.setdefault("TIMEZONE", "UTC")


_set_default_env()


class FakeBackend:
    """In-memory system of record with switchable failure modes."""

    def __init__(self) -> None:
        self.rows: dict[Category, list[dict[str, Any]]] = {category: [] for category in Category}
        self.submitted: list[tuple[Category, ResourceEntry]] = []
        self.submit_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.ack: dict[str, Any] | None = None
        self.on_submit = None
        self._ids = itertools.count(1)

    def fetch(self, category: Category) -> list[dict[str, Any]]:
        if self.fetch_error is not None:
            raise self.fetch_error
        return [dict(row) for row in self.rows[category]]

    def submit(self, category: Category, entry: ResourceEntry) -> dict[str, Any]:
        self.submitted.append((category, entry))
        if self.on_submit is not None:
            self.on_submit(category, entry)
        if self.submit_error is not None:
            raise self.submit_error
        if self.ack is not None:
            return dict(self.ack)
        row = {**entry.to_payload(), "id": f"{category.value}-{next(self._ids)}"}
        self.rows[category].append(row)
        return row


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def sync_failure() -> SyncError:
    return SyncError("Resource API returned 502 for Diapers")


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def api(client: TestClient, backend: FakeBackend) -> Iterator[TestClient]:
    """Test client whose repository is backed by ``backend``."""
    from app.dependencies import get_repository
    from app.main import app
    from app.services.entry_repository import EntryRepository

    repository = EntryRepository(backend)
    app.dependency_overrides[get_repository] = lambda: repository
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_repository, None)
