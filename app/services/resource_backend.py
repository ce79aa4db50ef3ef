"""Remote systems of record for assistance entries.

The repository only needs two things from a backend: fetch every entry of a
category, and submit one entry and get it back acknowledged with an id. Both
adapters below normalize every transport or upstream failure to ``SyncError``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

import httpx

from app.schemas.categories import Category
from app.schemas.entries import ResourceEntry
from app.services.common import SupabaseService
from app.utils.errors import SyncError
from supabase import Client

logger = logging.getLogger(__name__)


class EntryBackend(Protocol):
    """Fetch/submit boundary consumed by ``EntryRepository``."""

    def fetch(self, category: Category) -> list[dict[str, Any]]: ...

    def submit(self, category: Category, entry: ResourceEntry) -> dict[str, Any]: ...


class HttpEntryBackend:
    """Resource API client: ``/api/resources/{category}`` for reads and writes."""

    def __init__(self, client: httpx.Client, slow_call_threshold_ms: int = 0) -> None:
        self.client = client
        self.slow_call_threshold_ms = slow_call_threshold_ms

    def fetch(self, category: Category) -> list[dict[str, Any]]:
        data = self._request("GET", category)
        if data is None:
            return []
        if not isinstance(data, list):
            raise SyncError(f"Unexpected {category.value} listing from backend")
        return data

    def submit(self, category: Category, entry: ResourceEntry) -> dict[str, Any]:
        data = self._request("POST", category, json=entry.to_payload(by_alias=True))
        if not isinstance(data, dict):
            raise SyncError(f"Backend did not acknowledge the {category.label} entry")
        return data

    def _request(self, method: str, category: Category, **kwargs: Any) -> Any:
        path = f"/api/resources/{category.value}"
        started = time.perf_counter()
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise SyncError(
                f"Resource API returned {exc.response.status_code} for {category.label}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise SyncError(f"Resource API request for {category.label} failed") from exc
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            threshold_ms = self.slow_call_threshold_ms
            if threshold_ms > 0 and elapsed_ms >= threshold_ms:
                logger.warning("Slow resource API call %s %s %.1fms", method, path, elapsed_ms)

        return self._unwrap(body)

    @staticmethod
    def _unwrap(body: Any) -> Any:
        """Strip the ``{"success": ..., "data": ...}`` envelope when present."""
        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                raise SyncError(str(body.get("error") or body.get("message") or "Request rejected"))
            return body.get("data")
        return body


class SupabaseEntryBackend:
    """One ``resource_<category>`` table per category, rows in snake_case."""

    def __init__(self, client: Client, slow_query_threshold_ms: int = 0) -> None:
        self.db = SupabaseService(client, slow_query_threshold_ms=slow_query_threshold_ms)

    @staticmethod
    def table_name(category: Category) -> str:
        return f"resource_{category.value}"

    def fetch(self, category: Category) -> list[dict[str, Any]]:
        return self.db.select_all(self.table_name(category), order_by="created_at")

    def submit(self, category: Category, entry: ResourceEntry) -> dict[str, Any]:
        return self.db.insert_one(self.table_name(category), entry.to_payload(by_alias=False))
