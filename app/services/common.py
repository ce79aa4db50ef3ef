"""Shared Supabase data access helpers for the resource tables."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from postgrest import APIError

from app.utils.errors import SyncError
from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseService:
    """Thin wrapper that turns every PostgREST failure into ``SyncError``."""

    def __init__(self, client: Client, slow_query_threshold_ms: int = 0) -> None:
        self.client = client
        self.slow_query_threshold_ms = slow_query_threshold_ms

    def execute(self, query, table: str, default: Any = None) -> Any:
        """Run ``query`` against ``table``; API and transport errors are retryable sync failures."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = getattr(exc, "message", None) or "Database request failed"
            logger.warning("Supabase rejected a request on %s: %s", table, message)
            raise SyncError(f"{table}: {message}") from exc
        except httpx.HTTPError as exc:
            raise SyncError(f"{table}: database unreachable") from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = self.slow_query_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query on %s %.1fms", table, elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def select_all(self, table: str, order_by: str | None = None) -> list[dict[str, Any]]:
        """Return every row of ``table``, oldest first when ``order_by`` is given."""
        query = self.client.table(table).select("*")
        if order_by:
            query = query.order(order_by, desc=False)
        return self.execute(query, table, default=[])

    def insert_one(self, table: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored, id included."""
        rows = self.execute(self.client.table(table).insert(payload), table, default=[])
        if not rows:
            raise SyncError(f"Insert into {table} was not acknowledged")
        return rows[0]
