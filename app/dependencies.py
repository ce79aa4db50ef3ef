"""FastAPI dependency injection helpers."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends

from app.config import settings
from app.schemas.categories import Category
from app.services.dashboard_service import DashboardService
from app.services.entry_repository import EntryRepository
from app.services.resource_backend import EntryBackend, HttpEntryBackend, SupabaseEntryBackend
from app.utils.errors import NotFoundError
from app.utils.supabase_client import build_resource_http_client, get_service_client

logger = logging.getLogger(__name__)


def build_entry_backend() -> EntryBackend:
    """Create the backend selected by ``RESOURCE_BACKEND``."""
    if settings.resource_backend == "supabase":
        return SupabaseEntryBackend(
            get_service_client(),
            slow_query_threshold_ms=settings.slow_sync_log_threshold_ms,
        )
    if settings.resource_backend != "http":
        logger.warning(
            "Unknown RESOURCE_BACKEND %r, falling back to http", settings.resource_backend
        )
    client = build_resource_http_client(
        settings.resource_api_base_url,
        settings.resource_api_timeout_seconds,
    )
    return HttpEntryBackend(client, slow_call_threshold_ms=settings.slow_sync_log_threshold_ms)


@lru_cache(maxsize=1)
def get_repository() -> EntryRepository:
    """Return the process-wide entry repository."""
    return EntryRepository(build_entry_backend())


def get_dashboard_service(
    repository: EntryRepository = Depends(get_repository),
) -> DashboardService:
    """Return a dashboard service bound to the shared repository."""
    return DashboardService(
        repository,
        timezone=settings.timezone,
        donut_radius=settings.donut_radius,
        donut_stroke_width=settings.donut_stroke_width,
        donut_hover_stroke_delta=settings.donut_hover_stroke_delta,
        ring_radius=settings.ring_radius,
        ring_stroke_width=settings.ring_stroke_width,
        counter_duration_ms=settings.counter_duration_ms,
        frame_rate=settings.animation_frame_rate,
    )


def get_category(category: str) -> Category:
    """Resolve a category path parameter, 404 for unknown slugs."""
    try:
        return Category(category)
    except ValueError as exc:
        raise NotFoundError(f"Category '{category}'") from exc
