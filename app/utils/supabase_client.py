"""Supabase and HTTP client singletons used by the resource backends."""

from functools import lru_cache

import httpx
from supabase.lib.client_options import SyncClientOptions

from app.config import settings
from supabase import Client, create_client


def _pool_limits() -> httpx.Limits:
    max_connections = max(10, settings.http_max_connections)
    return httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max(
            5, min(max_connections, settings.http_max_keepalive_connections)
        ),
    )


def _supabase_options() -> SyncClientOptions:
    timeout_seconds = max(1, settings.supabase_postgrest_timeout_seconds)
    # The resource tables are read and written server-side only; no user session.
    return SyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=timeout_seconds,
        httpx_client=httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            limits=_pool_limits(),
        ),
    )


@lru_cache(maxsize=1)
def get_service_client() -> Client:
    """Return the service-role Supabase client that owns the ``resource_*`` tables."""
    return create_client(
        settings.supabase_url,
        settings.supabase_service_key,
        options=_supabase_options(),
    )


def build_resource_http_client(base_url: str, timeout_seconds: int) -> httpx.Client:
    """Return an httpx client bound to the resource API base URL."""
    return httpx.Client(
        base_url=base_url.rstrip("/"),
        timeout=httpx.Timeout(max(1, timeout_seconds)),
        limits=_pool_limits(),
        headers={"Accept": "application/json"},
    )
