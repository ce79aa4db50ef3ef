"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "CountUpAnimation": "app.services.animation",
    "DashboardService": "app.services.dashboard_service",
    "EntryRepository": "app.services.entry_repository",
    "HttpEntryBackend": "app.services.resource_backend",
    "RingTransition": "app.services.animation",
    "SupabaseEntryBackend": "app.services.resource_backend",
    "SupabaseService": "app.services.common",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
