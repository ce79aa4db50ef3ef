"""Periodic reload of entry collections from the system of record."""

from __future__ import annotations

import asyncio
import logging

from app.dependencies import get_repository
from app.utils.errors import SyncError

logger = logging.getLogger(__name__)


async def refresh_entries() -> None:
    """Replace in-memory collections with the backend's current rows."""
    repository = get_repository()
    try:
        loaded = await asyncio.to_thread(repository.load)
    except SyncError as exc:
        logger.warning("refresh_entries failed, keeping previous collections: %s", exc.message)
        return

    logger.info("refresh_entries completed with %s entries", sum(loaded.values()))
