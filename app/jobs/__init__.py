"""Background job modules for periodic resource tracker tasks."""

from app.jobs.refresh_entries import refresh_entries

__all__ = [
    "refresh_entries",
]
