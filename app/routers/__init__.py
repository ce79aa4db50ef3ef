"""API router package."""

from app.routers import dashboard, resources

__all__ = [
    "dashboard",
    "resources",
]
