"""Assistance entry endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from app.dependencies import get_category, get_repository
from app.schemas.categories import Category
from app.schemas.entries import choice_sets, entry_model_for
from app.services.entry_repository import EntryRepository

router = APIRouter()


def _serialize(entry) -> dict[str, Any]:
    return entry.model_dump(mode="json", by_alias=True)


@router.get("/categories")
def list_categories() -> dict:
    """Return every category with its label, color, value field and form choices."""
    return {
        "categories": [
            {
                "id": category.value,
                "label": category.label,
                "color": category.color,
                "value_field": entry_model_for(category).value_field,
                "choices": choice_sets(category),
            }
            for category in Category
        ]
    }


@router.post("/refresh")
def refresh_entries(repository: EntryRepository = Depends(get_repository)) -> dict:
    """Reload every collection from the system of record."""
    loaded = repository.load()
    return {"loaded": {category.value: count for category, count in loaded.items()}}


@router.get("/{category}")
def list_entries(
    category: Category = Depends(get_category),
    limit: int | None = Query(default=None, ge=1, le=500),
    repository: EntryRepository = Depends(get_repository),
) -> dict:
    """Return entries for a category, most recent first."""
    entries = repository.list(category, limit=limit)
    return {"category": category.value, "entries": [_serialize(entry) for entry in entries]}


@router.get("/{category}/recent")
def recent_entries(
    category: Category = Depends(get_category),
    repository: EntryRepository = Depends(get_repository),
) -> dict:
    """Return the ten most recent entries for the dashboard activity table."""
    entries = repository.recent(category)
    return {"category": category.value, "entries": [_serialize(entry) for entry in entries]}


@router.post("/{category}", status_code=201)
def create_entry(
    payload: dict[str, Any] = Body(...),
    category: Category = Depends(get_category),
    repository: EntryRepository = Depends(get_repository),
) -> dict:
    """Validate and submit one entry; returns it with the backend-assigned id."""
    entry = repository.add(category, payload)
    return {"entry": _serialize(entry)}
