"""Assistance entry schemas, one model per category."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, ClassVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.categories import (
    BusPassType,
    Category,
    DiaperSize,
    DonationItem,
    ElectricProvider,
    RidePurpose,
    WaterProvider,
)
from app.utils.errors import ValidationError


class ResourceEntry(BaseModel):
    """Fields shared by every assistance entry.

    ``id`` stays ``None`` until the backend acknowledges the entry. Payloads
    use camelCase keys (``clientName``) on the wire; snake_case names are
    accepted too so Supabase rows validate without translation.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
        coerce_numbers_to_str=True,
        frozen=True,
        extra="ignore",
    )

    category: ClassVar[Category]
    value_field: ClassVar[str]
    subject_field: ClassVar[str] = "client_name"

    id: str | None = None
    date: dt.date
    notes: str = ""

    @property
    def value(self) -> float:
        """Return the numeric field that aggregation sums for this category."""
        return getattr(self, self.value_field)

    @property
    def subject(self) -> str:
        """Return the client or donor this entry is about."""
        return getattr(self, self.subject_field)

    def to_payload(self, by_alias: bool = True) -> dict[str, Any]:
        """Serialize for submission; unsaved entries omit ``id``."""
        exclude = {"id"} if self.id is None else None
        return self.model_dump(mode="json", by_alias=by_alias, exclude=exclude)


class DiaperEntry(ResourceEntry):
    category: ClassVar[Category] = Category.DIAPERS
    value_field: ClassVar[str] = "diapers_qty"

    client_name: str = Field(..., min_length=1)
    diapers_qty: int = Field(..., ge=0, strict=True)
    packs: int = Field(default=0, ge=0, strict=True)
    diaper_size: DiaperSize


class DonationGivenEntry(ResourceEntry):
    category: ClassVar[Category] = Category.DONATIONS_GIVEN
    value_field: ClassVar[str] = "quantity"

    client_name: str = Field(..., min_length=1)
    item_type: DonationItem
    quantity: int = Field(..., ge=0, strict=True)
    estimated_value: float = Field(default=0.0, ge=0, strict=True)


class DonationReceivedEntry(ResourceEntry):
    category: ClassVar[Category] = Category.DONATIONS_RECEIVED
    value_field: ClassVar[str] = "quantity"
    subject_field: ClassVar[str] = "donor_name"

    donor_name: str = Field(..., min_length=1)
    item_type: DonationItem
    quantity: int = Field(..., ge=0, strict=True)
    estimated_value: float = Field(default=0.0, ge=0, strict=True)


class BusPassEntry(ResourceEntry):
    category: ClassVar[Category] = Category.BUS_PASSES
    value_field: ClassVar[str] = "cost"

    client_name: str = Field(..., min_length=1)
    pass_type: BusPassType
    quantity: int = Field(default=1, ge=0, strict=True)
    cost: float = Field(..., ge=0, strict=True)


class RideshareEntry(ResourceEntry):
    category: ClassVar[Category] = Category.RIDESHARE
    value_field: ClassVar[str] = "cost"

    client_name: str = Field(..., min_length=1)
    pickup: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    purpose: RidePurpose
    cost: float = Field(..., ge=0, strict=True)


class WaterEntry(ResourceEntry):
    category: ClassVar[Category] = Category.WATER
    value_field: ClassVar[str] = "amount"

    client_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, strict=True)
    account_number: str = Field(..., min_length=1)
    provider: WaterProvider


class ElectricEntry(ResourceEntry):
    category: ClassVar[Category] = Category.ELECTRIC
    value_field: ClassVar[str] = "amount"

    client_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, strict=True)
    account_number: str = Field(..., min_length=1)
    provider: ElectricProvider


class RentEntry(ResourceEntry):
    category: ClassVar[Category] = Category.RENT
    value_field: ClassVar[str] = "amount"

    client_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, strict=True)
    landlord: str = Field(..., min_length=1)
    property_address: str = ""


ENTRY_MODELS: dict[Category, type[ResourceEntry]] = {
    Category.DIAPERS: DiaperEntry,
    Category.DONATIONS_GIVEN: DonationGivenEntry,
    Category.DONATIONS_RECEIVED: DonationReceivedEntry,
    Category.BUS_PASSES: BusPassEntry,
    Category.RIDESHARE: RideshareEntry,
    Category.WATER: WaterEntry,
    Category.ELECTRIC: ElectricEntry,
    Category.RENT: RentEntry,
}


def entry_model_for(category: Category) -> type[ResourceEntry]:
    """Return the entry model registered for ``category``."""
    return ENTRY_MODELS[category]


def parse_entry(category: Category, payload: Mapping[str, Any]) -> ResourceEntry:
    """Validate ``payload`` as an entry of ``category``.

    Raises:
        ValidationError: the first failing field, with its wire name.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Entry payload must be an object")

    model = entry_model_for(category)
    try:
        return model.model_validate(dict(payload))
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(first.get("msg", "Invalid entry"), field=field) from exc


def choice_sets(category: Category) -> dict[str, list[str]]:
    """Return the closed choice lists (by wire name) that ``category`` entries use."""
    choices: dict[str, list[str]] = {}
    for name, info in entry_model_for(category).model_fields.items():
        annotation = info.annotation
        if isinstance(annotation, type) and issubclass(annotation, StrEnum):
            choices[info.alias or name] = [member.value for member in annotation]
    return choices
