"""Schemas for property listings."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AvailabilityType = Literal["available-now", "not-available", "date"]
PropertySource = Literal["initial", "custom"]
VisibilityFilter = Literal["all", "visible", "hidden"]


class CamelModel(BaseModel):
    """Base model using camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PropertyMedia(CamelModel):
    url: str
    title: str | None = None
    description: str | None = None


class PropertyAvailability(CamelModel):
    type: AvailabilityType = "available-now"
    date: str | None = None


class Property(CamelModel):
    """A listing as stored and served.

    ``source`` is derived when the merged view is built and is never part of a
    persisted payload.
    """

    id: str = Field(min_length=1)
    name: str
    image: str = ""
    neighborhood: str = ""
    subcluster: str | None = None
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    sqft: int = Field(default=0, ge=0)
    maids_room: bool | None = None
    price: str = ""
    rent_price_per_year: str | None = None
    price_details: str | None = None
    labels: list[str] = Field(default_factory=list)
    description: str = ""
    amenities: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    location_description: str | None = None
    google_map_url: str | None = None
    video_url: str | None = None
    gallery_images: list[PropertyMedia] | None = None
    development_images: list[PropertyMedia] | None = None
    floorplans: list[PropertyMedia] | None = None
    availability: PropertyAvailability | None = None
    visible: bool = True
    source: PropertySource | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_payload(self) -> dict:
        """Return the JSON payload persisted for a custom record."""

        return self.model_dump(mode="json", by_alias=True, exclude={"source"}, exclude_none=True)

    def with_source(self, source: PropertySource) -> "Property":
        return self.model_copy(update={"source": source})


class AvailabilityInfo(CamelModel):
    type: AvailabilityType
    label: str
    description: str
    formatted_date: str | None = None


class PropertyView(Property):
    """Listing enriched with display helpers for the views."""

    availability_info: AvailabilityInfo
    bedroom_label: str
    price_label: str


class PropertyListResponse(CamelModel):
    items: list[PropertyView]
    total: int
    visible_count: int


class PropertyForm(CamelModel):
    """Admin edit form submission.

    Everything except ``id`` and ``name`` may be omitted; missing values fall
    back to the record being edited.
    """

    id: str | None = None
    name: str | None = None
    neighborhood: str | None = None
    subcluster: str | None = None
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    sqft: int | None = Field(default=None, ge=0)
    maids_room: bool | None = None
    price: str | None = None
    price_details: str | None = None
    labels: list[str] | None = None
    description: str | None = None
    amenities: list[str] | None = None
    features: list[str] | None = None
    location_description: str | None = None
    google_map_url: str | None = None
    video_url: str | None = None
    visible: bool | None = None
    availability: PropertyAvailability | None = None
    gallery_images: list[PropertyMedia] = Field(default_factory=list)
    development_images: list[PropertyMedia] = Field(default_factory=list)
    floorplans: list[PropertyMedia] = Field(default_factory=list)
