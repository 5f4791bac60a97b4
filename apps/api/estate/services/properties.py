"""Business logic for public listings and the admin panel."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TypeVar

from fastapi import HTTPException, status

from ..data.properties import DEFAULT_PROPERTY_IMAGE
from ..schemas import properties as schemas
from .formatting import availability_info, format_bedroom_label, format_currency_aed, slugify
from .property_backends import PropertyPersistenceError
from .property_store import PropertyStore

T = TypeVar("T")

DEFAULT_PRICE = "Price on request"
SAVE_FAILED_DETAIL = (
    "We couldn't save the property data. Please remove a few media files or clear older custom "
    "listings and try again."
)


def to_view(record: schemas.Property) -> schemas.PropertyView:
    return schemas.PropertyView(
        **record.model_dump(),
        availability_info=availability_info(record.availability),
        bedroom_label=format_bedroom_label(record.bedrooms, record.maids_room),
        price_label=format_currency_aed(record.price),
    )


def list_public(store: PropertyStore) -> schemas.PropertyListResponse:
    """Return the listings shown on the public site."""

    visible = [record for record in store.get_snapshot() if record.visible]
    return _list_response(visible, visible_count=len(visible))


def list_admin(
    store: PropertyStore,
    visibility: schemas.VisibilityFilter = "all",
) -> schemas.PropertyListResponse:
    """Return every listing, optionally narrowed by visibility."""

    snapshot = store.get_snapshot()
    if visibility == "visible":
        selected = [record for record in snapshot if record.visible]
    elif visibility == "hidden":
        selected = [record for record in snapshot if not record.visible]
    else:
        selected = snapshot
    return _list_response(selected, visible_count=sum(1 for record in snapshot if record.visible))


def get_public(store: PropertyStore, property_id: str) -> schemas.PropertyView:
    record = store.find_by_id(property_id)
    if record is None or not record.visible:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return to_view(record)


def get_admin(store: PropertyStore, property_id: str) -> schemas.PropertyView:
    return to_view(_require(store, property_id))


async def save_from_form(
    store: PropertyStore,
    form: schemas.PropertyForm,
    *,
    existing_id: str | None = None,
) -> schemas.PropertyView:
    """Create or update a custom listing from the admin edit form.

    Values the form leaves out fall back to the listing being edited.
    ``createdAt`` survives updates and ``updatedAt`` is always reset.
    """

    existing = _require(store, existing_id) if existing_id is not None else None
    is_new = existing is None

    trimmed_name = (form.name or "").strip()
    raw_id = (form.id or existing_id or "").strip()
    if not trimmed_name or not raw_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide at least a property name and an ID.",
        )

    slug = slugify(raw_id)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Use letters and numbers for the property ID.",
        )

    if form.availability is not None and form.availability.type == "date" and not form.availability.date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please choose a start date or use one of the other availability options.",
        )

    renamed = existing is not None and slug != existing.id
    if (is_new or renamed) and store.find_by_id(slug) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A property with this ID already exists. Please choose another one.",
        )

    gallery = _titled_media(form.gallery_images, "Gallery Image")
    development = _titled_media(form.development_images, "Development Image")
    floorplans = _titled_media(form.floorplans, "Floor Plan")
    price = _clean(form.price)
    now = _now_iso()

    payload = schemas.Property(
        id=slug,
        name=trimmed_name,
        image=gallery[0].url if gallery else (existing.image if existing else DEFAULT_PROPERTY_IMAGE),
        neighborhood=_pick_text(form.neighborhood, existing.neighborhood if existing else ""),
        subcluster=_clean(form.subcluster) or (existing.subcluster if existing else None),
        bedrooms=_pick(form.bedrooms, existing.bedrooms if existing else 0),
        bathrooms=_pick(form.bathrooms, existing.bathrooms if existing else 0),
        sqft=_pick(form.sqft, existing.sqft if existing else 0),
        maids_room=_pick(form.maids_room, existing.maids_room if existing else False),
        price=price or (existing.price if existing and existing.price else DEFAULT_PRICE),
        rent_price_per_year=price or (existing.rent_price_per_year if existing else None),
        price_details=_clean(form.price_details) or (existing.price_details if existing else None),
        labels=_pick(form.labels, existing.labels if existing else []),
        description=_pick_text(form.description, existing.description if existing else ""),
        amenities=_pick(form.amenities, existing.amenities if existing else []),
        features=_pick(form.features, existing.features if existing else []),
        location_description=_clean(form.location_description) or (existing.location_description if existing else None),
        google_map_url=_clean(form.google_map_url) or (existing.google_map_url if existing else None),
        video_url=_clean(form.video_url) or (existing.video_url if existing else None),
        visible=_pick(form.visible, existing.visible if existing else True),
        availability=form.availability or (existing.availability if existing else None),
        gallery_images=gallery or (existing.gallery_images if existing else None),
        development_images=development or (existing.development_images if existing else None),
        floorplans=floorplans or (existing.floorplans if existing else None),
        created_at=(existing.created_at if existing and existing.created_at else now),
        updated_at=now,
    )

    await _persist(store, payload)
    return to_view(store.find_by_id(slug) or payload.with_source("custom"))


async def toggle_visibility(store: PropertyStore, property_id: str) -> schemas.PropertyView:
    """Flip whether a listing shows on the public site."""

    record = _require(store, property_id)
    updated = record.model_copy(update={"visible": not record.visible, "updated_at": _now_iso()})
    await _persist(store, updated)
    return to_view(store.find_by_id(property_id) or updated.with_source("custom"))


async def delete_property(store: PropertyStore, property_id: str) -> None:
    """Delete a custom listing.

    A built-in listing has nothing persisted to delete; if a custom record
    was shadowing it, the built-in version shows again afterwards.
    """

    _require(store, property_id)
    try:
        await store.remove(property_id)
    except PropertyPersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


async def _persist(store: PropertyStore, record: schemas.Property) -> None:
    try:
        await store.upsert(record)
    except PropertyPersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SAVE_FAILED_DETAIL) from exc


def _require(store: PropertyStore, property_id: str) -> schemas.Property:
    record = store.find_by_id(property_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return record


def _list_response(records: list[schemas.Property], *, visible_count: int) -> schemas.PropertyListResponse:
    return schemas.PropertyListResponse(
        items=[to_view(record) for record in records],
        total=len(records),
        visible_count=visible_count,
    )


def _titled_media(media: list[schemas.PropertyMedia], prefix: str) -> list[schemas.PropertyMedia]:
    return [
        schemas.PropertyMedia(url=item.url, title=item.title or f"{prefix} {index}", description=item.description)
        for index, item in enumerate(media, start=1)
    ]


def _clean(value: str | None) -> str | None:
    """Trim a text input; blank becomes None."""

    if value is None:
        return None
    return value.strip() or None


def _pick(value: T | None, fallback: T) -> T:
    return fallback if value is None else value


def _pick_text(value: str | None, fallback: str) -> str:
    return fallback if value is None else value.strip()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
