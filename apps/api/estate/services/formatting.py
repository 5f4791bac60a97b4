"""Display helpers shared by listing views."""
from __future__ import annotations

import math
import re
from datetime import date

from ..schemas.properties import AvailabilityInfo, PropertyAvailability

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_NON_NUMERIC = re.compile(r"[^0-9.]")


def slugify(value: str) -> str:
    """Lowercase, collapse anything non-alphanumeric to dashes, trim dashes."""

    return _SLUG_INVALID.sub("-", value.strip().lower()).strip("-")


def format_availability_date(value: str | None) -> str | None:
    """Render an ISO date as e.g. ``Mar 5, 2026``; unparseable text is kept."""

    if not value:
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def availability_info(availability: PropertyAvailability | None) -> AvailabilityInfo:
    availability_type = availability.type if availability else "available-now"

    if availability_type == "available-now":
        return AvailabilityInfo(
            type=availability_type,
            label="Available now",
            description="Move-in ready immediately.",
        )

    if availability_type == "not-available":
        return AvailabilityInfo(
            type=availability_type,
            label="Currently not available",
            description="Please reach out for future availability.",
        )

    formatted = format_availability_date(availability.date if availability else None)
    if formatted:
        return AvailabilityInfo(
            type=availability_type,
            label=f"Available from {formatted}",
            description=f"This property will be ready from {formatted}.",
            formatted_date=formatted,
        )
    return AvailabilityInfo(
        type=availability_type,
        label="Available from date to be confirmed",
        description="Select date pending confirmation.",
    )


def format_currency_aed(value: str | int | float | None) -> str:
    """Format a price as ``AED 1,250,000``.

    Strings without digits are returned trimmed, so ``"Price on request"``
    passes through.
    """

    if value is None or isinstance(value, bool):
        return ""

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return ""
        return f"AED {value:,.0f}"

    trimmed = value.strip()
    if not trimmed:
        return ""
    digits = _NON_NUMERIC.sub("", trimmed)
    if not digits:
        return trimmed
    try:
        parsed = float(digits)
    except ValueError:
        return trimmed
    return f"AED {parsed:,.0f}"


def format_bedroom_label(bedrooms: int, maids_room: bool | None = None) -> str:
    if maids_room:
        return f"{bedrooms} Bedrooms + Maids"
    return f"{bedrooms} Bedrooms"
