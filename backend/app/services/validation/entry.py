# backend/app/services/validation/entry.py
"""
Field validation for submitted locations.

Pure functions: nothing here reads the database or the filesystem, so the
same rules run on the server before persistence and in app.client before
a request is sent.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from app.errors import ValidationError
from app.schemas.location import (
    CATEGORIES,
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
    RATING_MAX,
    RATING_MIN,
    Coordinates,
    LocationEntryIn,
)

_INT_RE = re.compile(r"^[+-]?\d+$")
# longer digit strings are out of any rating range; int() also caps string length
MAX_INT_DIGITS = 18

# form field → label used in messages
RATING_FIELDS = (
    ("dangerRating", "Danger rating"),
    ("locationRating", "Location rating"),
)


@dataclass
class ValidationResult:
    entry: Optional[LocationEntryIn] = None
    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.entry is not None and not self.violations

    def raise_for_violations(self) -> LocationEntryIn:
        if not self.ok:
            raise ValidationError(self.violations)
        return self.entry  # type: ignore[return-value]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_int(value: Any) -> Optional[int]:
    """Integer value of ``value`` or None when it is not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        text = value.strip()
        if len(text.lstrip("+-").lstrip("0")) > MAX_INT_DIGITS:
            return None
        return int(text)
    return None


def parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _check_rating(fields: Mapping[str, Any], key: str, label: str, violations: list[str]) -> Optional[int]:
    raw = fields.get(key)
    if _is_blank(raw):
        violations.append(f"{label} is required")
        return None
    rating = parse_int(raw)
    if rating is None:
        if isinstance(raw, str) and _INT_RE.match(raw.strip()):
            violations.append(f"{label} must be between {RATING_MIN} and {RATING_MAX}")
            return None
        violations.append(f"{label} must be an integer")
        return None
    if not RATING_MIN <= rating <= RATING_MAX:
        violations.append(f"{label} must be between {RATING_MIN} and {RATING_MAX}")
        return None
    return rating


def _check_coordinate(raw: Any, label: str, bounds: tuple[float, float], violations: list[str]) -> Optional[float]:
    value = parse_float(raw)
    if value is None:
        violations.append(f"{label} must be a number")
        return None
    low, high = bounds
    if not low <= value <= high:
        violations.append(f"{label} must be between {low:g} and {high:g}")
        return None
    return value


def validate_coordinates(latitude: Any, longitude: Any) -> tuple[Optional[Coordinates], list[str]]:
    """Both-or-neither check plus per-axis range checks."""
    violations: list[str] = []
    lat_missing, lng_missing = _is_blank(latitude), _is_blank(longitude)
    if lat_missing and lng_missing:
        return None, violations
    if lat_missing or lng_missing:
        violations.append("Latitude and longitude must be provided together")
        return None, violations

    lat = _check_coordinate(latitude, "Latitude", LATITUDE_RANGE, violations)
    lng = _check_coordinate(longitude, "Longitude", LONGITUDE_RANGE, violations)
    if violations:
        return None, violations
    return Coordinates(latitude=lat, longitude=lng), violations


def validate_entry(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Validate and normalize a submitted location.

    ``fields`` uses the wire names (``location``, ``type``, ``dangerRating``,
    ``description``, ``locationRating``, ``latitude``, ``longitude``); values
    may be strings as they arrive from a multipart form.
    """
    violations: list[str] = []

    location = _text(fields.get("location"))
    if not location:
        violations.append("Location is required")

    category = _text(fields.get("type"))
    if not category:
        violations.append("Type is required")
    elif category not in CATEGORIES:
        violations.append(f"Type must be one of: {', '.join(CATEGORIES)}")

    danger = _check_rating(fields, *RATING_FIELDS[0], violations)

    description = _text(fields.get("description"))
    if not description:
        violations.append("Description is required")

    quality = _check_rating(fields, *RATING_FIELDS[1], violations)

    coordinates, coord_violations = validate_coordinates(fields.get("latitude"), fields.get("longitude"))
    violations.extend(coord_violations)

    if violations:
        return ValidationResult(violations=violations)

    entry = LocationEntryIn(
        location=location,
        type=category,
        danger_rating=danger,
        location_rating=quality,
        description=description,
        coordinates=coordinates,
    )
    return ValidationResult(entry=entry)
