"""
Presentation helpers for the list view.

Everything here is derived from a stored entry at render time; nothing is
persisted.
"""
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from app.services.validation.entry import parse_float

TYPE_ICONS = {
    "public facility": "🏢",
    "regular toilet": "🚽",
    "outdoors": "🌳",
    "private residence": "🏠",
    "roadside fixture": "🪧",
    "waterway": "🚤",
    "other": "❓",
}
FALLBACK_ICON = "❓"

GREEN, YELLOW, RED = "green", "yellow", "red"


def type_icon(category: str) -> str:
    return TYPE_ICONS.get(category, FALLBACK_ICON)


def danger_color(rating: int) -> str:
    if rating <= 2:
        return GREEN
    if rating <= 3:
        return YELLOW
    return RED


def rating_color(rating: int) -> str:
    if rating >= 4:
        return GREEN
    if rating >= 3:
        return YELLOW
    return RED


def format_date(value: str | datetime) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime("%d %B %Y %H:%M")


def are_valid_coordinates(latitude, longitude) -> bool:
    lat, lng = parse_float(latitude), parse_float(longitude)
    return lat is not None and lng is not None and -90 <= lat <= 90 and -180 <= lng <= 180


def maps_url(latitude, longitude, label: str = "") -> Optional[str]:
    if not are_valid_coordinates(latitude, longitude):
        return None
    if label:
        return f"https://www.google.com/maps?q={quote(label)}@{latitude},{longitude}"
    return f"https://www.google.com/maps?q={latitude},{longitude}"


def directions_url(latitude, longitude) -> Optional[str]:
    if not are_valid_coordinates(latitude, longitude):
        return None
    return f"https://www.google.com/maps/dir/?api=1&destination={latitude},{longitude}"


def format_coordinates(latitude, longitude, decimals: int = 6) -> str:
    if not are_valid_coordinates(latitude, longitude):
        return "Coordinates unavailable"
    return f"{float(latitude):.{decimals}f}, {float(longitude):.{decimals}f}"


def render_entry(entry: dict) -> str:
    """One entry from the API as a few lines of plain text."""
    lines = [
        f"{type_icon(entry['type'])} {entry['location']}  [{entry['type']}]",
        f"  rating {entry['locationRating']}/5 ({rating_color(entry['locationRating'])})"
        f"  danger {entry['dangerRating']}/5 ({danger_color(entry['dangerRating'])})",
        f"  {entry['description']}",
    ]
    coords = entry.get("coordinates")
    if coords and are_valid_coordinates(coords.get("latitude"), coords.get("longitude")):
        lines.append(f"  {format_coordinates(coords['latitude'], coords['longitude'])}")
        lines.append(f"  directions: {directions_url(coords['latitude'], coords['longitude'])}")
    if entry.get("image"):
        lines.append(f"  photo: {entry['image']}")
    lines.append(f"  added {format_date(entry['createdAt'])}  id={entry['id']}")
    return "\n".join(lines)
