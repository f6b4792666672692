# backend/app/schemas/location.py
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Single source of truth for the category list: the validator, the /meta
# endpoint (browser client) and app.client all read it from here.
CATEGORIES: tuple[str, ...] = (
    "public facility",
    "regular toilet",
    "outdoors",
    "private residence",
    "roadside fixture",
    "waterway",
    "other",
)

# Literal over the tuple expands to one member per category
Category = Literal[CATEGORIES]  # type: ignore[valid-type]

RATING_MIN = 1
RATING_MAX = 5
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationEntryIn(BaseModel):
    """Normalized candidate record, produced only by validate_entry."""

    location: str
    type: Category
    danger_rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    location_rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    description: str
    coordinates: Optional[Coordinates] = None


class LocationEntryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    location: str
    type: str
    danger_rating: int = Field(..., serialization_alias="dangerRating")
    location_rating: int = Field(..., serialization_alias="locationRating")
    description: str
    image: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def _utc(self, value: datetime) -> str:
        # SQLite hands back naive datetimes; they are stored as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    @classmethod
    def from_row(cls, row) -> "LocationEntryOut":
        coords = None
        if row.latitude is not None and row.longitude is not None:
            coords = Coordinates(latitude=row.latitude, longitude=row.longitude)
        return cls(
            id=row.id,
            location=row.location,
            type=row.type,
            danger_rating=row.danger_rating,
            location_rating=row.location_rating,
            description=row.description,
            image=row.image,
            coordinates=coords,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TypeStat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., serialization_alias="_id")
    count: int
    avg_rating: float = Field(..., serialization_alias="avgRating")
    avg_danger: float = Field(..., serialization_alias="avgDanger")


class SummaryStats(BaseModel):
    total_locations: int = Field(..., serialization_alias="totalLocations")
    type_stats: list[TypeStat] = Field(default_factory=list, serialization_alias="typeStats")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
