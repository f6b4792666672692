# backend/app/client/forms.py
from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.services.exif.reader import read_gps
from app.services.validation.entry import ValidationResult, validate_entry


@dataclass
class LocationForm:
    location: str = ""
    type: str = ""
    danger_rating: int | str = 0
    description: str = ""
    location_rating: int | str = 0
    latitude: Optional[float | str] = None
    longitude: Optional[float | str] = None
    image_path: Optional[Path] = None

    def fields(self) -> dict:
        # 0 means "no star picked yet"
        return {
            "location": self.location,
            "type": self.type,
            "dangerRating": self.danger_rating or None,
            "description": self.description,
            "locationRating": self.location_rating or None,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    def validate(self) -> ValidationResult:
        """Same rules the server applies, run before the request goes out."""
        return validate_entry(self.fields())

    def fill_coordinates_from_photo(self) -> bool:
        """Take latitude/longitude from the photo's EXIF GPS when none were given."""
        if self.image_path is None or (self.latitude is not None or self.longitude is not None):
            return False
        gps = read_gps(str(self.image_path))
        if not gps:
            return False
        self.latitude, self.longitude = gps["lat"], gps["lon"]
        return True

    def to_multipart(self) -> tuple[dict, dict]:
        """(data, files) for ``requests``; blank optional fields are left out."""
        data = {k: str(v) for k, v in self.fields().items() if v is not None and v != ""}
        files = {}
        if self.image_path is not None:
            path = Path(self.image_path)
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            files["image"] = (path.name, path.read_bytes(), content_type)
        return data, files
