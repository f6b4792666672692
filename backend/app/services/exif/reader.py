# backend/app/services/exif/reader.py
from PIL import Image, UnidentifiedImageError
import exifread
from datetime import datetime
from typing import Optional

EXIF_DT_KEYS = ["EXIF DateTimeOriginal", "EXIF DateTimeDigitized", "Image DateTime"]
GPS_IFD = 0x8825


def _ratio(value) -> float:
    # Pillow gives IFDRational, older files may carry (num, den) pairs
    if isinstance(value, tuple):
        return value[0] / value[1]
    return float(value)


def dms_to_deg(values, ref) -> Optional[float]:
    if not values or len(values) < 3:
        return None
    try:
        d, m, s = (_ratio(v) for v in values[:3])
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    deg = d + m / 60 + s / 3600
    if ref in ("S", "W"):
        deg *= -1
    return deg


def read_gps(path: str) -> Optional[dict]:
    try:
        with Image.open(path) as img:
            gps_info = img.getexif().get_ifd(GPS_IFD)
    except (UnidentifiedImageError, OSError):
        # not a readable image: no position to offer
        return None
    if not gps_info:
        return None
    lat = dms_to_deg(gps_info.get(2), gps_info.get(1))
    lon = dms_to_deg(gps_info.get(4), gps_info.get(3))
    if lat is None or lon is None:
        return None
    return {"lon": lon, "lat": lat}


def parse_exif(path: str):
    # raw tags (dates only)
    with open(path, "rb") as f:
        tags = exifread.process_file(f, details=False)

    taken_at = None
    for k in EXIF_DT_KEYS:
        if k in tags:
            try:
                taken_at = datetime.strptime(str(tags[k]), "%Y:%m:%d %H:%M:%S")
                break
            except ValueError:
                pass

    return {
        "taken_at": taken_at.isoformat() if taken_at else None,
        "gps_point": read_gps(path),
        "exif_raw": {k: str(v) for k, v in tags.items() if k in EXIF_DT_KEYS},
    }
