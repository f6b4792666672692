# backend/app/services/images/intake.py
from __future__ import annotations

import logging
import re
import secrets
import time
from pathlib import PurePath
from typing import BinaryIO, Optional

from app.config import MAX_IMAGE_BYTES
from app.errors import MediaRejectedError
from .blobs import BlobStore, size_limit_message

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "toilet"
_EXT_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


def safe_extension(original_name: Optional[str]) -> str:
    ext = PurePath(original_name or "").suffix.lower()
    return ext if _EXT_RE.match(ext) else ""


def generate_filename(original_name: Optional[str] = None) -> str:
    # toilet-<epoch ms>-<9 random digits><ext>
    suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9):09d}"
    return f"{FILENAME_PREFIX}-{suffix}{safe_extension(original_name)}"


def is_image_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.split(";")[0].strip().lower().startswith("image/")


class ImageIntake:
    def __init__(self, blobs: BlobStore, max_bytes: int = MAX_IMAGE_BYTES):
        self.blobs = blobs
        self.max_bytes = max_bytes

    def accept(
        self,
        stream: BinaryIO,
        content_type: Optional[str],
        size: Optional[int] = None,
        original_name: Optional[str] = None,
    ) -> str:
        """Check and store one upload; returns the generated filename."""
        if not is_image_type(content_type):
            raise MediaRejectedError("Only image files are allowed")
        if size is not None and size > self.max_bytes:
            raise MediaRejectedError(size_limit_message(self.max_bytes))

        filename = self.blobs.write(lambda: generate_filename(original_name), stream, self.max_bytes)
        logger.info("Accepted image %s as %s", original_name or "<unnamed>", filename)
        return filename


def is_empty_upload(upload) -> bool:
    """Browsers send an empty part when the file input was left blank."""
    if upload is None:
        return True
    return not upload.filename and not (getattr(upload, "size", None) or 0)
