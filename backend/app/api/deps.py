# backend/app/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.services.images.blobs import BlobStore
from app.services.images.intake import ImageIntake
from app.services.locations.gateway import LocationGateway


def get_blob_store() -> BlobStore:
    return BlobStore(get_settings().upload_dir)


def get_intake(blobs: BlobStore = Depends(get_blob_store)) -> ImageIntake:
    return ImageIntake(blobs, max_bytes=get_settings().max_image_bytes)


def get_gateway(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
) -> LocationGateway:
    return LocationGateway(db, blobs)
