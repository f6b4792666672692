# backend/app/services/locations/gateway.py
"""
Persistence gateway for location entries.

Owns the lifetime of rows in ``locations`` and removes the blob of an entry
whenever the entry goes away (failed create or delete).
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import StorageFault, ValidationError
from app.models.location import LocationEntry
from app.schemas.location import SummaryStats, TypeStat
from app.services.images.blobs import BlobStore
from app.services.validation.entry import validate_entry

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationGateway:
    def __init__(self, db: Session, blobs: BlobStore, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.blobs = blobs
        self.clock = clock

    def create(self, fields: Mapping[str, Any], image_filename: Optional[str] = None) -> LocationEntry:
        result = validate_entry(fields)
        if not result.ok:
            self._discard_blob(image_filename)
            raise ValidationError(result.violations)

        entry = result.entry
        now = self.clock()
        row = LocationEntry(
            id=uuid.uuid4().hex,
            location=entry.location,
            type=entry.type,
            danger_rating=entry.danger_rating,
            location_rating=entry.location_rating,
            description=entry.description,
            image=image_filename,
            latitude=entry.coordinates.latitude if entry.coordinates else None,
            longitude=entry.coordinates.longitude if entry.coordinates else None,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._discard_blob(image_filename)
            logger.error("Insert of location %r failed: %s", entry.location, e)
            raise StorageFault("Error creating location", detail=str(e)) from e
        self.db.refresh(row)
        logger.info("Created location %s (%s)", row.id, row.type)
        return row

    def list_all(self) -> list[LocationEntry]:
        try:
            return (
                self.db.query(LocationEntry)
                .order_by(LocationEntry.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageFault("Error fetching locations", detail=str(e)) from e

    def get_by_id(self, location_id: str) -> Optional[LocationEntry]:
        try:
            return self.db.get(LocationEntry, location_id)
        except SQLAlchemyError as e:
            raise StorageFault("Error fetching location", detail=str(e)) from e

    def delete_by_id(self, location_id: str) -> bool:
        row = self.get_by_id(location_id)
        if row is None:
            return False

        image = row.image
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFault("Error deleting location", detail=str(e)) from e

        # the row is gone at this point; a stuck file only costs disk space
        if image:
            try:
                if not self.blobs.delete(image):
                    logger.warning("Image %s of location %s was already missing", image, location_id)
            except StorageFault as e:
                logger.warning("Could not delete image %s of location %s: %s", image, location_id, e.detail)
        logger.info("Deleted location %s", location_id)
        return True

    def summary_stats(self) -> SummaryStats:
        count = func.count(LocationEntry.id)
        try:
            total = self.db.query(func.count(LocationEntry.id)).scalar() or 0
            rows = (
                self.db.query(
                    LocationEntry.type,
                    count,
                    func.avg(LocationEntry.location_rating),
                    func.avg(LocationEntry.danger_rating),
                )
                .group_by(LocationEntry.type)
                .order_by(count.desc(), LocationEntry.type.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageFault("Error fetching statistics", detail=str(e)) from e

        return SummaryStats(
            total_locations=total,
            type_stats=[
                TypeStat(type=t, count=c, avg_rating=float(avg_rating), avg_danger=float(avg_danger))
                for t, c, avg_rating, avg_danger in rows
            ],
        )

    def _discard_blob(self, filename: Optional[str]) -> None:
        if not filename:
            return
        try:
            self.blobs.delete(filename)
        except StorageFault as e:
            logger.error("Orphan image %s could not be removed: %s", filename, e.detail)
