# backend/app/models/location.py
from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text
from .base import Base


class LocationEntry(Base):
    __tablename__ = "locations"
    id = Column(String(32), primary_key=True)  # uuid4 hex, assigned by the gateway
    location = Column(String, nullable=False)
    type = Column(String, nullable=False)
    danger_rating = Column(Integer, nullable=False)
    location_rating = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)  # filename inside the upload dir
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_locations_created_at", "created_at"),
        Index("ix_locations_type", "type"),
        Index("ix_locations_location_rating", "location_rating"),
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def __repr__(self):
        return f"<LocationEntry(id='{self.id}', location='{self.location}', type='{self.type}')>"
