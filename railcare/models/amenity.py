"""ORM models for the amenity catalog and amenities installed at stations."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from railcare.models.base import Base, JSONType, utcnow


class AmenityType(Base):
    """Static catalog entry (water_booth, toilet, seating, ...)."""

    __tablename__ = "amenity_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(64), nullable=False, unique=True, index=True)
    label = Column(String(255), nullable=False)


class StationAmenity(Base):
    """
    One physical amenity at a station.

    status is overwritten both by inspections and by direct admin edits; the
    last write wins.
    """

    __tablename__ = "station_amenities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amenity_type_id = Column(
        Integer, ForeignKey("amenity_types.id"), nullable=False, index=True
    )
    location_description = Column(String(1024), nullable=False)
    status = Column(String(32), nullable=False, default="ok", index=True)
    last_inspected_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    photos = Column(JSONType, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    station = relationship("Station", back_populates="amenities")
    amenity_type = relationship("AmenityType")
