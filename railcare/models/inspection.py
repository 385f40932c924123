"""ORM model for amenity inspections."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from railcare.models.base import Base, JSONType, utcnow


class Inspection(Base):
    """
    Immutable record of one amenity check.

    station_id is copied from the amenity at creation so inspections can be
    filtered by station without a join.
    """

    __tablename__ = "inspections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_amenity_id = Column(
        Integer,
        ForeignKey("station_amenities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    station_id = Column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    photos = Column(JSONType, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    station_amenity = relationship("StationAmenity")
    staff = relationship("User")
