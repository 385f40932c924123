"""ORM model for reported issues."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from railcare.models.base import Base, JSONType, utcnow


class Issue(Base):
    """
    A problem reported at a station, optionally tied to one amenity.

    status: reported | acknowledged | assigned | resolved | closed. Transitions
    are not validated; any value may follow any other.
    """

    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    station_amenity_id = Column(
        Integer,
        ForeignKey("station_amenities.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    reported_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    priority = Column(String(16), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="reported", index=True)
    description = Column(Text, nullable=False)
    photos = Column(JSONType, nullable=False, default=list)
    reported_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
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

    station = relationship("Station")
    station_amenity = relationship("StationAmenity")
    reported_by = relationship("User", foreign_keys=[reported_by_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
