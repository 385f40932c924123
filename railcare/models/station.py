"""ORM model for railway stations."""

from sqlalchemy import Column, DateTime, Float, Integer, String, func
from sqlalchemy.orm import relationship

from railcare.models.base import Base, utcnow


class Station(Base):
    """A railway station. Code is unique and stored upper-case."""

    __tablename__ = "stations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    code = Column(String(32), nullable=False, unique=True, index=True)
    region = Column(String(255), nullable=False, index=True)
    address = Column(String(1024), nullable=False)
    geo_lat = Column(Float, nullable=False)
    geo_lng = Column(Float, nullable=False)
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

    amenities = relationship(
        "StationAmenity",
        back_populates="station",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
