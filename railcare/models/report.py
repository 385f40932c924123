"""ORM models for report snapshots and the system settings row."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from railcare.models.base import Base, JSONType, utcnow


class Report(Base):
    """Persisted MIS snapshot. station_id is None for system-wide reports."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    date = Column(DateTime(timezone=True), nullable=False)
    period = Column(String(16), nullable=False)
    generated_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    summary_json = Column(JSONType, nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )


class Config(Base):
    """Key/value settings row. The system settings singleton uses key 'system'."""

    __tablename__ = "config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(255), nullable=False, unique=True, index=True)
    value = Column(JSONType, nullable=False)
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
