"""SQLAlchemy ORM models."""

from railcare.models.amenity import AmenityType, StationAmenity
from railcare.models.base import Base
from railcare.models.inspection import Inspection
from railcare.models.issue import Issue
from railcare.models.report import Config, Report
from railcare.models.station import Station
from railcare.models.user import User

__all__ = [
    "AmenityType",
    "Base",
    "Config",
    "Inspection",
    "Issue",
    "Report",
    "Station",
    "StationAmenity",
    "User",
]
