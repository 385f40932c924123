"""Pydantic request/response schemas."""

from railcare.schemas.amenity import (
    AmenityTypeOut,
    StationAmenityCreate,
    StationAmenityOut,
    StationAmenityUpdate,
)
from railcare.schemas.auth import CurrentUser, LoginRequest, SignupRequest, TokenResponse
from railcare.schemas.config import SystemConfig
from railcare.schemas.health import HealthResponse
from railcare.schemas.inspection import InspectionCreate, InspectionOut
from railcare.schemas.issue import IssueAssign, IssueOut, IssueStatusUpdate, IssueUpdate
from railcare.schemas.report import MISMetrics, MISReportResponse
from railcare.schemas.station import StationCreate, StationOut, StationUpdate
from railcare.schemas.user import UserCreate, UserOut, UserUpdate

__all__ = [
    "AmenityTypeOut",
    "CurrentUser",
    "HealthResponse",
    "InspectionCreate",
    "InspectionOut",
    "IssueAssign",
    "IssueOut",
    "IssueStatusUpdate",
    "IssueUpdate",
    "LoginRequest",
    "MISMetrics",
    "MISReportResponse",
    "SignupRequest",
    "StationAmenityCreate",
    "StationAmenityOut",
    "StationAmenityUpdate",
    "StationCreate",
    "StationOut",
    "StationUpdate",
    "SystemConfig",
    "TokenResponse",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
