"""Schemas for amenity inspections."""

from datetime import datetime

from pydantic import BaseModel, Field

from railcare.schemas.amenity import StationAmenityOut
from railcare.schemas.common import AmenityStatus
from railcare.schemas.user import UserSummary


class InspectionCreate(BaseModel):
    station_amenity_id: int = Field(..., ge=1)
    status: AmenityStatus
    notes: str | None = None
    photos: list[str] = Field(default_factory=list, description="Paths returned by /media/upload")


class InspectionOut(BaseModel):
    id: int
    station_amenity_id: int
    station_amenity: StationAmenityOut | None = None
    station_id: int
    staff_id: int
    staff: UserSummary | None = None
    status: AmenityStatus
    notes: str | None = None
    photos: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AmenityInspectResponse(BaseModel):
    success: bool = True
    amenity: StationAmenityOut
    inspection: InspectionOut
