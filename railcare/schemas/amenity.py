"""Schemas for amenity types and station amenities."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from railcare.schemas.common import AmenityStatus


class AmenityTypeOut(BaseModel):
    id: int
    key: str
    label: str

    class Config:
        from_attributes = True


class StationAmenityCreate(BaseModel):
    """The amenity type is given either by catalog key or by id."""

    amenity_type_key: str | None = None
    amenity_type_id: int | None = None
    location_description: str = Field(..., min_length=5, max_length=1024)

    @model_validator(mode="after")
    def type_reference_required(self) -> "StationAmenityCreate":
        if not self.amenity_type_key and self.amenity_type_id is None:
            raise ValueError("Either amenity_type_key or amenity_type_id must be provided")
        return self


class StationAmenityUpdate(BaseModel):
    amenity_type_id: int | None = None
    location_description: str | None = Field(default=None, max_length=1024)
    status: AmenityStatus | None = None
    notes: str | None = None


class StationAmenityOut(BaseModel):
    id: int
    station_id: int
    amenity_type_id: int
    amenity_type: AmenityTypeOut | None = None
    location_description: str
    status: AmenityStatus
    last_inspected_at: datetime | None = None
    notes: str | None = None
    photos: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
