"""Schemas for stations."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class StationCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=2, max_length=32)
    region: str = Field(..., min_length=2, max_length=255)
    address: str = Field(..., min_length=5, max_length=1024)
    geo_lat: float = Field(..., ge=-90, le=90)
    geo_lng: float = Field(..., ge=-180, le=180)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("name", "region", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class StationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    code: str | None = Field(default=None, min_length=2, max_length=32)
    region: str | None = Field(default=None, min_length=2, max_length=255)
    address: str | None = Field(default=None, min_length=5, max_length=1024)
    geo_lat: float | None = Field(default=None, ge=-90, le=90)
    geo_lng: float | None = Field(default=None, ge=-180, le=180)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else None


class StationOut(BaseModel):
    id: int
    name: str
    code: str
    region: str
    address: str
    geo_lat: float
    geo_lng: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
