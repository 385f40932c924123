"""Schemas for user administration."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator

from railcare.schemas.common import STATION_BOUND_ROLES, Role


class StationRef(BaseModel):
    id: int
    name: str
    code: str

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Reporter/assignee entry embedded in issues and inspections."""

    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class UserOut(BaseModel):
    """User without password hash."""

    id: int
    name: str
    email: str
    role: Role
    station_id: int | None = None
    station: StationRef | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: Role
    station_id: int | None = None

    @model_validator(mode="after")
    def station_required_for_station_roles(self) -> "UserCreate":
        if self.role in STATION_BOUND_ROLES and self.station_id is None:
            raise ValueError(f"station_id is required for role {self.role}")
        return self


class UserUpdate(BaseModel):
    """Partial update; station_id=null detaches the user from its station."""

    name: str | None = Field(default=None, min_length=2, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=128)
    role: Role | None = None
    station_id: int | None = None
    is_active: bool | None = None
