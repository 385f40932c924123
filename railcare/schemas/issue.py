"""Schemas for issue reports and their status workflow."""

from datetime import datetime

from pydantic import BaseModel, Field

from railcare.schemas.amenity import StationAmenityOut
from railcare.schemas.common import IssueStatus, Priority
from railcare.schemas.user import StationRef, UserSummary


class IssueUpdate(BaseModel):
    notes: str | None = None
    description: str | None = Field(default=None, min_length=1)


class IssueStatusUpdate(BaseModel):
    """Any status is accepted regardless of the current one."""

    status: IssueStatus


class IssueAssign(BaseModel):
    assigned_to_id: int = Field(..., ge=1)


class IssueOut(BaseModel):
    id: int
    station_id: int
    station: StationRef | None = None
    station_amenity_id: int | None = None
    station_amenity: StationAmenityOut | None = None
    reported_by_id: int
    reported_by: UserSummary | None = None
    assigned_to_id: int | None = None
    assigned_to: UserSummary | None = None
    priority: Priority
    status: IssueStatus
    description: str
    photos: list[str] = Field(default_factory=list)
    notes: str | None = None
    reported_at: datetime
    acknowledged_at: datetime | None = None
    assigned_at: datetime | None = None
    resolved_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
