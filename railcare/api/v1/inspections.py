"""Inspection log: station-scoped listing and JSON inspection records."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from railcare.api.v1.auth import (
    ensure_station_access,
    get_current_user,
    require_roles,
    scope_query,
)
from railcare.core.database import get_db
from railcare.models import Inspection, StationAmenity
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import OPERATOR_ROLES
from railcare.schemas.inspection import InspectionCreate, InspectionOut
from railcare.services.inspections import record_inspection

router = APIRouter()

_INSPECTION_LOAD_OPTIONS = (
    joinedload(Inspection.station_amenity).joinedload(StationAmenity.amenity_type),
    joinedload(Inspection.staff),
)


@router.get("", response_model=list[InspectionOut])
def list_inspections(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    station: Annotated[int | None, Query(description="Station id (SuperAdmin only)")] = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[Inspection]:
    """Inspections newest first, narrowed to the caller's station unless SuperAdmin."""
    query = db.query(Inspection).options(*_INSPECTION_LOAD_OPTIONS)
    query = scope_query(query, Inspection.station_id, user, station)
    if date_from is not None:
        query = query.filter(Inspection.created_at >= date_from)
    if date_to is not None:
        query = query.filter(Inspection.created_at <= date_to)
    return query.order_by(Inspection.created_at.desc(), Inspection.id.desc()).all()


@router.post("", response_model=InspectionOut, status_code=201)
def create_inspection(
    body: InspectionCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*OPERATOR_ROLES))],
) -> Inspection:
    """Record an inspection and update the amenity's status, notes and photos."""
    amenity = (
        db.query(StationAmenity)
        .filter(StationAmenity.id == body.station_amenity_id)
        .first()
    )
    if amenity is None:
        raise HTTPException(status_code=404, detail="Station amenity not found")
    ensure_station_access(user, amenity.station_id)
    inspection = record_inspection(
        db,
        amenity,
        staff_id=user.id,
        status=body.status,
        notes=body.notes,
        photos=body.photos,
    )
    return (
        db.query(Inspection)
        .options(*_INSPECTION_LOAD_OPTIONS)
        .filter(Inspection.id == inspection.id)
        .one()
    )
