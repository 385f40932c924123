"""Stations and their amenities: CRUD plus the multipart amenity inspection form."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session, joinedload

from railcare.api.v1.auth import (
    ensure_station_access,
    get_current_user,
    require_roles,
)
from railcare.api.v1.media import save_uploaded_photos
from railcare.core.database import get_db
from railcare.models import AmenityType, Station, StationAmenity
from railcare.schemas.amenity import (
    StationAmenityCreate,
    StationAmenityOut,
    StationAmenityUpdate,
)
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import (
    MANAGER_ROLES,
    STATION_MANAGER,
    SUPER_ADMIN,
    AmenityStatus,
)
from railcare.schemas.inspection import AmenityInspectResponse, InspectionOut
from railcare.schemas.station import (
    MessageResponse,
    StationCreate,
    StationOut,
    StationUpdate,
)
from railcare.services.inspections import record_inspection

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_station(db: Session, station_id: int) -> Station:
    station = db.query(Station).filter(Station.id == station_id).first()
    if station is None:
        raise HTTPException(status_code=404, detail="Station not found")
    return station


def _get_amenity(db: Session, station_id: int, amenity_id: int) -> StationAmenity:
    amenity = (
        db.query(StationAmenity)
        .options(joinedload(StationAmenity.amenity_type))
        .filter(
            StationAmenity.id == amenity_id,
            StationAmenity.station_id == station_id,
        )
        .first()
    )
    if amenity is None:
        raise HTTPException(status_code=404, detail="Amenity not found")
    return amenity


def _ensure_manages_station(user: CurrentUser, station_id: int) -> None:
    """Station managers may only change amenities of their own station."""
    if user.role == STATION_MANAGER:
        ensure_station_access(user, station_id)


@router.get("", response_model=list[StationOut])
def list_stations(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    region: Annotated[str | None, Query(description="Case-insensitive substring match")] = None,
) -> list[Station]:
    query = db.query(Station)
    if region:
        query = query.filter(Station.region.ilike(f"%{region}%"))
    return query.order_by(Station.name).all()


@router.post("", response_model=StationOut, status_code=201)
def create_station(
    body: StationCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))],
) -> Station:
    if db.query(Station).filter(Station.code == body.code).first() is not None:
        raise HTTPException(status_code=400, detail="Station code already exists")
    station = Station(**body.model_dump())
    db.add(station)
    db.commit()
    db.refresh(station)
    logger.info("Station created", extra={"station_id": station.id, "code": station.code})
    return station


@router.get("/{station_id}", response_model=StationOut)
def get_station(
    station_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Station:
    return _get_station(db, station_id)


@router.put("/{station_id}", response_model=StationOut)
def update_station(
    station_id: int,
    body: StationUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))],
) -> Station:
    station = _get_station(db, station_id)
    changes = body.model_dump(exclude_unset=True)
    code = changes.get("code")
    if code and code != station.code:
        if db.query(Station).filter(Station.code == code).first() is not None:
            raise HTTPException(status_code=400, detail="Station code already exists")
    for field, value in changes.items():
        if value is not None:
            setattr(station, field, value)
    db.commit()
    db.refresh(station)
    return station


@router.delete("/{station_id}", response_model=MessageResponse)
def delete_station(
    station_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))],
) -> MessageResponse:
    """Delete a station with its amenities, issues and inspections; its users are detached."""
    station = _get_station(db, station_id)
    db.delete(station)
    db.commit()
    logger.info("Station deleted", extra={"station_id": station_id})
    return MessageResponse(message="Station deleted successfully")


@router.get("/{station_id}/amenities", response_model=list[StationAmenityOut])
def list_station_amenities(
    station_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[StationAmenity]:
    _get_station(db, station_id)
    return (
        db.query(StationAmenity)
        .options(joinedload(StationAmenity.amenity_type))
        .filter(StationAmenity.station_id == station_id)
        .order_by(StationAmenity.id)
        .all()
    )


@router.post(
    "/{station_id}/amenities", response_model=StationAmenityOut, status_code=201
)
def create_station_amenity(
    station_id: int,
    body: StationAmenityCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))],
) -> StationAmenity:
    _get_station(db, station_id)
    _ensure_manages_station(user, station_id)

    type_query = db.query(AmenityType)
    if body.amenity_type_key:
        amenity_type = type_query.filter(AmenityType.key == body.amenity_type_key).first()
    else:
        amenity_type = type_query.filter(AmenityType.id == body.amenity_type_id).first()
    if amenity_type is None:
        raise HTTPException(status_code=400, detail="Invalid amenity type")

    amenity = StationAmenity(
        station_id=station_id,
        amenity_type_id=amenity_type.id,
        location_description=body.location_description.strip(),
        status="ok",
        photos=[],
    )
    db.add(amenity)
    db.commit()
    return _get_amenity(db, station_id, amenity.id)


@router.get(
    "/{station_id}/amenities/{amenity_id}", response_model=StationAmenityOut
)
def get_station_amenity(
    station_id: int,
    amenity_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StationAmenity:
    return _get_amenity(db, station_id, amenity_id)


@router.put(
    "/{station_id}/amenities/{amenity_id}", response_model=StationAmenityOut
)
def update_station_amenity(
    station_id: int,
    amenity_id: int,
    body: StationAmenityUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))],
) -> StationAmenity:
    _ensure_manages_station(user, station_id)
    amenity = _get_amenity(db, station_id, amenity_id)
    changes = body.model_dump(exclude_unset=True)
    type_id = changes.get("amenity_type_id")
    if type_id is not None and db.get(AmenityType, type_id) is None:
        raise HTTPException(status_code=400, detail="Invalid amenity type")
    for field, value in changes.items():
        if field == "notes" or value is not None:
            setattr(amenity, field, value)
    db.commit()
    return _get_amenity(db, station_id, amenity_id)


@router.delete(
    "/{station_id}/amenities/{amenity_id}", response_model=MessageResponse
)
def delete_station_amenity(
    station_id: int,
    amenity_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))],
) -> MessageResponse:
    _ensure_manages_station(user, station_id)
    amenity = _get_amenity(db, station_id, amenity_id)
    db.delete(amenity)
    db.commit()
    return MessageResponse(message="Amenity deleted successfully")


@router.post(
    "/{station_id}/amenities/{amenity_id}/inspect",
    response_model=AmenityInspectResponse,
)
async def inspect_station_amenity(
    station_id: int,
    amenity_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(STATION_MANAGER))],
    status: Annotated[AmenityStatus, Form()],
    notes: Annotated[str | None, Form()] = None,
    photos: Annotated[list[UploadFile] | None, File()] = None,
) -> AmenityInspectResponse:
    """
    Record an inspection of one amenity (multipart form: status, notes, photos).
    Only the manager of the amenity's station may inspect it.
    """
    ensure_station_access(user, station_id)
    amenity = _get_amenity(db, station_id, amenity_id)
    paths = await save_uploaded_photos(photos)
    inspection = record_inspection(
        db,
        amenity,
        staff_id=user.id,
        status=status,
        notes=notes or None,
        photos=paths,
    )
    return AmenityInspectResponse(
        success=True,
        amenity=StationAmenityOut.model_validate(_get_amenity(db, station_id, amenity_id)),
        inspection=InspectionOut.model_validate(inspection),
    )
