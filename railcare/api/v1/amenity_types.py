"""Amenity type catalog (read-only, public)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from railcare.core.database import get_db
from railcare.models import AmenityType
from railcare.schemas.amenity import AmenityTypeOut

router = APIRouter()


@router.get("", response_model=list[AmenityTypeOut])
def list_amenity_types(db: Annotated[Session, Depends(get_db)]) -> list[AmenityType]:
    return db.query(AmenityType).order_by(AmenityType.key).all()
