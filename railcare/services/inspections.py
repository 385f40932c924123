"""Recording inspections and applying their outcome to the inspected amenity."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from railcare.models import Inspection, StationAmenity

logger = logging.getLogger(__name__)


def record_inspection(
    db: Session,
    amenity: StationAmenity,
    staff_id: int,
    status: str,
    notes: str | None = None,
    photos: list[str] | None = None,
    now: datetime | None = None,
) -> Inspection:
    """
    Create an Inspection and copy its result onto the amenity: status,
    last_inspected_at, notes (kept when none are given) and any new photos.
    Commits; there is no guard against a concurrent admin edit of the amenity.
    """
    now = now or datetime.now(UTC)
    photos = list(photos or [])
    inspection = Inspection(
        station_amenity_id=amenity.id,
        station_id=amenity.station_id,
        staff_id=staff_id,
        status=status,
        notes=notes,
        photos=photos,
        created_at=now,
    )
    db.add(inspection)

    amenity.status = status
    amenity.last_inspected_at = now
    if notes:
        amenity.notes = notes
    if photos:
        # Reassign so the JSON column is flagged dirty.
        amenity.photos = [*(amenity.photos or []), *photos]

    db.commit()
    db.refresh(inspection)
    logger.info(
        "Inspection recorded",
        extra={
            "inspection_id": inspection.id,
            "station_amenity_id": amenity.id,
            "station_id": amenity.station_id,
            "status": status,
        },
    )
    return inspection
