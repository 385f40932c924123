"""
Load demo data: amenity catalog, three stations, one account per role, sample
amenities, issues and inspections. Run from project root:
  python -m railcare.scripts.seed [--reset] [--password PASSWORD]

Without --reset the amenity catalog is upserted and the rest is skipped when
stations already exist.
"""
import argparse
import logging
import sys
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from railcare.core.config import get_settings
from railcare.core.database import session_scope
from railcare.core.security import hash_password
from railcare.models import (
    AmenityType,
    Config,
    Inspection,
    Issue,
    Report,
    Station,
    StationAmenity,
    User,
)
from railcare.services.system_config import get_system_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

AMENITY_TYPES = [
    ("water_booth", "Water Booth"),
    ("toilet", "Toilet"),
    ("seating", "Seating"),
    ("lighting", "Lighting"),
    ("fan", "Fan"),
    ("dustbin", "Dustbin"),
]

STATIONS = [
    {
        "name": "Central Railway Station",
        "code": "CST",
        "region": "Mumbai",
        "address": "Chhatrapati Shivaji Terminus, Mumbai, Maharashtra 400001",
        "geo_lat": 18.9441,
        "geo_lng": 72.8359,
    },
    {
        "name": "East Junction Station",
        "code": "EJS",
        "region": "Delhi",
        "address": "East Junction, New Delhi, Delhi 110001",
        "geo_lat": 28.6139,
        "geo_lng": 77.2090,
    },
    {
        "name": "West Terminal Station",
        "code": "WTS",
        "region": "Bangalore",
        "address": "West Terminal, Bangalore, Karnataka 560001",
        "geo_lat": 12.9716,
        "geo_lng": 77.5946,
    },
]

# (name, email, role, station code)
USERS = [
    ("Super Admin", "admin@railway.com", "SuperAdmin", None),
    ("Station Manager - CST", "manager.cst@railway.com", "StationManager", "CST"),
    ("Station Manager - EJS", "manager.ejs@railway.com", "StationManager", "EJS"),
    ("Staff Member - CST", "staff.cst@railway.com", "Staff", "CST"),
    ("Staff Member - EJS", "staff.ejs@railway.com", "Staff", "EJS"),
    ("Public User", "public@example.com", "Public", None),
]

# (station code, amenity type key, status, notes)
AMENITIES = [
    ("CST", "water_booth", "ok", None),
    ("CST", "toilet", "ok", None),
    ("CST", "seating", "needs_maintenance", "Requires maintenance - reported by staff"),
    ("CST", "lighting", "ok", None),
    ("EJS", "toilet", "ok", None),
    ("EJS", "seating", "out_of_service", "Out of service - awaiting repair"),
    ("EJS", "lighting", "ok", None),
    ("WTS", "seating", "ok", None),
    ("WTS", "lighting", "ok", None),
    ("WTS", "fan", "ok", None),
]


def reset(db: Session) -> None:
    for model in (Report, Inspection, Issue, StationAmenity, User, Station, AmenityType, Config):
        db.query(model).delete()
    db.commit()
    logger.info("Cleared existing data")


def seed_amenity_types(db: Session) -> dict[str, AmenityType]:
    types: dict[str, AmenityType] = {}
    for key, label in AMENITY_TYPES:
        amenity_type = db.query(AmenityType).filter(AmenityType.key == key).first()
        if amenity_type is None:
            amenity_type = AmenityType(key=key, label=label)
            db.add(amenity_type)
        types[key] = amenity_type
    db.commit()
    return types


def seed_demo(db: Session, types: dict[str, AmenityType], password: str) -> None:
    now = datetime.now(UTC)
    stations = {s["code"]: Station(**s) for s in STATIONS}
    db.add_all(stations.values())
    db.flush()

    password_hash = hash_password(password)
    users = {}
    for name, email, role, code in USERS:
        users[email] = User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            station_id=stations[code].id if code else None,
        )
    db.add_all(users.values())
    db.flush()

    amenities = []
    for i, (code, key, status, notes) in enumerate(AMENITIES):
        amenities.append(
            StationAmenity(
                station_id=stations[code].id,
                amenity_type_id=types[key].id,
                location_description=f"Platform {i % 4 + 1}, {types[key].label}",
                status=status,
                last_inspected_at=now - timedelta(days=i % 7, hours=3),
                notes=notes,
                photos=[],
            )
        )
    db.add_all(amenities)
    db.flush()

    public = users["public@example.com"]
    staff_cst = users["staff.cst@railway.com"]
    staff_ejs = users["staff.ejs@railway.com"]
    db.add_all(
        [
            Issue(
                station_id=stations["CST"].id,
                station_amenity_id=amenities[0].id,
                reported_by_id=public.id,
                priority="high",
                status="reported",
                description="Water booth is not working - no water coming out",
                photos=[],
                reported_at=now - timedelta(hours=2),
            ),
            Issue(
                station_id=stations["CST"].id,
                station_amenity_id=amenities[1].id,
                reported_by_id=staff_cst.id,
                assigned_to_id=users["manager.cst@railway.com"].id,
                priority="medium",
                status="assigned",
                description="Toilet door is broken and cannot be locked",
                photos=[],
                reported_at=now - timedelta(days=1),
            ),
            Issue(
                station_id=stations["EJS"].id,
                station_amenity_id=amenities[5].id,
                reported_by_id=public.id,
                priority="low",
                status="acknowledged",
                description="Seating area needs cleaning",
                photos=[],
                reported_at=now - timedelta(days=3),
                acknowledged_at=now - timedelta(days=2),
            ),
            Issue(
                station_id=stations["EJS"].id,
                station_amenity_id=amenities[6].id,
                reported_by_id=staff_ejs.id,
                assigned_to_id=users["manager.ejs@railway.com"].id,
                priority="high",
                status="resolved",
                description="Lighting system malfunction in platform 2",
                photos=[],
                reported_at=now - timedelta(days=5),
                resolved_at=now - timedelta(days=4),
            ),
            Issue(
                station_id=stations["WTS"].id,
                reported_by_id=public.id,
                priority="medium",
                status="reported",
                description="General maintenance required for station facilities",
                photos=[],
                reported_at=now - timedelta(hours=6),
            ),
        ]
    )

    inspections = [
        (amenities[0], staff_cst, "ok", "Water booth working properly"),
        (amenities[1], staff_cst, "needs_maintenance", "Toilet door needs repair"),
        (amenities[4], staff_ejs, "ok", "Toilet clean and functional"),
        (amenities[5], staff_ejs, "out_of_service", "Seats broken, area closed"),
    ]
    for amenity, staff, status, notes in inspections:
        db.add(
            Inspection(
                station_amenity_id=amenity.id,
                station_id=amenity.station_id,
                staff_id=staff.id,
                status=status,
                notes=notes,
                photos=[],
                created_at=now - timedelta(hours=1),
            )
        )
    db.commit()
    logger.info(
        "Seeded demo data: stations=%s, users=%s, amenities=%s",
        len(stations),
        len(users),
        len(amenities),
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed RailCare demo data.")
    parser.add_argument("--reset", action="store_true", help="Delete all existing data first")
    parser.add_argument("--password", default="password123", help="Password for every demo account")
    args = parser.parse_args()

    try:
        with session_scope() as db:
            if args.reset:
                reset(db)
            types = seed_amenity_types(db)
            if db.query(Station).count() == 0:
                seed_demo(db, types, args.password)
            else:
                logger.info("Stations already exist; skipping demo data")
            get_system_config(db, get_settings())
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
