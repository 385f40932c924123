"""Shared fixtures: in-memory SQLite app client and row factories."""

import unittest
from collections.abc import Generator
from datetime import UTC, datetime

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from railcare.core.database import get_db
from railcare.core.security import create_access_token
from railcare.main import app
from railcare.models import AmenityType, Base, Issue, Station, StationAmenity, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE rules unless foreign keys are switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1"


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_station(db: Session, code: str = "CST", region: str = "Mumbai") -> Station:
    station = Station(
        name=f"{code} Station",
        code=code,
        region=region,
        address=f"{code} Road, {region}",
        geo_lat=18.94,
        geo_lng=72.83,
    )
    db.add(station)
    db.commit()
    return station


def make_user(
    db: Session,
    role: str = "Public",
    station: Station | None = None,
    email: str | None = None,
    password_hash: str = "not-a-real-hash",
    is_active: bool = True,
) -> User:
    user = User(
        name=f"{role} User",
        email=email or f"{role.lower()}.{station.code.lower() if station else 'none'}@railway.in",
        password_hash=password_hash,
        role=role,
        station_id=station.id if station else None,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    return user


def make_amenity_type(db: Session, key: str = "toilet", label: str = "Toilet") -> AmenityType:
    amenity_type = AmenityType(key=key, label=label)
    db.add(amenity_type)
    db.commit()
    return amenity_type


def make_amenity(
    db: Session, station: Station, amenity_type: AmenityType, status: str = "ok"
) -> StationAmenity:
    amenity = StationAmenity(
        station_id=station.id,
        amenity_type_id=amenity_type.id,
        location_description="Platform 1, near stairs",
        status=status,
        photos=[],
    )
    db.add(amenity)
    db.commit()
    return amenity


def make_issue(
    db: Session,
    station: Station,
    reporter: User,
    status: str = "reported",
    priority: str = "medium",
    amenity: StationAmenity | None = None,
    reported_at: datetime | None = None,
    resolved_at: datetime | None = None,
) -> Issue:
    issue = Issue(
        station_id=station.id,
        station_amenity_id=amenity.id if amenity else None,
        reported_by_id=reporter.id,
        priority=priority,
        status=status,
        description="Tap is leaking on platform 1",
        photos=[],
        reported_at=reported_at or datetime.now(UTC),
        resolved_at=resolved_at,
    )
    db.add(issue)
    db.commit()
    return issue


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(sub=user.id, role=user.role, station_id=user.station_id)
    return {"Authorization": f"Bearer {token}"}


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test on a shared in-memory SQLite connection."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = TestingSessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db uses the same database."""

    def setUp(self) -> None:
        super().setUp()
        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()
