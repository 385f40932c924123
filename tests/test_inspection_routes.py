"""Inspection routes and the record_inspection service."""

from datetime import UTC, datetime, timedelta

from railcare.models import Inspection, StationAmenity
from railcare.services.inspections import record_inspection
from tests.support import (
    API,
    ApiTestCase,
    DatabaseTestCase,
    auth_headers,
    make_amenity,
    make_amenity_type,
    make_station,
    make_user,
)


class TestRecordInspection(DatabaseTestCase):
    def test_updates_amenity_and_appends_photos(self) -> None:
        station = make_station(self.db)
        staff = make_user(self.db, "Staff", station)
        amenity = make_amenity(self.db, station, make_amenity_type(self.db))
        amenity.photos = ["2026/01/old.jpg"]
        amenity.notes = "Checked last week"
        self.db.commit()
        now = datetime(2026, 3, 18, 9, 0, tzinfo=UTC)

        inspection = record_inspection(
            self.db, amenity, staff.id, "out_of_service", photos=["2026/03/new.jpg"], now=now
        )

        self.assertEqual(inspection.station_id, station.id)
        self.db.expire_all()
        stored = self.db.get(StationAmenity, amenity.id)
        self.assertEqual(stored.status, "out_of_service")
        self.assertEqual(stored.photos, ["2026/01/old.jpg", "2026/03/new.jpg"])
        # No notes given: existing notes are kept.
        self.assertEqual(stored.notes, "Checked last week")
        self.assertEqual(stored.last_inspected_at.replace(tzinfo=UTC), now)


class TestInspectionRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.cst = make_station(self.db, "CST")
        self.ejs = make_station(self.db, "EJS", region="Delhi")
        toilet = make_amenity_type(self.db)
        self.amenity_cst = make_amenity(self.db, self.cst, toilet)
        self.amenity_ejs = make_amenity(self.db, self.ejs, toilet)
        self.staff_cst = make_user(self.db, "Staff", self.cst)
        self.staff_ejs = make_user(self.db, "Staff", self.ejs)
        self.admin = make_user(self.db, "SuperAdmin", email="admin@railway.in")

    def _create(self, user, amenity, status="ok"):
        return self.client.post(
            f"{API}/inspections",
            json={"station_amenity_id": amenity.id, "status": status, "notes": "Routine check"},
            headers=auth_headers(user),
        )

    def test_staff_records_inspection_for_own_station(self) -> None:
        response = self._create(self.staff_cst, self.amenity_cst, status="needs_maintenance")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["staff"]["id"], self.staff_cst.id)
        self.assertEqual(body["station_amenity"]["status"], "needs_maintenance")

    def test_staff_cannot_inspect_other_station(self) -> None:
        response = self._create(self.staff_cst, self.amenity_ejs)
        self.assertEqual(response.status_code, 403)

    def test_public_cannot_record_inspections(self) -> None:
        public = make_user(self.db, "Public")
        self.assertEqual(self._create(public, self.amenity_cst).status_code, 403)

    def test_list_is_narrowed_and_date_filtered(self) -> None:
        self._create(self.staff_cst, self.amenity_cst)
        self._create(self.staff_ejs, self.amenity_ejs)
        old = Inspection(
            station_amenity_id=self.amenity_cst.id,
            station_id=self.cst.id,
            staff_id=self.staff_cst.id,
            status="ok",
            photos=[],
            created_at=datetime.now(UTC) - timedelta(days=10),
        )
        self.db.add(old)
        self.db.commit()

        narrowed = self.client.get(
            f"{API}/inspections",
            params={"station": self.ejs.id},
            headers=auth_headers(self.staff_cst),
        ).json()
        self.assertEqual({i["station_id"] for i in narrowed}, {self.cst.id})
        self.assertEqual(len(narrowed), 2)

        recent = self.client.get(
            f"{API}/inspections",
            params={"date_from": (datetime.now(UTC) - timedelta(days=1)).isoformat()},
            headers=auth_headers(self.admin),
        ).json()
        self.assertEqual(len(recent), 2)
