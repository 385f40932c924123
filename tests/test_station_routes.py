"""Station and station-amenity routes, including the multipart inspection form."""

import io

from PIL import Image

from railcare.models import Inspection, Issue, StationAmenity, User
from tests.support import (
    API,
    ApiTestCase,
    auth_headers,
    make_amenity,
    make_amenity_type,
    make_issue,
    make_station,
    make_user,
)

STATION_BODY = {
    "name": "Howrah Junction",
    "code": " hwh ",
    "region": "Kolkata",
    "address": "Howrah Station Road, Howrah",
    "geo_lat": 22.58,
    "geo_lng": 88.34,
}


def _jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (40, 30), color=(200, 30, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()


class TestStations(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = make_user(self.db, "SuperAdmin", email="admin@railway.in")

    def test_create_normalizes_code_and_rejects_duplicates(self) -> None:
        response = self.client.post(
            f"{API}/stations", json=STATION_BODY, headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["code"], "HWH")

        again = self.client.post(
            f"{API}/stations", json=STATION_BODY, headers=auth_headers(self.admin)
        )
        self.assertEqual(again.status_code, 400)

    def test_create_requires_super_admin(self) -> None:
        station = make_station(self.db)
        manager = make_user(self.db, "StationManager", station)
        response = self.client.post(
            f"{API}/stations", json=STATION_BODY, headers=auth_headers(manager)
        )
        self.assertEqual(response.status_code, 403)

    def test_invalid_coordinates_are_validation_errors(self) -> None:
        body = {**STATION_BODY, "geo_lat": 123.0}
        response = self.client.post(
            f"{API}/stations", json=body, headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Validation error")

    def test_list_filters_by_region_substring(self) -> None:
        make_station(self.db, "CST", region="Mumbai")
        make_station(self.db, "EJS", region="New Delhi")
        response = self.client.get(
            f"{API}/stations", params={"region": "delhi"}, headers=auth_headers(self.admin)
        )
        self.assertEqual([s["code"] for s in response.json()], ["EJS"])

    def test_update_and_delete(self) -> None:
        station = make_station(self.db)
        updated = self.client.put(
            f"{API}/stations/{station.id}",
            json={"name": "Mumbai CST"},
            headers=auth_headers(self.admin),
        )
        self.assertEqual(updated.json()["name"], "Mumbai CST")
        self.assertEqual(updated.json()["code"], "CST")

        deleted = self.client.delete(
            f"{API}/stations/{station.id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(deleted.status_code, 200)
        missing = self.client.get(
            f"{API}/stations/{station.id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(missing.status_code, 404)

    def test_delete_cascades_to_station_records_and_detaches_users(self) -> None:
        station = make_station(self.db)
        other = make_station(self.db, "EJS", region="Delhi")
        manager = make_user(self.db, "StationManager", station)
        amenity = make_amenity(self.db, station, make_amenity_type(self.db))
        make_issue(self.db, station, manager, amenity=amenity)
        make_issue(self.db, other, manager)
        self.db.add(
            Inspection(
                station_amenity_id=amenity.id,
                station_id=station.id,
                staff_id=manager.id,
                status="ok",
                photos=[],
            )
        )
        self.db.commit()
        station_id, manager_id = station.id, manager.id

        response = self.client.delete(
            f"{API}/stations/{station_id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 200)

        self.db.expire_all()
        self.assertEqual(self.db.query(StationAmenity).count(), 0)
        self.assertEqual(self.db.query(Inspection).count(), 0)
        self.assertEqual(
            [i.station_id for i in self.db.query(Issue).all()], [other.id]
        )
        detached = self.db.query(User).filter(User.id == manager_id).one()
        self.assertIsNone(detached.station_id)


class StationAmenityTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.cst = make_station(self.db, "CST")
        self.ejs = make_station(self.db, "EJS", region="Delhi")
        self.toilet = make_amenity_type(self.db, "toilet", "Toilet")
        self.manager_cst = make_user(self.db, "StationManager", self.cst)
        self.staff_cst = make_user(self.db, "Staff", self.cst)


class TestStationAmenities(StationAmenityTestCase):
    def test_manager_adds_amenity_by_type_key(self) -> None:
        response = self.client.post(
            f"{API}/stations/{self.cst.id}/amenities",
            json={"amenity_type_key": "toilet", "location_description": "Platform 3, north end"},
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["amenity_type"]["key"], "toilet")

    def test_unknown_type_is_rejected(self) -> None:
        response = self.client.post(
            f"{API}/stations/{self.cst.id}/amenities",
            json={"amenity_type_key": "escalator", "location_description": "Platform 3, north end"},
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(response.status_code, 400)

    def test_manager_cannot_change_other_station(self) -> None:
        response = self.client.post(
            f"{API}/stations/{self.ejs.id}/amenities",
            json={"amenity_type_key": "toilet", "location_description": "Platform 1, south end"},
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(response.status_code, 403)

    def test_update_status_and_delete(self) -> None:
        amenity = make_amenity(self.db, self.cst, self.toilet)
        url = f"{API}/stations/{self.cst.id}/amenities/{amenity.id}"
        updated = self.client.put(
            url, json={"status": "out_of_service"}, headers=auth_headers(self.manager_cst)
        )
        self.assertEqual(updated.json()["status"], "out_of_service")

        self.assertEqual(
            self.client.delete(url, headers=auth_headers(self.manager_cst)).status_code, 200
        )
        self.assertEqual(
            self.client.get(url, headers=auth_headers(self.manager_cst)).status_code, 404
        )

    def test_list_amenities(self) -> None:
        make_amenity(self.db, self.cst, self.toilet)
        make_amenity(self.db, self.ejs, self.toilet)
        response = self.client.get(
            f"{API}/stations/{self.cst.id}/amenities", headers=auth_headers(self.staff_cst)
        )
        self.assertEqual(len(response.json()), 1)


class TestInspectAmenity(StationAmenityTestCase):
    def test_manager_inspection_updates_amenity_and_records_inspection(self) -> None:
        amenity = make_amenity(self.db, self.cst, self.toilet)
        response = self.client.post(
            f"{API}/stations/{self.cst.id}/amenities/{amenity.id}/inspect",
            data={"status": "needs_maintenance", "notes": "Flush broken"},
            files=[("photos", ("flush.jpg", _jpeg_bytes(), "image/jpeg"))],
            headers=auth_headers(self.manager_cst),
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["amenity"]["status"], "needs_maintenance")
        self.assertEqual(body["amenity"]["notes"], "Flush broken")
        self.assertIsNotNone(body["amenity"]["last_inspected_at"])
        self.assertEqual(len(body["amenity"]["photos"]), 1)
        self.assertTrue(body["amenity"]["photos"][0].endswith(".jpg"))
        self.assertEqual(body["inspection"]["station_id"], self.cst.id)

        self.db.expire_all()
        self.assertEqual(self.db.query(Inspection).count(), 1)
        self.assertEqual(self.db.get(StationAmenity, amenity.id).status, "needs_maintenance")

    def test_staff_cannot_use_inspect_form(self) -> None:
        amenity = make_amenity(self.db, self.cst, self.toilet)
        response = self.client.post(
            f"{API}/stations/{self.cst.id}/amenities/{amenity.id}/inspect",
            data={"status": "ok"},
            headers=auth_headers(self.staff_cst),
        )
        self.assertEqual(response.status_code, 403)

    def test_disallowed_photo_type_is_rejected(self) -> None:
        amenity = make_amenity(self.db, self.cst, self.toilet)
        response = self.client.post(
            f"{API}/stations/{self.cst.id}/amenities/{amenity.id}/inspect",
            data={"status": "ok"},
            files=[("photos", ("notes.txt", b"hello", "text/plain"))],
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(response.status_code, 400)


class TestAmenityTypes(ApiTestCase):
    def test_catalog_is_public_and_ordered_by_key(self) -> None:
        make_amenity_type(self.db, "toilet", "Toilet")
        make_amenity_type(self.db, "fan", "Fan")
        response = self.client.get(f"{API}/amenity-types")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([t["key"] for t in response.json()], ["fan", "toilet"])
