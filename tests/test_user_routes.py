"""User administration routes (SuperAdmin only)."""

from datetime import UTC, datetime

from railcare.models import Report, User
from tests.support import API, ApiTestCase, auth_headers, make_issue, make_station, make_user


class TestUserRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.station = make_station(self.db)
        self.admin = make_user(self.db, "SuperAdmin", email="admin@railway.in")

    def test_create_lowercases_email_and_hides_hash(self) -> None:
        response = self.client.post(
            f"{API}/users",
            json={
                "name": "Ravi Kumar",
                "email": "Ravi@Railway.in",
                "password": "secret123",
                "role": "Staff",
                "station_id": self.station.id,
            },
            headers=auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["email"], "ravi@railway.in")
        self.assertEqual(body["station"]["code"], "CST")
        self.assertNotIn("password_hash", body)

    def test_station_roles_require_station(self) -> None:
        response = self.client.post(
            f"{API}/users",
            json={"name": "Ravi", "email": "ravi@railway.in", "password": "secret123", "role": "Staff"},
            headers=auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 400)

    def test_duplicate_email_is_rejected(self) -> None:
        make_user(self.db, "Public", email="ravi@railway.in")
        response = self.client.post(
            f"{API}/users",
            json={"name": "Ravi", "email": "ravi@railway.in", "password": "secret123", "role": "Public"},
            headers=auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 400)

    def test_update_detaches_station_only_when_sent(self) -> None:
        user = make_user(self.db, "Public", self.station)
        url = f"{API}/users/{user.id}"

        renamed = self.client.put(url, json={"name": "Renamed"}, headers=auth_headers(self.admin))
        self.assertEqual(renamed.json()["station_id"], self.station.id)

        detached = self.client.put(url, json={"station_id": None}, headers=auth_headers(self.admin))
        self.assertIsNone(detached.json()["station_id"])

    def test_update_can_disable_account(self) -> None:
        user = make_user(self.db, "Public")
        response = self.client.put(
            f"{API}/users/{user.id}", json={"is_active": False}, headers=auth_headers(self.admin)
        )
        self.assertFalse(response.json()["is_active"])

    def test_cannot_delete_self(self) -> None:
        response = self.client.delete(
            f"{API}/users/{self.admin.id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_user(self) -> None:
        user = make_user(self.db, "Public")
        user_id = user.id
        response = self.client.delete(f"{API}/users/{user_id}", headers=auth_headers(self.admin))
        self.assertEqual(response.status_code, 200)
        self.db.expire_all()
        self.assertIsNone(self.db.get(User, user_id))

    def test_delete_user_with_reported_issues_conflicts(self) -> None:
        reporter = make_user(self.db, "Public")
        make_issue(self.db, self.station, reporter)
        response = self.client.delete(
            f"{API}/users/{reporter.id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.db.query(User).filter(User.id == reporter.id).count(), 1)

    def test_delete_user_with_report_snapshots_conflicts(self) -> None:
        manager = make_user(self.db, "StationManager", self.station)
        self.db.add(
            Report(
                station_id=self.station.id,
                date=datetime.now(UTC),
                period="daily",
                generated_by_id=manager.id,
                summary_json={},
            )
        )
        self.db.commit()
        response = self.client.delete(
            f"{API}/users/{manager.id}", headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 409)
        self.assertIn("report snapshots", response.json()["detail"])

    def test_list_requires_super_admin(self) -> None:
        manager = make_user(self.db, "StationManager", self.station)
        self.assertEqual(
            self.client.get(f"{API}/users", headers=auth_headers(manager)).status_code, 403
        )
        self.assertEqual(
            self.client.get(f"{API}/users", headers=auth_headers(self.admin)).status_code, 200
        )
