"""Report routes: MIS report scoping, issue analytics and stored snapshots."""

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


class ReportTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.cst = make_station(self.db, "CST")
        self.ejs = make_station(self.db, "EJS", region="Delhi")
        self.admin = make_user(self.db, "SuperAdmin", email="admin@railway.in")
        self.manager_cst = make_user(self.db, "StationManager", self.cst)
        self.staff_ejs = make_user(self.db, "Staff", self.ejs)
        self.public = make_user(self.db, "Public")
        toilet = make_amenity_type(self.db, "toilet", "Toilet")
        make_amenity_type(self.db, "fan", "Fan")
        self.amenity_cst = make_amenity(self.db, self.cst, toilet, status="ok")
        make_amenity(self.db, self.ejs, toilet, status="out_of_service")
        make_issue(self.db, self.cst, self.manager_cst, priority="high", amenity=self.amenity_cst)
        make_issue(self.db, self.ejs, self.staff_ejs)
        make_issue(self.db, self.ejs, self.staff_ejs)


class TestMisReport(ReportTestCase):
    def test_non_admin_is_narrowed_to_own_station(self) -> None:
        response = self.client.get(
            f"{API}/reports/mis",
            params={"station_id": self.ejs.id, "period": "daily"},
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["station_id"], self.cst.id)
        self.assertEqual(body["metrics"]["total_issues_count"], 1)
        self.assertEqual(body["metrics"]["high_priority_issues_count"], 1)
        self.assertEqual(body["metrics"]["uptime_by_amenity_type"], {"fan": 0.0, "toilet": 100.0})
        self.assertEqual(body["total_stations"], 1)
        self.assertEqual([s["code"] for s in body["stations_data"]], ["CST"])

    def test_super_admin_sees_all_stations(self) -> None:
        response = self.client.get(f"{API}/reports/mis", headers=auth_headers(self.admin))
        body = response.json()
        self.assertIsNone(body["station_id"])
        self.assertEqual(body["metrics"]["total_issues_count"], 3)
        self.assertEqual(body["total_stations"], 2)
        self.assertEqual(body["system_uptime"], 50.0)
        self.assertEqual(len(body["recent_issues"]), 3)

    def test_station_less_caller_gets_bad_request(self) -> None:
        response = self.client.get(f"{API}/reports/mis", headers=auth_headers(self.public))
        self.assertEqual(response.status_code, 400)

    def test_unknown_period_is_rejected(self) -> None:
        response = self.client.get(
            f"{API}/reports/mis", params={"period": "yearly"}, headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 400)


class TestIssueAnalytics(ReportTestCase):
    def test_analytics_for_own_station(self) -> None:
        response = self.client.get(
            f"{API}/reports/issues",
            params={"period": "30d"},
            headers=auth_headers(self.staff_ejs),
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["station_id"], self.ejs.id)
        self.assertEqual(body["total_issues"], 2)
        self.assertEqual(body["open_issues"], 2)
        self.assertEqual(len(body["resolution_trends"]), 30)

    def test_super_admin_must_name_a_station(self) -> None:
        response = self.client.get(f"{API}/reports/issues", headers=auth_headers(self.admin))
        self.assertEqual(response.status_code, 400)


class TestSnapshots(ReportTestCase):
    def test_manager_stores_snapshot_for_own_station(self) -> None:
        created = self.client.post(
            f"{API}/reports/snapshots",
            json={"station_id": self.ejs.id, "period": "weekly"},
            headers=auth_headers(self.manager_cst),
        )
        self.assertEqual(created.status_code, 201)
        body = created.json()
        self.assertEqual(body["station_id"], self.cst.id)
        self.assertEqual(body["period"], "weekly")
        self.assertEqual(body["summary_json"]["total_issues_count"], 1)

        listed = self.client.get(
            f"{API}/reports/snapshots", headers=auth_headers(self.staff_ejs)
        )
        self.assertEqual(listed.json(), [])

        mine = self.client.get(
            f"{API}/reports/snapshots", headers=auth_headers(self.manager_cst)
        )
        self.assertEqual([r["id"] for r in mine.json()], [body["id"]])

    def test_staff_cannot_store_snapshots(self) -> None:
        response = self.client.post(
            f"{API}/reports/snapshots", json={}, headers=auth_headers(self.staff_ejs)
        )
        self.assertEqual(response.status_code, 403)

    def test_system_wide_snapshots_are_super_admin_only(self) -> None:
        created = self.client.post(
            f"{API}/reports/snapshots", json={"period": "monthly"}, headers=auth_headers(self.admin)
        )
        self.assertEqual(created.status_code, 201)
        system_wide = created.json()
        self.assertIsNone(system_wide["station_id"])
        self.assertEqual(system_wide["summary_json"]["total_issues_count"], 3)

        public = self.client.get(
            f"{API}/reports/snapshots",
            params={"station_id": self.cst.id},
            headers=auth_headers(self.public),
        )
        self.assertEqual(public.status_code, 400)

        manager = self.client.get(
            f"{API}/reports/snapshots", headers=auth_headers(self.manager_cst)
        )
        self.assertEqual(manager.json(), [])

        admin = self.client.get(f"{API}/reports/snapshots", headers=auth_headers(self.admin))
        self.assertEqual([r["id"] for r in admin.json()], [system_wide["id"]])
