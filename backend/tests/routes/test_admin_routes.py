"""Admin settings, user management, booking oversight and analytics."""


class TestPlatformSettings:
    def test_public_settings_show_defaults(self, client, db):
        response = client.get("/api/v1/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["platform_commission"] == 10.0
        assert data["gst_rate"] == 18.0
        assert data["minimum_booking_amount"] == 500.0
        assert data["manual_pricing_override"] is False

    def test_update_changes_new_booking_split(
        self, client, admin_headers, client_headers, test_trainer, future_window
    ):
        updated = client.put("/api/v1/admin/settings", json={"platform_commission": 15}, headers=admin_headers)
        assert updated.json()["platform_commission"] == 15.0
        assert updated.json()["gst_rate"] == 18.0

        start, end = future_window(hours=2)
        booking = client.post(
            "/api/v1/bookings",
            json={
                "trainer_id": test_trainer.id,
                "training_topic": "Helm Charts",
                "start_time": start.isoformat(),
                "end_time": end.isoformat(),
            },
            headers=client_headers,
        ).json()

        assert booking["platform_commission_amount"] == 300.0
        assert booking["trainer_payout_amount"] == 1700.0

    def test_out_of_range_commission(self, client, admin_headers):
        response = client.put("/api/v1/admin/settings", json={"platform_commission": 75}, headers=admin_headers)
        assert response.status_code == 422

    def test_only_admins_update(self, client, client_headers):
        response = client.put("/api/v1/admin/settings", json={"platform_fee": 0}, headers=client_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"


class TestUsers:
    def test_filter_by_role(self, client, admin_headers, test_trainer, test_client_profile):
        response = client.get("/api/v1/admin/users", params={"role": "trainer"}, headers=admin_headers)

        assert response.status_code == 200
        users = response.json()
        assert [u["email"] for u in users] == ["trainer@example.com"]
        assert users[0]["has_trainer_profile"] is True

    def test_search_by_name(self, client, admin_headers, test_client_profile):
        response = client.get("/api/v1/admin/users", params={"q": "priya"}, headers=admin_headers)
        assert [u["email"] for u in response.json()] == ["client@example.com"]

    def test_promote_to_admin(self, client, admin_headers, client_headers, test_client_profile):
        response = client.patch(
            f"/api/v1/admin/users/{test_client_profile.id}/role", json={"role": "admin"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert client.get("/api/v1/admin/users", headers=client_headers).status_code == 200

    def test_unknown_role(self, client, admin_headers, test_client_profile):
        response = client.patch(
            f"/api/v1/admin/users/{test_client_profile.id}/role", json={"role": "owner"}, headers=admin_headers
        )
        assert response.status_code == 422


class TestTrainerModeration:
    def test_tags_are_cleaned(self, client, admin_headers, test_trainer):
        response = client.patch(
            f"/api/v1/admin/trainers/{test_trainer.id}/tags",
            json={"tags": [" top-rated ", "", "enterprise"]},
            headers=admin_headers,
        )
        assert response.json()["tags"] == ["top-rated", "enterprise"]

    def test_suspended_trainer_leaves_search(self, client, admin_headers, test_trainer):
        client.patch(
            f"/api/v1/admin/trainers/{test_trainer.id}/status", json={"status": "suspended"}, headers=admin_headers
        )

        assert client.get("/api/v1/trainers").json() == []
        listed = client.get("/api/v1/admin/trainers", params={"status": "suspended"}, headers=admin_headers)
        assert [t["id"] for t in listed.json()] == [test_trainer.id]


class TestBookingOversight:
    def test_overview_stats(self, client, admin_headers, make_booking):
        make_booking(status="confirmed")
        make_booking(status="cancelled", days=4)
        make_booking(status="pending", days=5)

        response = client.get("/api/v1/admin/bookings", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["total_bookings"] == 3
        assert stats["total_revenue"] == 2000.0
        assert stats["cancelled_revenue"] == 2000.0
        assert stats["pending_bookings"] == 1
        assert {b["trainer_name"] for b in response.json()["bookings"]} == {"Tariq Trainer"}

    def test_status_filter(self, client, admin_headers, make_booking):
        confirmed = make_booking(status="confirmed")
        make_booking(status="pending", days=5)

        response = client.get("/api/v1/admin/bookings", params={"status": "confirmed"}, headers=admin_headers)

        assert [b["id"] for b in response.json()["bookings"]] == [confirmed.id]


class TestAnalytics:
    def test_overview(self, client, admin_headers, make_booking):
        make_booking(status="confirmed")
        make_booking(status="cancelled", days=4)

        response = client.get("/api/v1/admin/analytics", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_bookings"] == 2
        assert data["total_revenue"] == 2000.0
        assert data["total_users"] == 3
        assert data["specializations"] == {"Cloud Computing": 1}
        assert sum(m["bookings"] for m in data["monthly_bookings"]) == 2
        assert sum(m["revenue"] for m in data["monthly_bookings"]) == 2000.0

    def test_top_trainers(self, client, admin_headers, make_booking, test_trainer):
        make_booking(status="completed")
        make_booking(status="cancelled", days=4)

        response = client.get("/api/v1/admin/analytics/top-trainers", headers=admin_headers)

        assert response.status_code == 200
        top = response.json()["by_earnings"][0]
        assert top["trainer_id"] == test_trainer.id
        assert top["total_earnings"] == 2000.0
        assert top["total_bookings"] == 2
        assert top["completion_rate"] == 50.0
        assert top["growth_rate"] == 100.0
