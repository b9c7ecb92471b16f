"""
A package booking from request to paid-out trainer.

package -> admin assigns trainer -> trainer delivers -> client completes
-> payout pending -> batch -> batch paid.
"""

import pytest


@pytest.fixture
def package_booking(client, client_headers, test_category):
    response = client.post(
        "/api/v1/bookings/package",
        json={
            "category_slug": "leadership",
            "team_size": "1-5",
            "duration": "half-day",
            "organization_name": "Acme Corp",
            "client_name": "Priya Client",
            "client_email": "priya@acme.example",
            "phone": "+919876543210",
        },
        headers=client_headers,
    )
    assert response.status_code == 201
    return response.json()


def _assign(client, admin_headers, booking_id, trainer_id):
    return client.patch(
        f"/api/v1/admin/bookings/{booking_id}/status",
        json={"status": "assigned", "trainer_id": trainer_id, "meeting_link": "https://meet.example/abc"},
        headers=admin_headers,
    )


class TestAdminAssignment:
    def test_assigning_requires_trainer_id(self, client, admin_headers, package_booking):
        response = client.patch(
            f"/api/v1/admin/bookings/{package_booking['id']}/status",
            json={"status": "assigned"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "TRAINER_REQUIRED"

    def test_assigns_trainer(self, client, admin_headers, package_booking, test_trainer, trainer_headers):
        response = _assign(client, admin_headers, package_booking["id"], test_trainer.id)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "assigned"
        assert data["trainer_id"] == test_trainer.id
        assert data["meeting_link"] == "https://meet.example/abc"
        assert data["trainer_assignment_status"] == "accepted"

        bookings = client.get("/api/v1/trainers/me/bookings", headers=trainer_headers).json()
        assert [b["id"] for b in bookings["bookings"]] == [package_booking["id"]]
        assert bookings["bookings"][0]["client_display_name"] == "Priya Client"
        assert bookings["summary"]["active"] == 1

    def test_non_admin_is_rejected(self, client, client_headers, package_booking, test_trainer):
        response = _assign(client, client_headers, package_booking["id"], test_trainer.id)
        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"


class TestDeliveryAndPayout:
    def test_full_flow(self, client, admin_headers, client_headers, trainer_headers, package_booking, test_trainer):
        booking_id = package_booking["id"]
        assert _assign(client, admin_headers, booking_id, test_trainer.id).status_code == 200

        # Client cannot complete before delivery
        early = client.post(f"/api/v1/bookings/{booking_id}/complete", headers=client_headers)
        assert early.status_code == 422

        first = client.post(f"/api/v1/trainers/me/bookings/{booking_id}/advance", headers=trainer_headers)
        assert first.json()["status"] == "delivering"
        second = client.post(f"/api/v1/trainers/me/bookings/{booking_id}/advance", headers=trainer_headers)
        assert second.json()["status"] == "delivered"
        stuck = client.post(f"/api/v1/trainers/me/bookings/{booking_id}/advance", headers=trainer_headers)
        assert stuck.status_code == 422
        assert stuck.json()["code"] == "INVALID_STATUS_TRANSITION"

        completed = client.post(f"/api/v1/bookings/{booking_id}/complete", headers=client_headers)
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

        pending = client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()
        assert pending["count"] == 1
        payout = pending["payouts"][0]
        assert payout["gross_amount"] == 5000.0
        assert payout["platform_commission"] == 500.0
        assert payout["net_amount"] == 4500.0
        assert payout["trainer_name"] == "Tariq Trainer"
        assert pending["total_net_amount"] == 4500.0

        batch = client.post(
            "/api/v1/admin/payouts/batches",
            json={"payout_ids": [payout["id"]], "batch_name": "May payouts"},
            headers=admin_headers,
        )
        assert batch.status_code == 201
        assert batch.json()["total_amount"] == 4500.0
        assert batch.json()["payout_count"] == 1
        assert batch.json()["trainer_count"] == 1

        # Batched payouts leave the pending list and cannot be batched again
        assert client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()["count"] == 0
        again = client.post(
            "/api/v1/admin/payouts/batches", json={"payout_ids": [payout["id"]]}, headers=admin_headers
        )
        assert again.status_code == 422
        assert again.json()["code"] == "PAYOUTS_NOT_BATCHABLE"

        paid = client.post(f"/api/v1/admin/payouts/batches/{batch.json()['id']}/mark-paid", headers=admin_headers)
        assert paid.status_code == 200
        assert paid.json()["status"] == "completed"
        assert paid.json()["processed_at"] is not None

        twice = client.post(f"/api/v1/admin/payouts/batches/{batch.json()['id']}/mark-paid", headers=admin_headers)
        assert twice.status_code == 422

        payouts = client.get("/api/v1/trainers/me/payouts", headers=trainer_headers).json()
        assert [p["payout_status"] for p in payouts] == ["paid"]

        earnings = client.get("/api/v1/trainers/me/earnings", headers=trainer_headers).json()
        assert earnings["total_earnings"] == 5000.0
        assert earnings["completed_bookings"] == 1
        assert earnings["paid_payout_amount"] == 4500.0
        assert earnings["pending_payout_amount"] == 0.0

    def test_admin_completion_records_payout_once(
        self, client, admin_headers, make_booking
    ):
        booking = make_booking(status="delivered")

        for _ in range(2):
            response = client.patch(
                f"/api/v1/admin/bookings/{booking.id}/status",
                json={"status": "completed"},
                headers=admin_headers,
            )
            assert response.status_code == 200

        assert client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()["count"] == 1

    def test_empty_batch_is_rejected(self, client, admin_headers):
        response = client.post("/api/v1/admin/payouts/batches", json={"payout_ids": []}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "NO_PAYOUTS_SELECTED"

    def test_payout_keeps_commission_from_booking_time(
        self, client, admin_headers, client_headers, test_trainer, future_window
    ):
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
        assert booking["trainer_payout_amount"] == 1800.0

        client.put("/api/v1/admin/settings", json={"platform_commission": 20}, headers=admin_headers)
        client.patch(
            f"/api/v1/admin/bookings/{booking['id']}/status", json={"status": "completed"}, headers=admin_headers
        )

        payout = client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()["payouts"][0]
        assert payout["platform_commission"] == 200.0
        assert payout["net_amount"] == 1800.0

    def test_batch_lists_payouts_that_cannot_be_batched(self, client, admin_headers, make_booking):
        paid_booking = make_booking(status="delivered")
        open_booking = make_booking(status="delivered", days=4)
        for booking in (paid_booking, open_booking):
            client.patch(
                f"/api/v1/admin/bookings/{booking.id}/status", json={"status": "completed"}, headers=admin_headers
            )
        listed = client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()["payouts"]
        pending = {p["booking_id"]: p["id"] for p in listed}
        paid_id = pending[paid_booking.id]
        batch = client.post("/api/v1/admin/payouts/batches", json={"payout_ids": [paid_id]}, headers=admin_headers)
        client.post(f"/api/v1/admin/payouts/batches/{batch.json()['id']}/mark-paid", headers=admin_headers)

        response = client.post(
            "/api/v1/admin/payouts/batches",
            json={"payout_ids": [pending[open_booking.id], paid_id, "01J000000000000000000000ZZ"]},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "PAYOUTS_NOT_BATCHABLE"
        assert response.json()["errors"]["payout_ids"] == [paid_id, "01J000000000000000000000ZZ"]
        assert client.get("/api/v1/admin/payouts/pending", headers=admin_headers).json()["count"] == 1
