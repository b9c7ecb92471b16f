"""
Booking endpoints under /api/v1/bookings.

Covers direct and package creation, conflict detection, listing,
participant access, cancellation and the booking chat.
"""

from datetime import timedelta

PROBLEM_JSON = "application/problem+json"


def _direct_payload(trainer, start, end, **extra):
    payload = {
        "trainer_id": trainer.id,
        "training_topic": "Kubernetes Fundamentals",
        "start_time": start.isoformat(),
        "end_time": end.isoformat(),
    }
    payload.update(extra)
    return payload


class TestCreateDirectBooking:
    def test_requires_authentication(self, client, test_trainer, future_window):
        start, end = future_window()
        response = client.post("/api/v1/bookings", json=_direct_payload(test_trainer, start, end))

        assert response.status_code == 401
        assert response.headers["content-type"].startswith(PROBLEM_JSON)
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    def test_creates_pending_booking_priced_from_hourly_rate(
        self, client, client_headers, test_trainer, future_window
    ):
        start, end = future_window(hours=2)

        response = client.post(
            "/api/v1/bookings",
            json=_direct_payload(test_trainer, start, end, organization_name="Acme Corp"),
            headers=client_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["booking_type"] == "direct"
        assert data["payment_status"] == "pending"
        assert data["total_amount"] == 2000.0
        assert data["platform_commission_amount"] == 200.0
        assert data["trainer_payout_amount"] == 1800.0
        assert data["client_name"] == "Priya Client"

    def test_overlapping_request_for_same_trainer_conflicts(
        self, client, client_headers, test_trainer, make_profile, headers_for, future_window
    ):
        start, end = future_window(hours=2)
        first = client.post(
            "/api/v1/bookings", json=_direct_payload(test_trainer, start, end), headers=client_headers
        )
        assert first.status_code == 201

        other = make_profile("other@example.com", full_name="Olu Other")
        response = client.post(
            "/api/v1/bookings",
            json=_direct_payload(test_trainer, start + timedelta(hours=1), end + timedelta(hours=1)),
            headers=headers_for(other),
        )

        assert response.status_code == 409
        problem = response.json()
        assert problem["code"] == "BOOKING_CONFLICT"
        assert problem["errors"]["conflict_scope"] == "trainer"
        assert problem["errors"]["conflicting_booking"]["id"] == first.json()["id"]

    def test_back_to_back_sessions_do_not_conflict(self, client, client_headers, test_trainer, future_window):
        start, end = future_window(hours=2)
        assert (
            client.post(
                "/api/v1/bookings", json=_direct_payload(test_trainer, start, end), headers=client_headers
            ).status_code
            == 201
        )

        response = client.post(
            "/api/v1/bookings",
            json=_direct_payload(test_trainer, end, end + timedelta(hours=1)),
            headers=client_headers,
        )
        assert response.status_code == 201

    def test_cancelled_bookings_free_the_slot(self, client, client_headers, make_booking, test_trainer):
        existing = make_booking(status="cancelled")

        response = client.post(
            "/api/v1/bookings",
            json=_direct_payload(test_trainer, existing.start_time, existing.end_time),
            headers=client_headers,
        )
        assert response.status_code == 201

    def test_past_start_is_rejected(self, client, client_headers, test_trainer, future_window):
        start, end = future_window(days=-2)

        response = client.post(
            "/api/v1/bookings", json=_direct_payload(test_trainer, start, end), headers=client_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BOOKING_IN_PAST"

    def test_unknown_fields_are_rejected(self, client, client_headers, test_trainer, future_window):
        start, end = future_window()
        response = client.post(
            "/api/v1/bookings",
            json=_direct_payload(test_trainer, start, end, discount=50),
            headers=client_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestConflictProbe:
    def test_reports_existing_booking(self, client, client_headers, make_booking, test_trainer):
        existing = make_booking(status="confirmed")

        response = client.post(
            "/api/v1/bookings/check-conflicts",
            json={
                "trainer_id": test_trainer.id,
                "start_time": (existing.start_time + timedelta(minutes=30)).isoformat(),
                "end_time": (existing.end_time + timedelta(minutes=30)).isoformat(),
            },
            headers=client_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["has_conflict"] is True
        assert data["conflicting_booking"]["id"] == existing.id

    def test_excluded_booking_is_ignored(self, client, client_headers, make_booking, test_trainer):
        existing = make_booking(status="pending")

        response = client.post(
            "/api/v1/bookings/check-conflicts",
            json={
                "trainer_id": test_trainer.id,
                "start_time": existing.start_time.isoformat(),
                "end_time": existing.end_time.isoformat(),
                "exclude_booking_id": existing.id,
            },
            headers=client_headers,
        )

        assert response.json() == {"has_conflict": False, "message": None, "conflicting_booking": None}


class TestPackageBooking:
    def _payload(self, **extra):
        payload = {
            "category_slug": "leadership",
            "team_size": "1-5",
            "duration": "half-day",
            "organization_name": "Acme Corp",
            "client_name": "Priya Client",
            "client_email": "priya@acme.example",
            "phone": "+919876543210",
        }
        payload.update(extra)
        return payload

    def test_quote(self, client, client_headers, test_category):
        response = client.post(
            "/api/v1/bookings/package/quote",
            json={"category_slug": "leadership", "team_size": "16-30", "duration": "full-day"},
            headers=client_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_amount"] == 20000.0
        assert data["platform_fee_amount"] == 4000.0
        assert data["client_payment_amount"] == 24000.0
        assert data["duration_hours"] == 8

    def test_unknown_category(self, client, client_headers):
        response = client.post(
            "/api/v1/bookings/package/quote",
            json={"category_slug": "nope", "team_size": "1-5", "duration": "half-day"},
            headers=client_headers,
        )
        assert response.status_code == 404
        assert response.json()["code"] == "CATEGORY_NOT_FOUND"

    def test_package_booking_has_no_trainer_yet(self, client, client_headers, test_category, test_admin):
        response = client.post("/api/v1/bookings/package", json=self._payload(), headers=client_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["trainer_id"] is None
        assert data["booking_type"] == "package"
        assert data["service_category"] == "leadership"
        assert data["total_amount"] == 5000.0
        assert data["client_payment_amount"] == 6000.0

    def test_admins_are_notified(self, client, client_headers, test_category, admin_headers):
        client.post("/api/v1/bookings/package", json=self._payload(), headers=client_headers)

        response = client.get("/api/v1/notifications/unread-count", headers=admin_headers)
        assert response.json() == {"count": 1}


class TestBookingAccess:
    def test_client_lists_own_bookings_with_trainer_name(self, client, client_headers, make_booking):
        booking = make_booking()

        response = client.get("/api/v1/bookings/me", headers=client_headers)

        assert response.status_code == 200
        items = response.json()
        assert [item["id"] for item in items] == [booking.id]
        assert items[0]["trainer_name"] == "Tariq Trainer"
        assert items[0]["trainer_email"] == "trainer@example.com"

    def test_trainer_and_admin_can_read_detail(self, client, make_booking, trainer_headers, admin_headers):
        booking = make_booking()

        assert client.get(f"/api/v1/bookings/{booking.id}", headers=trainer_headers).status_code == 200
        assert client.get(f"/api/v1/bookings/{booking.id}", headers=admin_headers).status_code == 200

    def test_outsider_is_forbidden(self, client, make_booking, make_profile, headers_for):
        booking = make_booking()
        outsider = make_profile("outsider@example.com")

        response = client.get(f"/api/v1/bookings/{booking.id}", headers=headers_for(outsider))

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_PARTICIPANT"

    def test_missing_booking(self, client, client_headers):
        response = client.get("/api/v1/bookings/01J000000000000000000000ZZ", headers=client_headers)
        assert response.status_code == 404
        assert response.json()["instance"] == "/api/v1/bookings/01J000000000000000000000ZZ"

    def test_trainer_listing_labels_and_counts(self, client, trainer_headers, make_booking, make_profile):
        anonymous = make_profile("", full_name=None)
        for day, booking_status in enumerate(("assigned", "delivering", "delivered", "completed", "pending")):
            make_booking(status=booking_status, days=day + 2, student_id=anonymous.id)

        response = client.get("/api/v1/trainers/me/bookings", headers=trainer_headers)

        assert response.status_code == 200
        data = response.json()
        assert {b["client_display_name"] for b in data["bookings"]} == {"Unknown Client"}
        assert {b["client_display_email"] for b in data["bookings"]} == {"No email available"}
        assert data["summary"]["total"] == 5
        assert data["summary"]["active"] == 2
        assert data["summary"]["finished"] == 2

        completed = client.get(
            "/api/v1/trainers/me/bookings", params={"status": "completed"}, headers=trainer_headers
        ).json()
        assert [b["status"] for b in completed["bookings"]] == ["completed"]

    def test_trainer_listing_prefers_booking_contact(self, client, trainer_headers, make_booking):
        make_booking(client_name="Ops Desk", client_email="ops@acme.example")

        item = client.get("/api/v1/trainers/me/bookings", headers=trainer_headers).json()["bookings"][0]

        assert item["client_display_name"] == "Ops Desk"
        assert item["client_display_email"] == "ops@acme.example"


class TestCancelBooking:
    def test_client_cancels_with_reason(self, client, client_headers, make_booking, trainer_headers):
        booking = make_booking(status="confirmed")

        response = client.post(
            f"/api/v1/bookings/{booking.id}/cancel",
            json={"reason": "Offsite moved"},
            headers=client_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert "Offsite moved" in response.json()["notes"]
        # The trainer hears about it
        assert client.get("/api/v1/notifications/unread-count", headers=trainer_headers).json() == {
            "count": 1
        }

    def test_cancel_without_body(self, client, client_headers, make_booking):
        booking = make_booking(status="pending")
        response = client.post(f"/api/v1/bookings/{booking.id}/cancel", headers=client_headers)
        assert response.status_code == 200

    def test_completed_booking_cannot_be_cancelled(self, client, client_headers, make_booking):
        booking = make_booking(status="completed")
        response = client.post(f"/api/v1/bookings/{booking.id}/cancel", headers=client_headers)
        assert response.status_code == 422
        assert response.json()["code"] == "NOT_CANCELLABLE"


class TestBookingChat:
    def test_chat_closed_while_pending(self, client, client_headers, make_booking):
        booking = make_booking(status="pending")

        response = client.post(
            f"/api/v1/bookings/{booking.id}/messages", json={"content": "Hello"}, headers=client_headers
        )

        assert response.status_code == 422
        assert response.json()["code"] == "CHAT_NOT_AVAILABLE"

    def test_messages_flow_between_participants(
        self, client, client_headers, trainer_headers, make_booking, test_trainer
    ):
        booking = make_booking(status="confirmed")

        sent = client.post(
            f"/api/v1/bookings/{booking.id}/messages",
            json={"content": "Can we start at 10?"},
            headers=client_headers,
        )
        assert sent.status_code == 201
        assert sent.json()["receiver_id"] == test_trainer.user_id
        assert sent.json()["sender_name"] == "Priya Client"

        assert client.get("/api/v1/messages/unread-count", headers=trainer_headers).json() == {"count": 1}

        listing = client.get(f"/api/v1/bookings/{booking.id}/messages", headers=trainer_headers)
        assert listing.status_code == 200
        assert listing.json()["marked_read"] == 1
        assert [m["content"] for m in listing.json()["messages"]] == ["Can we start at 10?"]

        assert client.get("/api/v1/messages/unread-count", headers=trainer_headers).json() == {"count": 0}
