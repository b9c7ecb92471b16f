"""Trainer discovery, onboarding, pricing and availability endpoints."""

from datetime import timedelta
from decimal import Decimal

import pytest

from skilloop.core.timezone_utils import to_local
from skilloop.models.trainer import Trainer

APPLICATION = {
    "title": "Data Engineering Lead",
    "specialization": "Data Engineering",
    "experience_years": 8,
    "hourly_rate": 1500,
    "bio": "I build streaming data platforms and have taught Spark to more than forty teams.",
    "skills": ["Spark", "Kafka"],
    "location": "Pune",
    "timezone": "Asia/Kolkata",
    "languages_spoken": ["English", "Hindi"],
}


class TestTrainerSearch:
    def test_only_approved_trainers_are_listed(self, client, test_trainer, make_profile, headers_for):
        applicant = make_profile("applicant@example.com", full_name="Asha Applicant")
        client.post("/api/v1/trainers/apply", json=APPLICATION, headers=headers_for(applicant))

        response = client.get("/api/v1/trainers")

        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [test_trainer.id]

    def test_public_profile(self, client, test_trainer):
        response = client.get(f"/api/v1/trainers/{test_trainer.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["trainer"]["name"] == "Tariq Trainer"
        assert data["pricing"] is None
        assert data["recent_reviews"] == []

    def test_unknown_trainer(self, client, db):
        response = client.get("/api/v1/trainers/01J000000000000000000000ZZ")
        assert response.status_code == 404
        assert response.json()["code"] == "TRAINER_NOT_FOUND"


class TestSearchFilters:
    @pytest.fixture
    def catalogue(self, db, make_profile, test_trainer):
        def add(email, name, skills, rate, rating, reviews):
            trainer = Trainer(
                user_id=make_profile(email, role="trainer", full_name=name).id,
                name=name,
                title="Senior Trainer",
                specialization="Engineering",
                skills=skills,
                hourly_rate=Decimal(rate),
                rating=Decimal(rating),
                total_reviews=reviews,
                status="approved",
            )
            db.add(trainer)
            db.commit()
            return trainer

        streaming = add("kai@example.com", "Kai Stream", ["Spark", "Kafka"], "2500", "4.80", 10)
        coaching = add("lena@example.com", "Lena Coach", ["Coaching"], "1500", "4.80", 25)
        return {"streaming": streaming, "coaching": coaching, "cloud": test_trainer}

    def _ids(self, client, **params):
        response = client.get("/api/v1/trainers", params=params)
        assert response.status_code == 200
        return [t["id"] for t in response.json()]

    def test_rating_then_review_count_order(self, client, catalogue):
        assert self._ids(client) == [catalogue["coaching"].id, catalogue["streaming"].id, catalogue["cloud"].id]

    def test_text_matches_skills(self, client, catalogue):
        assert self._ids(client, q="kafka") == [catalogue["streaming"].id]

    def test_rate_range(self, client, catalogue):
        assert self._ids(client, min_rate=1200, max_rate=2000) == [catalogue["coaching"].id]

    def test_minimum_rating(self, client, catalogue):
        assert self._ids(client, min_rating=4.5) == [catalogue["coaching"].id, catalogue["streaming"].id]


class TestTrainerApplication:
    def test_apply_creates_pending_profile_and_alerts_admins(
        self, client, client_headers, admin_headers, test_client_profile
    ):
        response = client.post("/api/v1/trainers/apply", json=APPLICATION, headers=client_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["name"] == "Priya Client"
        assert data["skills"] == ["Spark", "Kafka"]

        profile = client.get("/api/v1/profiles/me", headers=client_headers).json()
        assert profile["role"] == "trainer"
        assert client.get("/api/v1/notifications/unread-count", headers=admin_headers).json() == {"count": 1}

        # Pending trainers are not public
        assert client.get(f"/api/v1/trainers/{data['id']}").status_code == 404

    def test_second_application_conflicts(self, client, client_headers):
        client.post("/api/v1/trainers/apply", json=APPLICATION, headers=client_headers)
        response = client.post("/api/v1/trainers/apply", json=APPLICATION, headers=client_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "TRAINER_PROFILE_EXISTS"

    def test_short_bio_is_rejected(self, client, client_headers):
        response = client.post(
            "/api/v1/trainers/apply", json={**APPLICATION, "bio": "Too short"}, headers=client_headers
        )
        assert response.status_code == 422

    def test_admin_approval_publishes_trainer(self, client, client_headers, admin_headers):
        trainer_id = client.post("/api/v1/trainers/apply", json=APPLICATION, headers=client_headers).json()["id"]

        response = client.patch(
            f"/api/v1/admin/trainers/{trainer_id}/status", json={"status": "approved"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["email"] == "client@example.com"
        assert client.get(f"/api/v1/trainers/{trainer_id}").status_code == 200
        notifications = client.get("/api/v1/notifications", headers=client_headers).json()
        assert [n["type"] for n in notifications] == ["trainer_approved"]

    def test_me_requires_trainer_profile(self, client, client_headers):
        response = client.get("/api/v1/trainers/me", headers=client_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_A_TRAINER"


class TestPricing:
    def test_hourly_pricing_with_breakdown(self, client, trainer_headers, test_trainer):
        response = client.put(
            "/api/v1/trainers/me/pricing",
            json={"pricing_type": "hourly", "hourly_rate": 1200},
            headers=trainer_headers,
        )

        assert response.status_code == 200
        breakdown = response.json()["hourly_breakdown"]
        assert breakdown == {
            "base_rate": 1200.0,
            "commission": 120.0,
            "gst": 216.0,
            "platform_fee": 50.0,
            "total": 1586.0,
        }
        assert response.json()["session_breakdown"] is None

        public = client.get(f"/api/v1/trainers/{test_trainer.id}/pricing")
        assert public.json()["hourly_rate"] == 1200.0

    def test_pricing_upsert_keeps_one_row(self, client, trainer_headers, test_trainer):
        client.put("/api/v1/trainers/me/pricing", json={"hourly_rate": 1200}, headers=trainer_headers)
        response = client.put(
            "/api/v1/trainers/me/pricing",
            json={"pricing_type": "session", "hourly_rate": 1200, "session_rate": 3000},
            headers=trainer_headers,
        )

        assert response.json()["pricing_type"] == "session"
        assert response.json()["session_breakdown"]["total"] == 3890.0

    def test_session_pricing_needs_session_rate(self, client, trainer_headers):
        response = client.put(
            "/api/v1/trainers/me/pricing",
            json={"pricing_type": "session", "hourly_rate": 1200},
            headers=trainer_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RATE"

    def test_pricing_not_set(self, client, test_trainer):
        response = client.get(f"/api/v1/trainers/{test_trainer.id}/pricing")
        assert response.status_code == 404
        assert response.json()["code"] == "PRICING_NOT_SET"


class TestAvailability:
    def test_publish_toggle_and_delete_slot(self, client, trainer_headers, test_trainer, future_window):
        start, _ = future_window(days=5)
        slot_date = start.date().isoformat()

        created = client.post(
            "/api/v1/trainers/me/availability",
            json={"date": slot_date, "start_time": "09:00", "end_time": "11:00"},
            headers=trainer_headers,
        )
        assert created.status_code == 201
        slot_id = created.json()["id"]

        listed = client.get(f"/api/v1/trainers/{test_trainer.id}/availability", params={"date": slot_date})
        assert [s["id"] for s in listed.json()] == [slot_id]

        toggled = client.patch(f"/api/v1/trainers/me/availability/{slot_id}/toggle", headers=trainer_headers)
        assert toggled.json()["is_available"] is False

        deleted = client.delete(f"/api/v1/trainers/me/availability/{slot_id}", headers=trainer_headers)
        assert deleted.status_code == 204
        listed = client.get(f"/api/v1/trainers/{test_trainer.id}/availability", params={"date": slot_date})
        assert listed.json() == []

    def test_slot_overlapping_confirmed_booking_conflicts(
        self, client, trainer_headers, test_trainer, make_booking
    ):
        booking = make_booking(status="confirmed")
        local_start = to_local(booking.start_time, test_trainer.timezone)

        response = client.post(
            "/api/v1/trainers/me/availability",
            json={
                "date": local_start.date().isoformat(),
                "start_time": local_start.strftime("%H:%M"),
                "end_time": (local_start + timedelta(hours=1)).strftime("%H:%M"),
            },
            headers=trainer_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "AVAILABILITY_CONFLICT"

    def test_end_before_start(self, client, trainer_headers, future_window):
        start, _ = future_window(days=5)
        response = client.post(
            "/api/v1/trainers/me/availability",
            json={"date": start.date().isoformat(), "start_time": "11:00", "end_time": "09:00"},
            headers=trainer_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TIME_RANGE"

    def test_other_trainers_slot_is_forbidden(
        self, client, trainer_headers, test_trainer, make_profile, headers_for, future_window, db
    ):
        from skilloop.models.trainer import Trainer

        start, _ = future_window(days=5)
        slot_id = client.post(
            "/api/v1/trainers/me/availability",
            json={"date": start.date().isoformat(), "start_time": "09:00", "end_time": "10:00"},
            headers=trainer_headers,
        ).json()["id"]

        other_profile = make_profile("other-trainer@example.com", role="trainer")
        db.add(Trainer(user_id=other_profile.id, name="Other", title="Coach", status="approved"))
        db.commit()

        response = client.delete(
            f"/api/v1/trainers/me/availability/{slot_id}", headers=headers_for(other_profile)
        )
        assert response.status_code == 403


class TestSchedule:
    def test_week_buckets_bookings_by_local_day(self, client, trainer_headers, test_trainer, make_booking):
        booking = make_booking(status="confirmed", days=1)
        local_day = to_local(booking.start_time, test_trainer.timezone).date()

        response = client.get(
            "/api/v1/trainers/me/schedule", params={"week_start": local_day.isoformat()}, headers=trainer_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["days"]) == 7
        assert data["timezone"] == "Asia/Kolkata"
        matching = [day for day in data["days"] if day["date"] == local_day.isoformat()]
        assert [b["id"] for b in matching[0]["bookings"]] == [booking.id]
