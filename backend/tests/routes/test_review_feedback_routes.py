"""Client reviews and tokenized attendee feedback."""

from datetime import datetime, timedelta, timezone

import pytest

from skilloop.models.feedback import FeedbackLink


class TestReviews:
    def test_review_updates_trainer_rating(self, client, client_headers, trainer_headers, make_booking, test_trainer):
        booking = make_booking(status="completed")

        response = client.post(
            "/api/v1/reviews",
            json={"booking_id": booking.id, "rating": 4, "comment": "  Clear and practical  ", "would_recommend": True},
            headers=client_headers,
        )

        assert response.status_code == 201
        assert response.json()["trainer_id"] == test_trainer.id
        assert response.json()["comment"] == "Clear and practical"

        profile = client.get(f"/api/v1/trainers/{test_trainer.id}").json()
        assert profile["trainer"]["rating"] == 4.0
        assert profile["trainer"]["total_reviews"] == 1
        assert [r["id"] for r in profile["recent_reviews"]] == [response.json()["id"]]

        reviews = client.get(f"/api/v1/trainers/{test_trainer.id}/reviews").json()
        assert [r["rating"] for r in reviews] == [4]

        notifications = client.get("/api/v1/notifications", headers=trainer_headers).json()
        assert [n["type"] for n in notifications] == ["review_received"]

    def test_booking_must_be_completed(self, client, client_headers, make_booking):
        booking = make_booking(status="confirmed")

        response = client.post(
            "/api/v1/reviews", json={"booking_id": booking.id, "rating": 5}, headers=client_headers
        )

        assert response.status_code == 422
        assert response.json()["code"] == "BOOKING_NOT_COMPLETED"

    def test_only_the_client_reviews(self, client, trainer_headers, make_booking):
        booking = make_booking(status="completed")

        response = client.post(
            "/api/v1/reviews", json={"booking_id": booking.id, "rating": 5}, headers=trainer_headers
        )

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_CLIENT"

    def test_one_review_per_booking(self, client, client_headers, make_booking):
        booking = make_booking(status="completed")
        payload = {"booking_id": booking.id, "rating": 5}

        client.post("/api/v1/reviews", json=payload, headers=client_headers)
        response = client.post("/api/v1/reviews", json=payload, headers=client_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_REVIEWED"

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, client, client_headers, make_booking, rating):
        booking = make_booking(status="completed")
        response = client.post(
            "/api/v1/reviews", json={"booking_id": booking.id, "rating": rating}, headers=client_headers
        )
        assert response.status_code == 422

    def test_reviews_for_unknown_trainer(self, client, db):
        response = client.get("/api/v1/trainers/01J000000000000000000000ZZ/reviews")
        assert response.status_code == 404


class TestFeedbackLinks:
    def _link(self, client, trainer_headers, booking_id):
        return client.post(f"/api/v1/trainers/me/bookings/{booking_id}/feedback-link", headers=trainer_headers)

    def test_link_reused_while_active(self, client, trainer_headers, make_booking):
        booking = make_booking(status="delivered")

        first = self._link(client, trainer_headers, booking.id)
        second = self._link(client, trainer_headers, booking.id)

        assert first.status_code == 200
        assert first.json()["is_active"] is True
        assert first.json()["url"].endswith(f"/feedback/{first.json()['token']}")
        assert second.json()["id"] == first.json()["id"]

    def test_not_available_before_delivery(self, client, trainer_headers, make_booking):
        booking = make_booking(status="confirmed")

        response = self._link(client, trainer_headers, booking.id)

        assert response.status_code == 422
        assert response.json()["code"] == "FEEDBACK_NOT_AVAILABLE"

    def test_attendees_submit_and_trainer_sees_stats(self, client, trainer_headers, make_booking):
        booking = make_booking(status="delivered")
        token = self._link(client, trainer_headers, booking.id).json()["token"]

        context = client.get(f"/api/v1/feedback/{token}")
        assert context.status_code == 200
        assert context.json()["training_topic"] == "Kubernetes Fundamentals"
        assert context.json()["trainer_name"] == "Tariq Trainer"

        for name, rating, recommend in (("Ana", 5, True), ("Ben", 4, False)):
            submitted = client.post(
                f"/api/v1/feedback/{token}",
                json={
                    "respondent_name": name,
                    "respondent_email": f"{name}@Acme.example",
                    "rating": rating,
                    "would_recommend": recommend,
                },
            )
            assert submitted.status_code == 201

        feedback = client.get("/api/v1/trainers/me/feedback", headers=trainer_headers).json()
        assert feedback["stats"] == {"total_responses": 2, "average_rating": 4.5, "recommendation_rate": 50.0}
        assert {r["respondent_email"] for r in feedback["responses"]} == {"ana@acme.example", "ben@acme.example"}
        assert {r["training_topic"] for r in feedback["responses"]} == {"Kubernetes Fundamentals"}

    def test_deactivated_link_stops_working(self, client, trainer_headers, make_booking):
        booking = make_booking(status="completed")
        link = self._link(client, trainer_headers, booking.id).json()

        response = client.post(f"/api/v1/trainers/me/feedback-links/{link['id']}/deactivate", headers=trainer_headers)
        assert response.json()["is_active"] is False

        gone = client.get(f"/api/v1/feedback/{link['token']}")
        assert gone.status_code == 404
        assert gone.json()["code"] == "FEEDBACK_LINK_INVALID"

    def test_expired_link_is_rejected_and_replaced(self, client, db, trainer_headers, make_booking):
        booking = make_booking(status="delivered")
        link = self._link(client, trainer_headers, booking.id).json()
        stored = db.get(FeedbackLink, link["id"])
        stored.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.commit()

        expired = client.get(f"/api/v1/feedback/{link['token']}")
        assert expired.status_code == 404
        assert expired.json()["code"] == "FEEDBACK_LINK_INVALID"

        fresh = self._link(client, trainer_headers, booking.id).json()
        assert fresh["id"] != link["id"]
        assert client.get(f"/api/v1/feedback/{fresh['token']}").status_code == 200

    def test_unknown_token(self, client, db):
        response = client.post(
            "/api/v1/feedback/not-a-token",
            json={"respondent_name": "Ana", "respondent_email": "ana@acme.example", "rating": 5},
        )
        assert response.status_code == 404
