"""PayPal checkout endpoints with the PayPal API stubbed out."""

import json

import httpx
import pytest

from skilloop.api.dependencies import get_paypal_client
from skilloop.integrations.paypal_client import PayPalClient
from skilloop.main import app


class FakePayPal:
    """Records requests and answers like the PayPal sandbox."""

    def __init__(self, capture_status: str = "COMPLETED"):
        self.capture_status = capture_status
        self.orders = []
        self.captures = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "sandbox-token"})
        if path == "/v2/checkout/orders":
            body = json.loads(request.content)
            self.orders.append(body)
            return httpx.Response(
                201,
                json={
                    "id": "ORDER-42",
                    "status": "CREATED",
                    "links": [{"rel": "approve", "href": "https://sandbox.paypal/approve/ORDER-42"}],
                },
            )
        if path.endswith("/capture"):
            self.captures.append(path)
            return httpx.Response(
                201,
                json={
                    "id": "ORDER-42",
                    "status": self.capture_status,
                    "purchase_units": [
                        {"payments": {"captures": [{"id": "CAP-1", "status": self.capture_status}]}}
                    ],
                },
            )
        return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})


@pytest.fixture
def fake_paypal(client):
    fake = FakePayPal()
    app.dependency_overrides[get_paypal_client] = lambda: PayPalClient(
        base_url="https://api-m.sandbox.paypal.com",
        client_id="id",
        client_secret="secret",
        transport=httpx.MockTransport(fake),
    )
    return fake


class TestCreateOrder:
    def test_order_for_amount_due(self, client, client_headers, make_booking, fake_paypal):
        booking = make_booking(status="pending")

        response = client.post(
            "/api/v1/payments/paypal/orders", json={"booking_id": booking.id}, headers=client_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["order_id"] == "ORDER-42"
        assert data["approval_url"] == "https://sandbox.paypal/approve/ORDER-42"
        assert data["amount"] == 2000.0
        assert data["currency"] == "INR"
        unit = fake_paypal.orders[0]["purchase_units"][0]
        assert unit["custom_id"] == booking.id
        assert unit["amount"]["value"] == "2000.00"
        assert f"booking_id={booking.id}" in fake_paypal.orders[0]["application_context"]["return_url"]

    def test_only_the_client_can_pay(self, client, trainer_headers, make_booking, fake_paypal):
        booking = make_booking(status="pending")

        response = client.post(
            "/api/v1/payments/paypal/orders", json={"booking_id": booking.id}, headers=trainer_headers
        )

        assert response.status_code == 403
        assert fake_paypal.orders == []

    def test_confirmed_booking_is_not_payable(self, client, client_headers, make_booking, fake_paypal):
        booking = make_booking(status="confirmed", payment_status="confirmed")

        response = client.post(
            "/api/v1/payments/paypal/orders", json={"booking_id": booking.id}, headers=client_headers
        )

        assert response.status_code == 422
        assert response.json()["code"] == "NOT_PAYABLE"


class TestCapture:
    def test_completed_capture_confirms_booking(
        self, client, client_headers, trainer_headers, make_booking, fake_paypal
    ):
        booking = make_booking(status="pending")
        client.post("/api/v1/payments/paypal/orders", json={"booking_id": booking.id}, headers=client_headers)

        response = client.post(
            "/api/v1/payments/paypal/capture",
            json={"booking_id": booking.id, "order_id": "ORDER-42"},
            headers=client_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["payment_status"] == "confirmed"

        status = client.get(f"/api/v1/payments/bookings/{booking.id}/status", headers=trainer_headers).json()
        assert status["payment_provider"] == "paypal"
        assert status["payment_transaction_id"] == "CAP-1"
        assert status["payment_confirmed_at"] is not None

        assert client.get("/api/v1/notifications/unread-count", headers=trainer_headers).json() == {"count": 1}

    def test_repeat_capture_does_not_call_paypal_again(self, client, client_headers, make_booking, fake_paypal):
        booking = make_booking(status="pending")
        payload = {"booking_id": booking.id, "order_id": "ORDER-42"}

        client.post("/api/v1/payments/paypal/capture", json=payload, headers=client_headers)
        client.post("/api/v1/payments/paypal/capture", json=payload, headers=client_headers)

        assert len(fake_paypal.captures) == 1

    def test_declined_capture_leaves_booking_pending(self, client, client_headers, make_booking, fake_paypal):
        fake_paypal.capture_status = "DECLINED"
        booking = make_booking(status="pending")

        response = client.post(
            "/api/v1/payments/paypal/capture",
            json={"booking_id": booking.id, "order_id": "ORDER-42"},
            headers=client_headers,
        )

        assert response.json()["status"] == "pending"
        assert response.json()["payment_status"] == "failed"

    def test_order_must_match_booking(self, client, client_headers, make_booking, fake_paypal):
        booking = make_booking(status="pending", paypal_order_id="ORDER-1")

        response = client.post(
            "/api/v1/payments/paypal/capture",
            json={"booking_id": booking.id, "order_id": "ORDER-42"},
            headers=client_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ORDER_MISMATCH"
        assert fake_paypal.captures == []

    @pytest.mark.parametrize("capture_status", ["COMPLETED", "DECLINED"])
    def test_cancelled_booking_cannot_be_captured(
        self, client, client_headers, trainer_headers, make_booking, fake_paypal, capture_status
    ):
        fake_paypal.capture_status = capture_status
        booking = make_booking(status="pending")
        client.post("/api/v1/payments/paypal/orders", json={"booking_id": booking.id}, headers=client_headers)
        client.post(f"/api/v1/bookings/{booking.id}/cancel", headers=client_headers)

        response = client.post(
            "/api/v1/payments/paypal/capture",
            json={"booking_id": booking.id, "order_id": "ORDER-42"},
            headers=client_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "NOT_PAYABLE"
        assert fake_paypal.captures == []
        status = client.get(f"/api/v1/payments/bookings/{booking.id}/status", headers=client_headers).json()
        assert status["status"] == "cancelled"
        assert status["payment_status"] == "pending"
