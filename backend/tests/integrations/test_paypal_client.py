"""PayPal client against a stubbed transport."""

from decimal import Decimal
import json

import httpx
import pytest

from skilloop.core.exceptions import PaymentProviderException
from skilloop.integrations.paypal_client import PayPalClient


def _client(handler) -> PayPalClient:
    return PayPalClient(
        base_url="https://api-m.sandbox.paypal.com",
        client_id="id",
        client_secret="secret",
        transport=httpx.MockTransport(handler),
    )


def _token_response() -> httpx.Response:
    return httpx.Response(200, json={"access_token": "token-123", "token_type": "Bearer"})


class TestCreateOrder:
    def test_creates_capture_order_and_returns_approval_link(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth2/token":
                return _token_response()
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201,
                json={
                    "id": "ORDER-1",
                    "status": "CREATED",
                    "links": [
                        {"rel": "self", "href": "https://api/self"},
                        {"rel": "approve", "href": "https://paypal/approve"},
                    ],
                },
            )

        order = _client(handler).create_order(
            booking_id="booking-1",
            amount=Decimal("2400"),
            currency="INR",
            return_url="http://app/success",
            cancel_url="http://app/cancel",
            description="Kubernetes Fundamentals",
        )

        assert order.order_id == "ORDER-1"
        assert order.approval_url == "https://paypal/approve"
        assert seen["auth"] == "Bearer token-123"
        unit = seen["body"]["purchase_units"][0]
        assert seen["body"]["intent"] == "CAPTURE"
        assert unit["custom_id"] == "booking-1"
        assert unit["amount"] == {"currency_code": "INR", "value": "2400.00"}

    def test_provider_error_carries_debug_id(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth2/token":
                return _token_response()
            return httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY", "debug_id": "dbg-9"})

        with pytest.raises(PaymentProviderException) as exc:
            _client(handler).create_order("b", Decimal("1"), "INR", "r", "c")

        assert exc.value.code == "PAYPAL_ERROR"
        assert exc.value.details["debug_id"] == "dbg-9"
        assert exc.value.status_code == 502

    def test_missing_credentials(self):
        client = PayPalClient(base_url="https://example", client_id="", client_secret="")
        with pytest.raises(PaymentProviderException) as exc:
            client.get_access_token()
        assert exc.value.code == "PAYPAL_NOT_CONFIGURED"

    def test_network_failure_is_reported_as_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(PaymentProviderException) as exc:
            _client(handler).get_access_token()
        assert exc.value.code == "PAYPAL_UNREACHABLE"


class TestCaptureOrder:
    def test_completed_capture(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth2/token":
                return _token_response()
            assert request.url.path == "/v2/checkout/orders/ORDER-1/capture"
            return httpx.Response(
                201,
                json={
                    "id": "ORDER-1",
                    "status": "COMPLETED",
                    "purchase_units": [
                        {"payments": {"captures": [{"id": "CAPTURE-7", "status": "COMPLETED"}]}}
                    ],
                },
            )

        result = _client(handler).capture_order("ORDER-1")

        assert result.completed
        assert result.capture_id == "CAPTURE-7"

    def test_capture_without_captures_is_not_completed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth2/token":
                return _token_response()
            return httpx.Response(201, json={"id": "ORDER-1", "purchase_units": [{}]})

        result = _client(handler).capture_order("ORDER-1")

        assert not result.completed
        assert result.capture_id is None
