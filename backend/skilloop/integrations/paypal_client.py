"""
PayPal Orders v2 REST client.

Only what checkout needs: an OAuth client-credentials token, order creation
with intent CAPTURE, and capture. Any non-2xx answer becomes a
``PaymentProviderException`` carrying PayPal's error name and debug id.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Any, Dict, Optional

import httpx

from ..core.config import settings
from ..core.exceptions import PaymentProviderException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedOrder:
    order_id: str
    status: str
    approval_url: Optional[str]
    raw: Dict[str, Any]


@dataclass(frozen=True)
class CaptureResult:
    order_id: str
    status: Optional[str]
    capture_id: Optional[str]
    raw: Dict[str, Any]

    @property
    def completed(self) -> bool:
        return self.status == "COMPLETED"


class PayPalClient:
    """Synchronous PayPal client; pass ``transport`` to stub the network in tests."""

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "PayPalClient":
        return cls(
            base_url=settings.paypal_base_url,
            client_id=settings.paypal_client_id,
            client_secret=settings.paypal_client_secret.get_secret_value(),
            timeout=settings.paypal_timeout_seconds,
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        logger.error(
            "PayPal %s failed with %s: %s (debug_id=%s)",
            action,
            response.status_code,
            body.get("name") or body.get("error"),
            body.get("debug_id"),
        )
        raise PaymentProviderException(
            f"PayPal could not {action}",
            code="PAYPAL_ERROR",
            details={
                "status_code": response.status_code,
                "error": body.get("name") or body.get("error"),
                "debug_id": body.get("debug_id"),
            },
        )

    def get_access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise PaymentProviderException(
                "PayPal credentials are not configured", code="PAYPAL_NOT_CONFIGURED"
            )
        try:
            with self._client() as client:
                response = client.post(
                    "/v1/oauth2/token",
                    data={"grant_type": "client_credentials"},
                    auth=(self.client_id, self.client_secret),
                )
        except httpx.HTTPError as exc:
            logger.error(f"PayPal token request failed: {exc}")
            raise PaymentProviderException("PayPal is unreachable", code="PAYPAL_UNREACHABLE") from exc
        self._raise_for_status(response, "issue an access token")
        return response.json()["access_token"]

    def _post(self, path: str, action: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        token = self.get_access_token()
        try:
            with self._client() as client:
                response = client.post(
                    path,
                    json=json,
                    headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.error(f"PayPal request to {path} failed: {exc}")
            raise PaymentProviderException("PayPal is unreachable", code="PAYPAL_UNREACHABLE") from exc
        self._raise_for_status(response, action)
        return response.json()

    def create_order(
        self,
        booking_id: str,
        amount: Decimal,
        currency: str,
        return_url: str,
        cancel_url: str,
        description: Optional[str] = None,
        brand_name: Optional[str] = None,
    ) -> CreatedOrder:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": booking_id,
                    "description": (description or "Training session")[:127],
                    "custom_id": booking_id,
                    "amount": {"currency_code": currency, "value": f"{amount:.2f}"},
                }
            ],
            "application_context": {
                "brand_name": brand_name or settings.brand_name,
                "landing_page": "BILLING",
                "user_action": "PAY_NOW",
                "shipping_preference": "NO_SHIPPING",
                "return_url": return_url,
                "cancel_url": cancel_url,
            },
        }
        order = self._post("/v2/checkout/orders", "create the order", json=payload)
        approval = next(
            (link.get("href") for link in order.get("links", []) if link.get("rel") in ("approve", "payer-action")),
            None,
        )
        logger.info(f"Created PayPal order {order.get('id')} for booking {booking_id}")
        return CreatedOrder(
            order_id=order["id"], status=order.get("status", ""), approval_url=approval, raw=order
        )

    def capture_order(self, order_id: str) -> CaptureResult:
        data = self._post(f"/v2/checkout/orders/{order_id}/capture", "capture the payment")
        capture: Dict[str, Any] = {}
        units = data.get("purchase_units") or []
        if units:
            captures = (units[0].get("payments") or {}).get("captures") or []
            if captures:
                capture = captures[0]
        return CaptureResult(
            order_id=order_id,
            status=capture.get("status"),
            capture_id=capture.get("id"),
            raw=data,
        )
