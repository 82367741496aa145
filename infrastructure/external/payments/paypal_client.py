"""
PayPal Orders v2 adapter over httpx.

Endpoints:
- POST /v2/checkout/orders                 create (intent=CAPTURE)
- POST /v2/checkout/orders/{id}/capture    capture
- GET  /v2/checkout/orders/{id}            snapshot (duplicate-capture fallback)
"""
from __future__ import annotations

from decimal import Decimal
from urllib.parse import quote

from application.dtos.checkout import (
    AlreadyCaptured,
    CaptureOutcome,
    CaptureResult,
    CreatedGatewayOrder,
    parse_capture_result,
    parse_created_order,
)
from infrastructure.external.payments.base import BaseGatewayClient
from shared.codes.payment_codes import ORDER_ALREADY_CAPTURED_ISSUE


ORDERS_PATH = "/v2/checkout/orders"


class PaypalClient(BaseGatewayClient):
    provider = "paypal"

    @staticmethod
    def _bearer(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    @staticmethod
    def _order_path(gateway_order_id: str) -> str:
        return f"{ORDERS_PATH}/{quote(gateway_order_id, safe='')}"

    @staticmethod
    def _to_value(amount: Decimal) -> str:
        # PayPal expects the plain decimal string, e.g. "19.99"
        return format(amount, "f")

    async def create_order(
        self,
        access_token: str,
        *,
        amount: Decimal,
        currency_code: str,
        description: str,
        return_url: str,
        cancel_url: str,
    ) -> CreatedGatewayOrder:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {"currency_code": currency_code, "value": self._to_value(amount)},
                    "description": description,
                }
            ],
            "application_context": {"return_url": return_url, "cancel_url": cancel_url},
        }
        response = await self._send(
            "Create order",
            "POST",
            ORDERS_PATH,
            headers=self._bearer(access_token),
            json=payload,
        )
        self._raise_for_status("Create order", response)
        return parse_created_order(self._json(response))

    async def capture_order(self, access_token: str, gateway_order_id: str) -> CaptureOutcome:
        response = await self._send(
            "Capture",
            "POST",
            f"{self._order_path(gateway_order_id)}/capture",
            headers={**self._bearer(access_token), "Content-Type": "application/json"},
        )
        if response.status_code == 422 and ORDER_ALREADY_CAPTURED_ISSUE in response.text:
            return AlreadyCaptured(
                gateway_order_id=gateway_order_id,
                status_code=response.status_code,
                body=response.text,
            )
        self._raise_for_status("Capture", response)
        return parse_capture_result(self._json(response))

    async def get_order(self, access_token: str, gateway_order_id: str) -> CaptureResult:
        response = await self._send(
            "Get order",
            "GET",
            self._order_path(gateway_order_id),
            headers=self._bearer(access_token),
        )
        self._raise_for_status("Get order", response)
        return parse_capture_result(self._json(response))
