"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from application.dtos.checkout import (
    CaptureOutcome,
    CaptureResult,
    CreatedGatewayOrder,
)


@runtime_checkable
class AccessTokenProvider(Protocol):
    """Exchanges static client credentials for a short-lived bearer token."""

    async def obtain_access_token(self) -> str: ...


@runtime_checkable
class PaymentGateway(Protocol):
    """Checkout gateway protocol.

    Failures surface as `application.ports.gateway_errors.GatewayCallError`;
    a repeated capture is reported as an `AlreadyCaptured` value, not raised.
    """

    provider: str

    async def create_order(
        self,
        access_token: str,
        *,
        amount: Decimal,
        currency_code: str,
        description: str,
        return_url: str,
        cancel_url: str,
    ) -> CreatedGatewayOrder: ...

    async def capture_order(self, access_token: str, gateway_order_id: str) -> CaptureOutcome: ...

    async def get_order(self, access_token: str, gateway_order_id: str) -> CaptureResult: ...
