"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

import httpx

from application.dtos.checkout import CheckoutConfig
from application.ports.payment_gateway import AccessTokenProvider, PaymentGateway


def get_payment_gateway(
    config: CheckoutConfig,
    provider: str = "paypal",
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[AccessTokenProvider, PaymentGateway]:
    """Return (token provider, gateway client) for the given provider."""
    name = (provider or "paypal").lower()
    if name in {"paypal", "pp"}:
        from .paypal_auth import PaypalTokenProvider
        from .paypal_client import PaypalClient
        return PaypalTokenProvider(config, transport=transport), PaypalClient(config, transport=transport)
    raise ValueError(f"Unsupported payment provider: {name}")
