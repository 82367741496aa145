"""
PayPal OAuth2 client-credentials token exchange.
"""
from __future__ import annotations

import base64

from infrastructure.external.payments.base import BaseGatewayClient
from application.ports.gateway_errors import GatewayCallError
from domain.common.exceptions import GatewayUnavailableException


TOKEN_PATH = "/v1/oauth2/token"


class PaypalTokenProvider(BaseGatewayClient):
    """Fetches a fresh bearer token on every call (no caching)."""

    provider = "paypal"

    def _basic_auth(self) -> str:
        raw = f"{self.config.client_id}:{self.config.client_secret.get_secret_value()}"
        return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def obtain_access_token(self) -> str:
        try:
            response = await self._send(
                "Token",
                "POST",
                TOKEN_PATH,
                headers={"Authorization": self._basic_auth()},
                data={"grant_type": "client_credentials"},
            )
        except GatewayCallError as exc:
            raise GatewayUnavailableException() from exc

        if not response.is_success:
            raise GatewayUnavailableException(details={"status_code": response.status_code})

        payload = self._json(response)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise GatewayUnavailableException()
        return str(token)
