"""
Base gateway client implementing shared concerns: http client lifecycle,
timeouts, JSON decoding, logging.

Concrete adapters subclass and implement provider-specific endpoints.
Calls are not retried: a transport error or non-2xx status is reported to
the caller immediately as `GatewayCallError`.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from application.dtos.checkout import CheckoutConfig
from application.ports.gateway_errors import GatewayCallError
from core.logging_config import get_logger


logger = get_logger(__name__)


class BaseGatewayClient:
    provider: str = "base"

    def __init__(
        self,
        config: CheckoutConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeouts(self) -> httpx.Timeout:
        t = self.config.timeouts
        return httpx.Timeout(
            connect=t.connect,
            read=t.read,
            write=t.write,
            pool=t.pool,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.timeouts,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close underlying HTTP client if created."""
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request; transport failures become `GatewayCallError(status_code=None)`."""
        self._log("gateway_request", operation=operation, method=method, path=url)
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "gateway_transport_error",
                provider=self.provider,
                operation=operation,
                error=exc.__class__.__name__,
            )
            raise GatewayCallError(operation) from exc
        self._log(
            "gateway_response",
            operation=operation,
            status_code=response.status_code,
            debug_id=response.headers.get("paypal-debug-id"),
        )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def _raise_for_status(self, operation: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        raise GatewayCallError(operation, status_code=response.status_code, body=response.text)

    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )
