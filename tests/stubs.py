"""Scripted stand-ins for the gateway ports plus small result builders."""
import asyncio
from decimal import Decimal
from typing import Any, Optional

from application.dtos.checkout import AlreadyCaptured, CaptureResult, CreatedGatewayOrder
from application.ports.gateway_errors import GatewayCallError


class StubTokenProvider:
    provider = "stub"

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls = 0

    async def obtain_access_token(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return f"token-{self.calls}"


class StubGateway:
    """Scripted gateway: each operation pops its next outcome (result or exception)."""

    provider = "stub"

    def __init__(self) -> None:
        self.create_outcomes: list[Any] = []
        self.capture_outcomes: list[Any] = []
        self.get_outcomes: list[Any] = []
        self.calls: list[tuple] = []

    async def _next(self, outcomes: list[Any]) -> Any:
        # Yield to the loop so concurrent callers interleave.
        await asyncio.sleep(0)
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def create_order(self, access_token: str, **kwargs) -> CreatedGatewayOrder:
        self.calls.append(("create_order", access_token, kwargs))
        return await self._next(self.create_outcomes)

    async def capture_order(self, access_token: str, gateway_order_id: str):
        self.calls.append(("capture_order", access_token, gateway_order_id))
        return await self._next(self.capture_outcomes)

    async def get_order(self, access_token: str, gateway_order_id: str) -> CaptureResult:
        self.calls.append(("get_order", access_token, gateway_order_id))
        return await self._next(self.get_outcomes)

    def operations(self) -> list[str]:
        return [c[0] for c in self.calls]


def completed(amount: str = "19.99", name: str = "Mock T-Shirt", status: str = "COMPLETED") -> CaptureResult:
    return CaptureResult(status=status, product_name=name, amount=Decimal(amount), currency_code="USD")


def call_error(status_code: Optional[int], body: str = "", operation: str = "Capture") -> GatewayCallError:
    return GatewayCallError(operation, status_code=status_code, body=body)


def already_captured(order_id: str) -> AlreadyCaptured:
    return AlreadyCaptured(
        gateway_order_id=order_id,
        status_code=422,
        body='{"name":"UNPROCESSABLE_ENTITY","details":[{"issue":"ORDER_ALREADY_CAPTURED",'
             '"description":"Order already captured."}]}',
    )


def events(caplog, name: str) -> list[dict]:
    """structlog event dicts captured by caplog for the given event name."""
    return [
        r.msg for r in caplog.records
        if isinstance(r.msg, dict) and r.msg.get("event") == name
    ]
