"""
Checkout DTOs (Pydantic v2) used at application boundaries.

Gateway payloads are parsed once here into typed structures; a missing or
malformed field becomes a `GatewayResponseError` carrying the field path
instead of surfacing later as an attribute/None error.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from application.ports.gateway_errors import GatewayResponseError


DEFAULT_PRODUCT_NAME = "Purchase"


def _validate_currency(v: str) -> str:
    u = (v or "").upper()
    if len(u) != 3 or not u.isalpha():
        raise ValueError("currency must be ISO-4217 alpha-3")
    return u


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class GatewayTimeouts(BaseModel):
    model_config = ConfigDict(frozen=True)

    connect: float = 1.0
    read: float = 3.0
    write: float = 3.0
    pool: float = 5.0


class CheckoutConfig(BaseModel):
    """Immutable checkout configuration, built once at the composition root."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr
    base_url: str = "https://api-m.sandbox.paypal.com"
    currency_code: str = "USD"
    return_url: str
    cancel_url: str
    timeouts: GatewayTimeouts = Field(default_factory=GatewayTimeouts)

    @field_validator("currency_code")
    @classmethod
    def _upper_and_validate_currency(cls, v: str) -> str:
        return _validate_currency(v)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


# ---------------------------------------------------------------------------
# Gateway payload structures (all fields optional; required-ness is checked
# by the parse functions below so the error names the missing field)
# ---------------------------------------------------------------------------


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MoneyPayload(_Payload):
    currency_code: Optional[str] = None
    value: Optional[Union[str, int, float]] = None


class CapturePayload(_Payload):
    id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[MoneyPayload] = None


class PaymentsPayload(_Payload):
    captures: Optional[list[CapturePayload]] = None


class PurchaseUnitPayload(_Payload):
    description: Optional[str] = None
    payments: Optional[PaymentsPayload] = None


class LinkPayload(_Payload):
    rel: Optional[str] = None
    href: Optional[str] = None


class GatewayOrderPayload(_Payload):
    id: Optional[str] = None
    status: Optional[str] = None
    purchase_units: Optional[list[PurchaseUnitPayload]] = None
    links: Optional[list[LinkPayload]] = None


# ---------------------------------------------------------------------------
# Gateway results
# ---------------------------------------------------------------------------


class CreatedGatewayOrder(BaseModel):
    model_config = ConfigDict(frozen=True)

    gateway_order_id: str
    approval_url: str


class CaptureResult(BaseModel):
    """Normalized capture snapshot (same shape for capture and order fetch)."""

    model_config = ConfigDict(frozen=True)

    status: str
    product_name: str
    amount: Decimal
    currency_code: str


class AlreadyCaptured(BaseModel):
    """Capture was rejected because the gateway order was captured before."""

    model_config = ConfigDict(frozen=True)

    gateway_order_id: str
    status_code: int = 422
    body: str = ""


CaptureOutcome = Union[CaptureResult, AlreadyCaptured]


def _loc_to_path(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "$"


def parse_gateway_order(payload: Any) -> GatewayOrderPayload:
    if not isinstance(payload, dict):
        raise GatewayResponseError("invalid_value", "$")
    try:
        return GatewayOrderPayload.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        raise GatewayResponseError("invalid_value", _loc_to_path(tuple(first.get("loc", ())))) from exc


def parse_created_order(payload: Any) -> CreatedGatewayOrder:
    order = parse_gateway_order(payload)
    if not order.id:
        raise GatewayResponseError("missing_field", "id", operation="Create order")
    for link in order.links or []:
        if (link.rel or "").lower() == "approve" and link.href:
            return CreatedGatewayOrder(gateway_order_id=order.id, approval_url=link.href)
    raise GatewayResponseError("missing_field", "links[rel=approve]", operation="Create order")


def parse_capture_result(payload: Any) -> CaptureResult:
    order = parse_gateway_order(payload)
    if not order.purchase_units:
        raise GatewayResponseError("missing_field", "purchase_units")
    unit = order.purchase_units[0]
    captures = unit.payments.captures if unit.payments else None
    if not captures:
        raise GatewayResponseError("missing_field", "purchase_units[0].payments.captures")

    money = captures[0].amount
    prefix = "purchase_units[0].payments.captures[0].amount"
    if money is None or money.value is None:
        raise GatewayResponseError("missing_field", f"{prefix}.value")
    if not money.currency_code:
        raise GatewayResponseError("missing_field", f"{prefix}.currency_code")
    try:
        amount = Decimal(str(money.value))
    except InvalidOperation as exc:
        raise GatewayResponseError("invalid_value", f"{prefix}.value") from exc
    if not amount.is_finite():
        raise GatewayResponseError("invalid_value", f"{prefix}.value")

    return CaptureResult(
        status=order.status or "",
        product_name=unit.description if unit.description is not None else DEFAULT_PRODUCT_NAME,
        amount=amount,
        currency_code=money.currency_code,
    )


# ---------------------------------------------------------------------------
# Use-case results and API payloads
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    # HTTP payloads use camelCase keys; Python code keeps snake_case names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateOrderRequest(_CamelModel):
    product_id: int


class CreateOrderResult(_CamelModel):
    gateway_order_id: str
    approval_url: str


class CaptureOrderResult(_CamelModel):
    status: str
    product_name: str
    amount: Decimal
    currency_code: str


class ProductDTO(_CamelModel):
    id: int
    name: str
    price: Decimal


class OrderDTO(_CamelModel):
    id: Optional[int] = None
    external_order_id: str
    product_name: str
    amount: Decimal
    currency_code: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
