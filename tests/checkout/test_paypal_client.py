import base64
import json
from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from application.dtos.checkout import AlreadyCaptured, CaptureResult, GatewayTimeouts
from application.ports.gateway_errors import GatewayCallError, GatewayResponseError
from domain.common.exceptions import GatewayUnavailableException
from infrastructure.external.payments import get_payment_gateway
from infrastructure.external.payments.paypal_auth import PaypalTokenProvider
from infrastructure.external.payments.paypal_client import PaypalClient


CAPTURED_ORDER = {
    "id": "ORDER-1",
    "status": "COMPLETED",
    "purchase_units": [
        {
            "description": "Mock T-Shirt",
            "payments": {"captures": [{"id": "CAP-1", "amount": {"currency_code": "USD", "value": "19.99"}}]},
        }
    ],
}


class Recorder:
    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.mark.asyncio
async def test_token_request_uses_basic_auth_and_form_body(checkout_config):
    rec = Recorder(httpx.Response(200, json={"access_token": "A21", "expires_in": 32400}))
    async with PaypalTokenProvider(checkout_config, transport=rec.transport) as provider:
        token = await provider.obtain_access_token()

    assert token == "A21"
    request = rec.requests[0]
    assert request.method == "POST"
    assert request.url == httpx.URL("https://api-m.sandbox.paypal.com/v1/oauth2/token")
    expected = base64.b64encode(b"client-id:client-secret").decode("ascii")
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert parse_qs(request.content.decode()) == {"grant_type": ["client_credentials"]}


@pytest.mark.asyncio
async def test_every_token_call_hits_the_gateway(checkout_config):
    rec = Recorder(
        httpx.Response(200, json={"access_token": "first"}),
        httpx.Response(200, json={"access_token": "second"}),
    )
    async with PaypalTokenProvider(checkout_config, transport=rec.transport) as provider:
        assert await provider.obtain_access_token() == "first"
        assert await provider.obtain_access_token() == "second"
    assert len(rec.requests) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"error": "invalid_client"}),
        httpx.Response(200, json={"scope": "x"}),
        httpx.Response(200, json={"access_token": ""}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_token_failures_raise_unavailable(checkout_config, response):
    rec = Recorder(response)
    async with PaypalTokenProvider(checkout_config, transport=rec.transport) as provider:
        with pytest.raises(GatewayUnavailableException) as exc_info:
            await provider.obtain_access_token()
    assert "client-secret" not in exc_info.value.message


@pytest.mark.asyncio
async def test_token_transport_error_raises_unavailable(checkout_config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with PaypalTokenProvider(checkout_config, transport=httpx.MockTransport(handler)) as provider:
        with pytest.raises(GatewayUnavailableException):
            await provider.obtain_access_token()


@pytest.mark.asyncio
async def test_create_order_payload_and_approve_link(checkout_config):
    rec = Recorder(httpx.Response(201, json={
        "id": "ORDER-1",
        "status": "CREATED",
        "links": [
            {"rel": "self", "href": "https://api-m.sandbox.paypal.com/v2/checkout/orders/ORDER-1"},
            {"rel": "approve", "href": "https://www.sandbox.paypal.com/checkoutnow?token=ORDER-1"},
        ],
    }))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        created = await client.create_order(
            "tok",
            amount=Decimal("19.99"),
            currency_code="USD",
            description="Mock T-Shirt",
            return_url="http://r",
            cancel_url="http://c",
        )

    assert created.gateway_order_id == "ORDER-1"
    assert created.approval_url.endswith("token=ORDER-1")
    request = rec.requests[0]
    assert request.url.path == "/v2/checkout/orders"
    assert request.headers["Authorization"] == "Bearer tok"
    assert json.loads(request.content) == {
        "intent": "CAPTURE",
        "purchase_units": [
            {"amount": {"currency_code": "USD", "value": "19.99"}, "description": "Mock T-Shirt"}
        ],
        "application_context": {"return_url": "http://r", "cancel_url": "http://c"},
    }


@pytest.mark.asyncio
async def test_create_order_error_keeps_status_and_body(checkout_config):
    body = '{"name":"INVALID_REQUEST","message":"Request is not well-formed"}'
    rec = Recorder(httpx.Response(400, text=body))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        with pytest.raises(GatewayCallError) as exc_info:
            await client.create_order(
                "tok", amount=Decimal("1"), currency_code="USD", description="d", return_url="r", cancel_url="c"
            )
    assert exc_info.value.status_code == 400
    assert exc_info.value.body == body


@pytest.mark.asyncio
async def test_create_order_without_approve_link(checkout_config):
    rec = Recorder(httpx.Response(201, json={"id": "ORDER-1", "links": []}))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        with pytest.raises(GatewayResponseError) as exc_info:
            await client.create_order(
                "tok", amount=Decimal("1"), currency_code="USD", description="d", return_url="r", cancel_url="c"
            )
    assert exc_info.value.field == "links[rel=approve]"


@pytest.mark.asyncio
async def test_capture_parses_completed_order(checkout_config):
    rec = Recorder(httpx.Response(201, json=CAPTURED_ORDER))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        outcome = await client.capture_order("tok", "ORDER-1")

    assert isinstance(outcome, CaptureResult)
    assert outcome.amount == Decimal("19.99")
    request = rec.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v2/checkout/orders/ORDER-1/capture"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.content == b""


@pytest.mark.asyncio
async def test_capture_already_captured_is_tagged(checkout_config):
    body = json.dumps({
        "name": "UNPROCESSABLE_ENTITY",
        "details": [{"issue": "ORDER_ALREADY_CAPTURED", "description": "Order already captured."}],
    })
    rec = Recorder(httpx.Response(422, text=body))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        outcome = await client.capture_order("tok", "ORDER-1")

    assert isinstance(outcome, AlreadyCaptured)
    assert outcome.gateway_order_id == "ORDER-1"
    assert outcome.body == body


@pytest.mark.asyncio
async def test_capture_other_422_is_an_error(checkout_config):
    body = '{"details":[{"issue":"INSTRUMENT_DECLINED","description":"Declined"}]}'
    rec = Recorder(httpx.Response(422, text=body))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        with pytest.raises(GatewayCallError) as exc_info:
            await client.capture_order("tok", "ORDER-1")
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_capture_server_error(checkout_config):
    rec = Recorder(httpx.Response(500, text=""))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        with pytest.raises(GatewayCallError) as exc_info:
            await client.capture_order("tok", "ORDER-1")
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == ""


@pytest.mark.asyncio
async def test_capture_transport_error_has_no_status(checkout_config):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with PaypalClient(checkout_config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(GatewayCallError) as exc_info:
            await client.capture_order("tok", "ORDER-1")
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_get_order_escapes_id(checkout_config):
    rec = Recorder(httpx.Response(200, json=CAPTURED_ORDER))
    async with PaypalClient(checkout_config, transport=rec.transport) as client:
        result = await client.get_order("tok", "A/B")

    assert result.status == "COMPLETED"
    assert rec.requests[0].method == "GET"
    assert rec.requests[0].url.raw_path == b"/v2/checkout/orders/A%2FB"


def test_factory_rejects_unknown_provider(checkout_config):
    provider, client = get_payment_gateway(checkout_config)
    assert isinstance(provider, PaypalTokenProvider)
    assert isinstance(client, PaypalClient)
    with pytest.raises(ValueError):
        get_payment_gateway(checkout_config, "stripe")


def test_timeouts_map_onto_httpx_fields(checkout_config):
    config = checkout_config.model_copy(
        update={"timeouts": GatewayTimeouts(connect=0.5, read=2.0, write=2.5, pool=4.0)}
    )
    timeout = PaypalClient(config).timeouts
    assert (timeout.connect, timeout.read, timeout.write, timeout.pool) == (0.5, 2.0, 2.5, 4.0)
