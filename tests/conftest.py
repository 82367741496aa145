"""Pytest bootstrap configuration.

Ensure environment variables are set before test collection and module
imports that depend on application settings.
"""
import os

os.environ.setdefault("PAYPAL__CLIENT_ID", "test-client-id")
os.environ.setdefault("PAYPAL__CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("ORDER_STORE", "memory")
os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///:memory:")

import pytest
from pydantic import SecretStr

from application.dtos.checkout import CheckoutConfig
from infrastructure.catalog import StaticProductCatalog
from infrastructure.repositories.memory_order_repository import InMemoryOrderRepository
from stubs import StubGateway, StubTokenProvider


@pytest.fixture
def checkout_config() -> CheckoutConfig:
    return CheckoutConfig(
        client_id="client-id",
        client_secret=SecretStr("client-secret"),
        base_url="https://api-m.sandbox.paypal.com/",
        currency_code="usd",
        return_url="http://localhost:5173/checkout/success",
        cancel_url="http://localhost:5173/checkout/cancel",
    )


@pytest.fixture
def catalog() -> StaticProductCatalog:
    return StaticProductCatalog()


@pytest.fixture
def orders() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def token_provider() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()
