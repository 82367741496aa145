"""
Payment-related settings using pydantic-settings v2 with nested env keys.

This module is isolated so core.config.Settings stays application-wide.
Adapters never read these directly; the composition root turns them into
an immutable `CheckoutConfig`.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, SecretStr


class PaymentTimeouts(BaseModel):
    connect: float = 1.0
    read: float = 3.0
    write: float = 3.0
    pool: float = 5.0


class PaypalSettings(BaseModel):
    client_id: Optional[str] = None
    client_secret: Optional[SecretStr] = None
    base_url: str = "https://api-m.sandbox.paypal.com"
    currency_code: str = "USD"
    return_url: str = "http://localhost:5173/checkout/success"
    cancel_url: str = "http://localhost:5173/checkout/cancel"


class PaymentSettings(BaseSettings):
    default_provider: str = Field(default="paypal", validation_alias="PAYMENT__DEFAULT_PROVIDER")
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)

    paypal: PaypalSettings = Field(default_factory=PaypalSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
