"""
TargetPay settings using pydantic-settings v2 with nested env keys.

Example: ``TARGETPAY__RTLO=69391``, ``TARGETPAY__TIMEOUTS__TOTAL=10``,
``TARGETPAY__WEBHOOK__TRUSTED_PREFIXES='["89.184.168"]'``.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportTimeouts(BaseModel):
    connect: float = 5.0
    read: float = 10.0
    write: float = 10.0
    total: float = 15.0


class TransportRetry(BaseModel):
    # Extra attempts after the first one; the gateway calls are not
    # idempotent on their side, so retrying is opt-in.
    max: int = 0
    base_backoff: float = 0.2


class WebhookSettings(BaseModel):
    # Literal address prefixes of the TargetPay push servers. Matched as
    # string prefixes, not as CIDR networks.
    trusted_prefixes: list[str] = Field(default_factory=lambda: ["89.184.168", "78.152.58"])


class TargetPaySettings(BaseSettings):
    rtlo: Optional[int] = None
    test_mode: bool = False
    timeouts: TransportTimeouts = Field(default_factory=TransportTimeouts)
    retry: TransportRetry = Field(default_factory=TransportRetry)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TARGETPAY__",
        extra="ignore",
        env_nested_delimiter="__",
    )


payment_settings = TargetPaySettings()
