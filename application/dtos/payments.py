"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class StartTransaction(BaseModel):
    """Configuration supplied by the caller to start one transaction.

    Fields are applied in declaration order, which is also their order in the
    outbound request. Values are validated by the domain layer, not here.
    """
    method: str
    rtlo: Optional[Any] = None
    issuer_id: Optional[str] = None
    country: Optional[Any] = None
    amount: Any
    currency: Optional[str] = None
    description: Optional[Any] = None
    locale: Optional[str] = None
    return_url: str
    report_url: Optional[str] = None
    client_ip: Optional[str] = None
    remote_addr: Optional[str] = None


class TransactionOutcome(BaseModel):
    started: bool
    method: str
    state: str
    transaction_id: Optional[str] = None
    redirect_url: Optional[str] = None
    response: Optional[str] = None
    request_url: Optional[str] = None


class CheckTransaction(BaseModel):
    """Pull request parameters; ``endpoint`` is a method name, alias or URL."""
    endpoint: str
    rtlo: Optional[Any] = None
    transaction_id: Optional[str] = None
    once: bool = True
    test: Optional[bool] = None


class VerificationOutcome(BaseModel):
    """Raw check response and the transport-level success flag.

    The gateway's check responses differ per payment method, so business
    level success is left to a caller-supplied classifier.
    """
    request_succeeded: bool
    response: Optional[str] = None
    request_url: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def classify(self, classifier: Callable[[str], T]) -> Optional[T]:
        if not self.request_succeeded or self.response is None:
            return None
        return classifier(self.response)


class PushResponse(BaseModel):
    """HTTP response to write back for an inbound push delivery."""
    status_code: int
    reason: str
    protocol: str = "HTTP/1.1"
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @property
    def status_line(self) -> str:
        return f"{self.protocol} {self.status_code} {self.reason}"
