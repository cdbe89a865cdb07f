"""
HTTP transport port (application/ports) exposing a replaceable protocol.

The TargetPay clients only issue plain GET requests and read the body as
text. Timeouts, cancellation and retry policy belong to the implementation.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str


@runtime_checkable
class HttpTransport(Protocol):
    """Blocking GET transport.

    Implementations raise ``TransportFailure`` for connection, DNS and
    timeout errors. Any HTTP response, whatever its status, is returned.
    """

    def get(self, url: str) -> TransportResponse: ...
