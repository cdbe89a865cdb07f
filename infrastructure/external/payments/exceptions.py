"""
Exceptions for TargetPay round trips mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


class TransportFailure(BusinessException):
    """Connection, DNS or timeout failure of an outbound call."""

    def __init__(self, message: str, *, url: str | None = None, transport_code: str | None = None, details: Optional[dict] = None):
        full_details = {"url": url, "transport_code": transport_code}
        if details:
            full_details.update(details)
        self.transport_code = transport_code
        super().__init__(
            code=PaymentCode.TRANSPORT_FAILURE,
            message=message,
            error_type="TransportFailure",
            details=full_details,
        )

    @property
    def diagnostic(self) -> str:
        """Error text kept as the raw response, prefixed with the transport code."""
        if self.transport_code:
            return f"{self.transport_code} {self.message}"
        return self.message


class ProtocolError(BusinessException):
    """A transport response that does not match the gateway grammar."""

    def __init__(self, message: str, *, response: str | None = None, details: Optional[dict] = None):
        full_details = {"response": response}
        if details:
            full_details.update(details)
        self.response = response
        super().__init__(
            code=PaymentCode.PROTOCOL_ERROR,
            message=message,
            error_type="ProtocolError",
            details=full_details,
        )


class TrustFailure(BusinessException):
    """An inbound push delivery rejected by the source-address or method check."""

    def __init__(self, message: str, *, remote_addr: str | None, method: str | None, details: Optional[dict] = None):
        full_details = {"remote_addr": remote_addr, "method": method}
        if details:
            full_details.update(details)
        self.remote_addr = remote_addr
        self.method = method
        super().__init__(
            code=PaymentCode.TRUST_FAILURE,
            message=message,
            error_type="TrustFailure",
            details=full_details,
        )
