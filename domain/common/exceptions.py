"""Domain-level business exceptions shared by domain and infrastructure.

Every validation failure raised while configuring a transaction derives from
``ValidationError``; none of them ever touches the network.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.codes import BusinessCode
from shared.codes.payment_codes import (
    TP_AMOUNT_TOO_HIGH,
    TP_AMOUNT_TOO_LOW,
    TP_COUNTRY_NOT_SUPPORTED,
    TP_NO_LAYOUT_CODE,
)


class BusinessException(Exception):
    """Base business exception."""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class ValidationError(BusinessException):
    """Malformed or out-of-range transaction input."""

    gateway_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
        code: int = BusinessCode.PARAM_VALIDATION_ERROR,
    ):
        if self.gateway_code:
            message = f"{self.gateway_code} {message}"
        super().__init__(
            code=code,
            message=message,
            error_type=type(self).__name__,
            details=details,
            field=field,
        )


class InvalidAmountFormat(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            f"amount must be an integer amount in cents, {type(value).__name__} given",
            field="amount",
            details={"value": repr(value)},
            code=BusinessCode.PARAM_TYPE_ERROR,
        )


class AmountTooLow(ValidationError):
    gateway_code = TP_AMOUNT_TOO_LOW

    def __init__(self, amount: int, minimum: int):
        super().__init__(
            "Amount too low",
            field="amount",
            details={"amount": amount, "minimum": minimum},
        )


class AmountTooHigh(ValidationError):
    gateway_code = TP_AMOUNT_TOO_HIGH

    def __init__(self, amount: int, maximum: int):
        super().__init__(
            "Amount too high",
            field="amount",
            details={"amount": amount, "maximum": maximum},
        )


class InvalidDescriptionType(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            f"description must be a string or number, {type(value).__name__} given",
            field="description",
            code=BusinessCode.PARAM_TYPE_ERROR,
        )


class EmptyDescription(ValidationError):
    def __init__(self):
        super().__init__("description is empty after normalization", field="description")


class InvalidReturnURL(ValidationError):
    def __init__(self, url: Any):
        super().__init__(
            "return URL must be an absolute URL",
            field="returnurl",
            details={"url": url},
        )


class InvalidReportURL(ValidationError):
    def __init__(self, url: Any):
        super().__init__(
            "report URL must be an absolute URL",
            field="reporturl",
            details={"url": url},
        )


class InvalidClientIP(ValidationError):
    def __init__(self, ip: Any):
        super().__init__(
            "client IP must be an IPv4 or IPv6 address",
            field="userip",
            details={"ip": ip},
        )


class MissingAccountCode(ValidationError):
    gateway_code = TP_NO_LAYOUT_CODE

    def __init__(self, rtlo: Any = None):
        super().__init__(
            "No layout code",
            field="rtlo",
            details={"rtlo": repr(rtlo)},
            code=BusinessCode.PARAM_MISSING,
        )


class UnsupportedCountry(ValidationError):
    gateway_code = TP_COUNTRY_NOT_SUPPORTED

    def __init__(self, country: Any, method: str):
        super().__init__(
            f"Country not supported for {method}",
            field="country",
            details={"country": country, "method": method},
        )


class UnknownIssuer(ValidationError):
    def __init__(self, issuer_id: Any):
        super().__init__(
            "issuer is not one of the selectable issuers",
            field="bank",
            details={"issuer_id": issuer_id},
        )


class UnknownCheckEndpoint(ValidationError):
    def __init__(self, name: Any):
        super().__init__(
            f"unknown check endpoint: {name}",
            field="type",
            details={"name": name},
        )
