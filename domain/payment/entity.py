"""
Payment domain entities - the transaction request and its start result.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from domain.common.exceptions import (
    InvalidAmountFormat,
    InvalidClientIP,
    InvalidReturnURL,
    UnknownIssuer,
    ValidationError,
)
from .profiles import PaymentMethodProfile
from .request_builder import RequestBuilder
from .validators import (
    ParameterValidator,
    normalize_currency,
    normalize_description,
    normalize_locale,
    parse_rtlo,
    validate_client_ip,
    validate_report_url,
    validate_return_url,
)

# Wire names of the request fields
RTLO = "rtlo"
ISSUER = "bank"
AMOUNT = "amount"
CURRENCY = "currency"
DESCRIPTION = "description"
LOCALE = "lang"
RETURN_URL = "returnurl"
REPORT_URL = "reporturl"
CLIENT_IP = "userip"
COUNTRY = "country"

# Values the gateway assumes for fields that were never sent
FIELD_DEFAULTS: Mapping[str, str] = MappingProxyType({
    CURRENCY: "EUR",
    LOCALE: "nl",
})


def resolve_default(name: str) -> Optional[str]:
    """Default a field resolves to when it is read while unset."""
    return FIELD_DEFAULTS.get(name)


class TransactionState(str, Enum):
    """Transaction lifecycle states"""
    CONFIGURING = "configuring"
    STARTED = "started"   # terminal, success
    FAILED = "failed"     # terminal


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of a successful start; never partially populated."""
    transaction_id: str
    redirect_url: str
    raw_response: str


class TransactionRequest:
    """
    Transaction fields for one payment.

    Fields are kept in the order they were first set, which is the order in
    which they appear in the outbound request. Unset fields are absent from
    ``fields``; read accessors fall back to ``resolve_default``.
    """

    def __init__(
        self,
        profile: PaymentMethodProfile,
        rtlo: Any,
        *,
        remote_addr: Optional[str] = None,
    ) -> None:
        self.profile = profile
        self.validator = ParameterValidator(profile)
        self.remote_addr = remote_addr
        self._fields: dict[str, Any] = {RTLO: parse_rtlo(rtlo)}

    @property
    def fields(self) -> Mapping[str, Any]:
        return MappingProxyType(self._fields)

    def is_set(self, name: str) -> bool:
        return name in self._fields

    def get(self, name: str) -> Any:
        return self._fields.get(name, resolve_default(name))

    @property
    def rtlo(self) -> int:
        return self._fields[RTLO]

    @property
    def amount(self) -> Optional[int]:
        return self.get(AMOUNT)

    @property
    def currency(self) -> str:
        return self.get(CURRENCY)

    @property
    def description(self) -> Optional[str]:
        return self.get(DESCRIPTION)

    @property
    def locale(self) -> str:
        return self.get(LOCALE)

    @property
    def return_url(self) -> Optional[str]:
        return self.get(RETURN_URL)

    @property
    def report_url(self) -> Optional[str]:
        return self.get(REPORT_URL)

    @property
    def client_ip(self) -> Optional[str]:
        return self.get(CLIENT_IP)

    @property
    def issuer_id(self) -> Optional[str]:
        return self.get(ISSUER)

    @property
    def country(self) -> Optional[int]:
        return self.get(COUNTRY)

    def set_amount(self, amount: Any) -> None:
        self._fields[AMOUNT] = self.validator.amount(amount)

    def set_currency(self, currency: Any = "EUR") -> None:
        code = normalize_currency(currency)
        if code is not None:
            self._fields[CURRENCY] = code

    def set_description(self, description: Any) -> None:
        self._fields[DESCRIPTION] = normalize_description(description)

    def set_locale(self, locale: Any) -> None:
        code = normalize_locale(locale)
        if code is not None:
            self._fields[LOCALE] = code

    def set_return_url(self, url: Any) -> None:
        url = validate_return_url(url)
        self._fields[RETURN_URL] = url
        if self._fields.get(REPORT_URL) == url:
            del self._fields[REPORT_URL]

    def set_report_url(self, url: Any) -> None:
        url = validate_report_url(url)
        if url == self._fields.get(RETURN_URL):
            self._fields.pop(REPORT_URL, None)
            return
        self._fields[REPORT_URL] = url

    def set_client_ip(self, ip: Optional[str] = None) -> None:
        if ip is None:
            ip = self.remote_addr
        self._fields[CLIENT_IP] = validate_client_ip(ip)

    def set_issuer(self, issuer_id: Any, issuers: Mapping[str, str]) -> None:
        self._fields[ISSUER] = self.validator.issuer(issuer_id, issuers)

    def set_country(self, country: Any) -> None:
        self._fields[COUNTRY] = self.validator.country(country)

    def ensure_ready(self) -> None:
        """Raise the matching validation error if the request cannot start."""
        if AMOUNT not in self._fields:
            raise InvalidAmountFormat(None)
        self.validator.check_bounds(self._fields[AMOUNT])
        if RETURN_URL not in self._fields:
            raise InvalidReturnURL(None)
        for name in self.profile.required_fields:
            if name in self._fields:
                continue
            if name == ISSUER:
                raise UnknownIssuer(None)
            if name == CLIENT_IP:
                raise InvalidClientIP(None)
            raise ValidationError(f"{name} is required", field=name)

    def url(self) -> str:
        return RequestBuilder(self.profile.start_url).build(self._fields)
