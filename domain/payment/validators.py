"""
Transaction parameter validation and normalization.

Each field is validated independently so setters may be called in any order.
Currency and locale are permissive: a value of the wrong length is ignored
rather than rejected.
"""
from __future__ import annotations

import ipaddress
import math
import re
from typing import Annotated, Any, Mapping, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints
from pydantic import ValidationError as PydanticValidationError

from domain.common.exceptions import (
    AmountTooHigh,
    AmountTooLow,
    EmptyDescription,
    InvalidAmountFormat,
    InvalidClientIP,
    InvalidDescriptionType,
    InvalidReportURL,
    InvalidReturnURL,
    MissingAccountCode,
    UnknownIssuer,
    UnsupportedCountry,
)
from .profiles import PaymentMethodProfile

MAX_DESCRIPTION_LENGTH = 32

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DIGITS = re.compile(r"[0-9]+")
_NUMERIC = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
_ISSUER_ID = re.compile(r"[0-9]{4}")
_WHITESPACE = re.compile(r"\s+")

_ABSOLUTE_URL = TypeAdapter(Annotated[AnyUrl, UrlConstraints(host_required=True)])


def parse_amount(value: Any) -> int:
    """Coerce an amount in cents to ``int`` or raise ``InvalidAmountFormat``."""
    if isinstance(value, bool):
        raise InvalidAmountFormat(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value.strip())
    raise InvalidAmountFormat(value)


def parse_rtlo(value: Any) -> int:
    """Coerce a layout code to ``int``, truncating numeric strings like ``"12.5"``.

    Layout codes are never negative; anything non-numeric means no code.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise MissingAccountCode(value)
    if isinstance(value, str):
        text = value.strip()
        if _DIGITS.fullmatch(text):
            return int(text)
        if not _NUMERIC.fullmatch(text):
            raise MissingAccountCode(value)
        value = float(text)
    if isinstance(value, float) and not math.isfinite(value):
        raise MissingAccountCode(value)
    if value < 0:
        raise MissingAccountCode(value)
    return int(value)


def normalize_currency(value: Any) -> Optional[str]:
    """ISO 4217 code, upper-cased; ``None`` means "leave unset"."""
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    return code if len(code) == 3 else None


def normalize_locale(value: Any) -> Optional[str]:
    """ISO 639 code, lower-cased; ``None`` means "leave unset"."""
    if not isinstance(value, str):
        return None
    code = value.strip().lower()
    return code if len(code) == 2 else None


def normalize_description(value: Any) -> str:
    """
    Normalize a payment description.

    Numbers are coerced to strings, euro signs are spelled out, control
    characters dropped, whitespace collapsed and the result cut to 32
    characters. Normalizing an already normalized description is a no-op.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidDescriptionType(value)
    text = str(value)
    text = text.replace("€ ", "EUR ").replace(" €", " euro").replace("€", " EUR ")
    text = "".join(ch for ch in text if ch.isprintable() or ch.isspace())
    text = _WHITESPACE.sub(" ", text).strip()
    text = text[:MAX_DESCRIPTION_LENGTH].rstrip()
    if not text:
        raise EmptyDescription()
    return text


def is_absolute_url(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _ABSOLUTE_URL.validate_python(value.strip())
    except PydanticValidationError:
        return False
    return True


def validate_return_url(value: Any) -> str:
    if not is_absolute_url(value):
        raise InvalidReturnURL(value)
    return value.strip()


def validate_report_url(value: Any) -> str:
    if not is_absolute_url(value):
        raise InvalidReportURL(value)
    return value.strip()


def validate_client_ip(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidClientIP(value)
    try:
        ipaddress.ip_address(value.strip())
    except ValueError as exc:
        raise InvalidClientIP(value) from exc
    return value.strip()


class ParameterValidator:
    """Validation rules that depend on the payment method profile."""

    def __init__(self, profile: PaymentMethodProfile) -> None:
        self.profile = profile

    def amount(self, value: Any) -> int:
        amount = parse_amount(value)
        self.check_bounds(amount)
        return amount

    def check_bounds(self, amount: int) -> None:
        if self.profile.accepts_amount(amount):
            return
        if amount < self.profile.min_amount:
            raise AmountTooLow(amount, self.profile.min_amount)
        raise AmountTooHigh(amount, self.profile.max_amount)

    def country(self, value: Any) -> int:
        """Map an alpha-2, alpha-3 or numeric country code to the gateway value."""
        if not self.profile.supports_country:
            raise UnsupportedCountry(value, self.profile.label)
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise UnsupportedCountry(value, self.profile.label)
        key = str(value).strip().upper()
        if key not in self.profile.countries:
            raise UnsupportedCountry(value, self.profile.label)
        return self.profile.countries[key]

    def issuer(self, value: Any, issuers: Mapping[str, str]) -> str:
        if not self.profile.requires_issuer:
            raise UnknownIssuer(value)
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise UnknownIssuer(value)
        issuer_id = str(value).strip()
        if not _ISSUER_ID.fullmatch(issuer_id) or issuer_id not in issuers:
            raise UnknownIssuer(value)
        return issuer_id
