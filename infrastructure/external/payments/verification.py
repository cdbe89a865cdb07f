"""
TargetPay transaction validation pull requests.

Request::

    https://www.targetpay.com/<method>/check?rtlo=<id>[&trxid=<id>]&once=<0|1>&test=<0|1>

The check responses are not consistent across payment methods: a request
without a transaction id answers ``TP0021 No transaction ID given`` for
Mister Cash but ``TP0022 No transaction found with this ID.`` for iDEAL.
This client therefore only reports whether the request itself went through
and keeps the raw response for a method-specific classifier.
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from application.dtos.payments import VerificationOutcome
from application.ports.transport import HttpTransport
from core.logging_config import get_logger
from domain.common.exceptions import UnknownCheckEndpoint
from domain.payment.profiles import CHECK_ALIASES, PROFILES, PaymentMethod
from domain.payment.validators import parse_rtlo
from infrastructure.external.payments.base import HttpxTransport
from infrastructure.external.payments.exceptions import TransportFailure


logger = get_logger(__name__)

_TAGS = re.compile(r"<[^>]*>")
_DIGITS = re.compile(r"[0-9]+")


def resolve_check_endpoint(endpoint: PaymentMethod | str) -> str:
    """Check URL for a payment method, one of its aliases, or a literal URL."""
    if isinstance(endpoint, PaymentMethod):
        return PROFILES[endpoint].check_url
    value = str(endpoint).strip()
    if value.lower().startswith(("http://", "https://")):
        return value.rstrip("?")
    key = value.lower()
    if key not in CHECK_ALIASES:
        raise UnknownCheckEndpoint(endpoint)
    return PROFILES[CHECK_ALIASES[key]].check_url


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    try:
        return float(value) == 0
    except (TypeError, ValueError):
        return False


def _is_one(value: Any) -> bool:
    try:
        return float(value) == 1
    except (TypeError, ValueError):
        return False


class VerificationClient:
    def __init__(
        self,
        endpoint: PaymentMethod | str,
        rtlo: Any,
        trxid: Optional[str] = None,
        once: Any = True,
        test: Any = False,
        *,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        self.endpoint = resolve_check_endpoint(endpoint)
        self.rtlo = parse_rtlo(rtlo)
        self.transaction_id = trxid
        self.set_once(once)
        self.set_test(test)
        self.transport = transport or HttpxTransport()
        self._response: Optional[str] = None
        self._succeeded = False

    @classmethod
    def from_return_query(
        cls,
        endpoint: PaymentMethod | str,
        rtlo: Any,
        query: Mapping[str, Any],
        **kwargs: Any,
    ) -> "VerificationClient":
        """Build a client for the ``trxid`` TargetPay appended to the return URL.

        The value is only used when it is numeric after stripping tags and
        whitespace.
        """
        trxid = None
        value = query.get("trxid")
        if isinstance(value, str):
            value = _TAGS.sub("", value).strip()
            if _DIGITS.fullmatch(value):
                trxid = value
        return cls(endpoint, rtlo, trxid, **kwargs)

    def set_once(self, once: Any = True) -> None:
        """Check a transaction only once (default) or allow repeated checks."""
        self.once = once if isinstance(once, bool) else not _is_zero(once)

    def set_test(self, test: Any = False) -> None:
        self.test = test if isinstance(test, bool) else _is_one(test)

    @property
    def request_url(self) -> str:
        url = f"{self.endpoint}?rtlo={self.rtlo}"
        if self.transaction_id is not None:
            url += f"&trxid={quote_plus(str(self.transaction_id))}"
        url += "&once=1" if self.once else "&once=0"
        url += "&test=1" if self.test else "&test=0"
        return url

    @property
    def response(self) -> Optional[str]:
        return self._response

    @property
    def outcome(self) -> VerificationOutcome:
        return VerificationOutcome(
            request_succeeded=self._succeeded,
            response=self._response,
            request_url=self.request_url,
        )

    def validate(self) -> bool:
        """Issue the check request; True when the gateway answered at all."""
        url = self.request_url
        try:
            response = self.transport.get(url)
        except TransportFailure as exc:
            self._response = exc.diagnostic.strip()
            self._succeeded = False
            logger.warning("transaction_check_failed", url=url, response=self._response)
            return False
        self._response = response.text.strip()
        self._succeeded = True
        logger.info("transaction_check_response", url=url, response=self._response)
        return True

    pull = validate
